"""Domain services: stateless rules and aggregations."""
