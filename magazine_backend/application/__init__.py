"""Application layer: commands, queries and their DTOs."""
