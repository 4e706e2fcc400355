"""Infrastructure adapters: persistence, storage, external APIs."""
