"""Application layer: commands, queries, handlers and shared services."""
