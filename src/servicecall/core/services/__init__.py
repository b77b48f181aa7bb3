"""Core services: resolution, normalization, pagination, retry policy."""
