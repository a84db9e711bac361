"""Domain models (value objects) for cache entries."""
