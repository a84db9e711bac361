"""Domain Layer: models, errors, events and interfaces of the cache.

Nothing in this layer touches the file system directly.
"""
