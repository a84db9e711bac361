"""Domain Event definitions.

Represents significant occurrences inside the cache that instrumentation
hooks might react to.
"""
