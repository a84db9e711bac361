"""Domain Events emitted by the cache service.

Passed to an optional listener so callers can observe hits, misses, expiry
and self-repair without the service depending on any reporting backend.
"""

from dataclasses import dataclass, field
import time
from typing import Callable, Tuple

# Miss reasons
MISS_UNKNOWN = "unknown"            # No metadata file
MISS_ORPHAN = "orphan"              # Data file without metadata (removed)
MISS_DATA_MISSING = "data_missing"  # Valid metadata, no data file

# Repair reasons
REPAIR_ORPHAN_DATA = "orphan_data"
REPAIR_CORRUPT_METADATA = "corrupt_metadata"
REPAIR_CORRUPT_DATA = "corrupt_data"


@dataclass
class CacheEvent:
    """Base class for cache events."""
    namespace: str
    name: str


@dataclass
class CacheItemStored(CacheEvent):
    """Event triggered after an item has been written."""
    ttl_secs: int
    size_bytes: int
    timestamp: float = field(default_factory=time.time)


@dataclass
class CacheHit(CacheEvent):
    """Event triggered when a fresh item is returned."""
    timestamp: float = field(default_factory=time.time)


@dataclass
class CacheMiss(CacheEvent):
    """Event triggered when nothing usable was found."""
    reason: str
    timestamp: float = field(default_factory=time.time)


@dataclass
class CacheItemExpired(CacheEvent):
    """Event triggered when an expired item is found and removed."""
    ttl_secs: int
    age_secs: int
    timestamp: float = field(default_factory=time.time)


@dataclass
class CacheItemRepaired(CacheEvent):
    """Event triggered when inconsistent on-disk state is cleaned up."""
    reason: str
    removed: Tuple[str, ...] = ()
    timestamp: float = field(default_factory=time.time)


@dataclass
class CacheItemDeleted(CacheEvent):
    """Event triggered when an item is deleted on request."""
    timestamp: float = field(default_factory=time.time)


@dataclass
class CacheCleared:
    """Event triggered when a namespace (or the whole instance) is cleared."""
    instance: str
    namespace: str = ""  # Empty when the whole instance was cleared
    timestamp: float = field(default_factory=time.time)


CacheEventListener = Callable[[object], None]
