"""Error types raised by the cache.

Corrupt cache contents never surface as errors: they are repaired and
reported as a miss. What remains are failures the caller has to see.
"""

from pathlib import Path
from typing import Optional, Union


class FileCacheError(Exception):
    """Base class for all cache errors."""


class CacheIOError(FileCacheError):
    """A required file system operation failed."""

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None):
        super().__init__(message)
        self.path = Path(path) if path is not None else None


class CacheEncodingError(FileCacheError):
    """A value or metadata record could not be encoded or decoded."""


class CacheClockError(FileCacheError):
    """The system clock reported a time before the Unix epoch."""
