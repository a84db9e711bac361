"""filecache: a local, file-system-backed key/value cache with per-item TTL."""

__version__ = "0.1.0"
