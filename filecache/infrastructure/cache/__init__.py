"""File Cache Service Implementation.

Provides the concrete CacheService backed by JSON documents and sidecar
metadata files on the local disk.
Bounded Context: Cache Management
"""
