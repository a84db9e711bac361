"""Sidecar metadata record stored next to every cached item."""

import json
from dataclasses import dataclass
from typing import Any, Dict, Optional

from filecache.domain.errors import CacheEncodingError
from filecache.domain.models.common import MAX_U64, TtlSeconds, UnixTime


def _require_u64(raw: Dict[str, Any], field_name: str) -> int:
    if field_name not in raw:
        raise CacheEncodingError(f"metadata field '{field_name}' is missing")
    value = raw[field_name]
    # bool is an int subclass, but true/false is not a valid counter
    if isinstance(value, bool) or not isinstance(value, int):
        raise CacheEncodingError(f"metadata field '{field_name}' must be an integer, got {value!r}")
    if value < 0 or value > MAX_U64:
        raise CacheEncodingError(f"metadata field '{field_name}' out of range: {value}")
    return value


@dataclass(frozen=True)
class CacheItemMetadata:
    """TTL and creation time of a cache item.

    Serialized as ``{"ttl_secs":<int>,"created_unixtime":<int>}``.
    """
    ttl_secs: TtlSeconds
    created_unixtime: UnixTime

    @property
    def is_immortal(self) -> bool:
        return self.ttl_secs == 0

    @property
    def expires_unixtime(self) -> Optional[int]:
        """Last second at which the item is still fresh, or None if it never expires."""
        if self.is_immortal:
            return None
        return self.created_unixtime + self.ttl_secs

    def is_expired(self, now: int) -> bool:
        """Checks whether the item is stale at ``now``.

        A clock that moved backwards (``now <= created_unixtime``) never
        expires an item, whatever its TTL.
        """
        if self.ttl_secs == 0 or now <= self.created_unixtime:
            return False
        return (now - self.created_unixtime) > self.ttl_secs

    def to_json(self) -> bytes:
        payload = {"ttl_secs": self.ttl_secs, "created_unixtime": self.created_unixtime}
        return json.dumps(payload, separators=(",", ":")).encode("utf-8")

    @classmethod
    def from_json(cls, payload: bytes) -> "CacheItemMetadata":
        """Decodes and validates a metadata record.

        Raises:
            CacheEncodingError: If the payload is not valid JSON or has the wrong shape.
        """
        try:
            raw = json.loads(payload)
        except (ValueError, RecursionError) as e:
            # RecursionError: deeply nested garbage such as "[[[[..."
            raise CacheEncodingError(f"invalid metadata JSON: {e}") from e
        if not isinstance(raw, dict):
            raise CacheEncodingError(f"metadata must be a JSON object, got {type(raw).__name__}")
        return cls(
            ttl_secs=TtlSeconds(_require_u64(raw, "ttl_secs")),
            created_unixtime=UnixTime(_require_u64(raw, "created_unixtime")),
        )
