"""JSON codec for cached values.

Writes compact UTF-8 JSON with no envelope around the value. Dataclass
instances are stored as plain objects; pass a ``factory`` to
``FileCacheService.get`` to rebuild them on the way out.
"""

import json
import logging
from dataclasses import asdict, is_dataclass
from typing import Any

from filecache.domain.errors import CacheEncodingError
from filecache.domain.interfaces.codec import Codec

logger = logging.getLogger(__name__)


def _encode_default(obj: Any) -> Any:
    """Fallback for types json does not know about."""
    if is_dataclass(obj) and not isinstance(obj, type):
        return asdict(obj)
    if isinstance(obj, (set, frozenset)):
        return sorted(obj)
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


class JsonCodec(Codec):
    """Codec storing values as compact JSON documents."""

    def __init__(self, ensure_ascii: bool = False):
        self.ensure_ascii = ensure_ascii

    def encode(self, value: Any) -> bytes:
        try:
            text = json.dumps(
                value,
                separators=(",", ":"),
                ensure_ascii=self.ensure_ascii,
                allow_nan=False,
                default=_encode_default,
            )
        except (TypeError, ValueError, RecursionError) as e:
            logger.debug(f"Failed to encode value of type {type(value).__name__}: {e}")
            raise CacheEncodingError(f"cannot encode value: {e}") from e
        return text.encode("utf-8")

    def decode(self, payload: bytes) -> Any:
        try:
            return json.loads(payload.decode("utf-8"))
        except (ValueError, RecursionError) as e:
            # JSONDecodeError, UnicodeDecodeError, or nesting too deep to parse
            raise CacheEncodingError(f"cannot decode value: {e}") from e
