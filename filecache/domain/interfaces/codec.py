"""Interface for value codecs.

A codec turns a cached value into the raw payload written to the data file
and back again. Decoding malformed input must raise CacheEncodingError.
"""

import abc
from typing import Any


class Codec(abc.ABC):
    """Abstract Base Class for value serialization."""

    @abc.abstractmethod
    def encode(self, value: Any) -> bytes:
        """Encodes a value into a byte payload.

        Raises:
            CacheEncodingError: If the value cannot be serialized.
        """
        pass

    @abc.abstractmethod
    def decode(self, payload: bytes) -> Any:
        """Decodes a byte payload back into a value.

        Raises:
            CacheEncodingError: If the payload is malformed.
        """
        pass
