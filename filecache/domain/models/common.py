"""Defines common Value Objects used across the cache.

These objects represent simple values like namespaces, item names and
timestamps, ensuring consistency and type safety.
"""

from typing import NewType

# === Core Value Objects ===

# Using NewType for semantic clarity, although they are plain values at runtime.
InstanceName = NewType("InstanceName", str)    # Top-level directory under the cache root
Namespace = NewType("Namespace", str)          # Grouping directory under the instance
ItemName = NewType("ItemName", str)            # Stem of the data/metadata file names
TtlSeconds = NewType("TtlSeconds", int)        # 0 means the item never expires
UnixTime = NewType("UnixTime", int)            # Whole seconds since the epoch

# Largest value a metadata field may hold (unsigned 64-bit)
MAX_U64 = 2**64 - 1


def require_non_blank(value: str, field_name: str) -> str:
    """Validates that an identifier is a non-blank string.

    Args:
        value: The identifier to check.
        field_name: Name used in the error message.

    Returns:
        The value unchanged.

    Raises:
        ValueError: If the value is not a string or is empty/whitespace only.
    """
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"{field_name} must be a non-blank string")
    return value
