"""Interface for caching mechanisms.

Defines the contract for storing, retrieving and removing cached items
addressed by (namespace, item name) within one cache instance.
"""

import abc
from typing import Any, Callable, Optional, TypeVar

from ..models.common import ItemName, Namespace, TtlSeconds

T = TypeVar("T")


class CacheService(abc.ABC):
    """Abstract Base Class for caching operations."""

    @abc.abstractmethod
    def store(self, namespace: Namespace, name: ItemName, value: Any, ttl_secs: TtlSeconds = 0) -> None:
        """Stores an item, replacing any previous item under the same key.

        Args:
            namespace: Grouping the item belongs to.
            name: Name of the item inside the namespace.
            value: The item to store. Must be serializable by the cache codec.
            ttl_secs: Time-to-live in seconds, 0 for an item that never expires.
        """
        pass

    @abc.abstractmethod
    def get(
        self,
        namespace: Namespace,
        name: ItemName,
        factory: Optional[Callable[[Any], T]] = None,
    ) -> Optional[Any]:
        """Retrieves an item from the cache.

        Args:
            namespace: Grouping the item belongs to.
            name: Name of the item inside the namespace.
            factory: Optional callable building the caller's type from the decoded value.

        Returns:
            The cached item if found and not expired, otherwise None.
        """
        pass

    @abc.abstractmethod
    def delete(self, namespace: Namespace, name: ItemName) -> bool:
        """Deletes an item.

        Returns:
            True if any file belonging to the item was removed.
        """
        pass

    @abc.abstractmethod
    def clear(self, namespace: Optional[Namespace] = None) -> None:
        """Clears a whole namespace, or every namespace when none is given."""
        pass
