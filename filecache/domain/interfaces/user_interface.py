"""Interface for presenting cache contents and messages to the user.

Allows different UI implementations (e.g., console, tests with mocks).
"""

import abc
from typing import Any

from filecache.domain.models.metadata import CacheItemMetadata


class UserInterface(abc.ABC):
    """Abstract Base Class for user interaction."""

    @abc.abstractmethod
    def display_value(self, value: Any) -> None:
        """Displays a cached value."""
        pass

    @abc.abstractmethod
    def display_metadata(self, namespace: str, name: str, metadata: CacheItemMetadata, now: int) -> None:
        """Displays the metadata of a cached item.

        Args:
            namespace: Namespace of the item.
            name: Name of the item.
            metadata: The item's metadata record.
            now: Current unix time, used to show the remaining lifetime.
        """
        pass

    @abc.abstractmethod
    def display_error(self, error_message: str, **kwargs: Any) -> None:
        """Displays an error message to the user."""
        pass

    @abc.abstractmethod
    def display_warning(self, warning_message: str, **kwargs: Any) -> None:
        """Displays a warning message to the user."""
        pass

    @abc.abstractmethod
    def display_info(self, info_message: str, **kwargs: Any) -> None:
        """Displays an informational message to the user."""
        pass
