"""Cart storage port (abstract interface).

A string key/value store with the shape of browser local storage. The cart
record is written under a single key after every mutation and read once when
a cart session starts.
"""

from abc import ABC, abstractmethod


class CartStorage(ABC):
    """Abstract key/value storage for persisted cart records."""

    @abstractmethod
    def get_item(self, key: str) -> str | None:
        """Return the stored value, or None when the key is absent."""
        ...

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""
        ...

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Delete ``key``. Absent keys are ignored."""
        ...
