"""Cart storage factory.

Provides get_storage() / set_storage() to swap implementations:
- MemoryStorage for development and testing (default)
- FileStorage for a single-node deployment, rooted at CART_STORAGE_DIR
"""

import os

from shopping.cart.storage.port import CartStorage

_current_storage: CartStorage | None = None


def get_storage() -> CartStorage:
    """Return the configured cart storage (singleton).

    Selected by the CART_STORAGE_ADAPTER environment variable.
    """
    global _current_storage
    if _current_storage is None:
        adapter = os.environ.get("CART_STORAGE_ADAPTER", "memory")
        if adapter == "memory":
            from shopping.cart.storage.memory_adapter import MemoryStorage

            _current_storage = MemoryStorage()
        elif adapter == "file":
            from shopping.cart.storage.file_adapter import FileStorage

            _current_storage = FileStorage(os.environ.get("CART_STORAGE_DIR", "data/carts"))
        else:
            raise ValueError(f"Unknown cart storage adapter: {adapter}")
    return _current_storage


def set_storage(storage: CartStorage) -> None:
    """Override the active storage (useful for tests)."""
    global _current_storage
    _current_storage = storage


def reset_storage() -> None:
    """Reset to the configured default."""
    global _current_storage
    _current_storage = None
