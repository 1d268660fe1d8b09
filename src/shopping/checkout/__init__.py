"""Commerce backend factory.

Provides get_backend() / set_backend() to swap implementations:
- FakeCommerceBackend for development and testing (default)
- HttpCommerceBackend against STOREFRONT_API_URL in production
"""

import os

from shopping.checkout.port import CommerceBackend

DEFAULT_API_URL = "http://localhost:3001/api"

_current_backend: CommerceBackend | None = None


def get_backend() -> CommerceBackend:
    """Return the configured commerce backend (singleton).

    Selected by the COMMERCE_BACKEND environment variable.
    """
    global _current_backend
    if _current_backend is None:
        adapter = os.environ.get("COMMERCE_BACKEND", "fake")
        if adapter == "fake":
            from shopping.checkout.fake_adapter import FakeCommerceBackend

            _current_backend = FakeCommerceBackend()
        elif adapter == "http":
            from shopping.checkout.http_adapter import HttpCommerceBackend

            _current_backend = HttpCommerceBackend(os.environ.get("STOREFRONT_API_URL", DEFAULT_API_URL))
        else:
            raise ValueError(f"Unknown commerce backend: {adapter}")
    return _current_backend


def set_backend(backend: CommerceBackend) -> None:
    """Override the active backend (useful for tests)."""
    global _current_backend
    _current_backend = backend


def reset_backend() -> None:
    """Reset to the configured default."""
    global _current_backend
    _current_backend = None


def close_backend() -> None:
    """Close the active backend, if one was created, and reset the factory."""
    global _current_backend
    if _current_backend is not None:
        _current_backend.close()
    _current_backend = None
