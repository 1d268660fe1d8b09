import os
from pathlib import Path

import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Pytest hook to run before collecting tests.

    Selects the Protean config overlay and pins the adapters to their
    in-process fakes so no test reaches a real storefront API.
    """
    os.environ["PROTEAN_ENV"] = session.config.option.env
    os.environ["CART_STORAGE_ADAPTER"] = "memory"
    os.environ["COMMERCE_BACKEND"] = "fake"
    os.environ.pop("PAYMENT_PROVIDER", None)


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = Path(item.fspath)

        if "/domain/" in str(test_path):
            item.add_marker(pytest.mark.domain)
        elif "/application/" in str(test_path):
            item.add_marker(pytest.mark.application)
        elif "/integration/" in str(test_path):
            item.add_marker(pytest.mark.integration)
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(autouse=True)
def run_around_tests():
    """Reset the storage and backend singletons after every test."""
    yield

    from shopping.cart.storage import reset_storage
    from shopping.checkout import reset_backend

    reset_storage()
    reset_backend()
