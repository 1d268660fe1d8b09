import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def shopping_bed():
    from shopping.domain import shopping

    bed = DomainFixture(shopping)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(shopping_bed):
    with shopping_bed.domain_context():
        yield


@pytest.fixture()
def storage():
    from shopping.cart.storage import set_storage
    from shopping.cart.storage.memory_adapter import MemoryStorage

    storage = MemoryStorage()
    set_storage(storage)
    return storage


@pytest.fixture()
def backend():
    from shopping.checkout import set_backend
    from shopping.checkout.fake_adapter import FakeCommerceBackend

    backend = FakeCommerceBackend()
    backend.add_promotion("WELCOME10", 10, name="Welcome 10%")
    backend.add_promotion("FLAT2K", 2000, kind="FIXED", name="Flat 2K off")
    backend.add_promotion("BIGSPEND", 15, name="Big Spender", min_order_amount=100000)
    set_backend(backend)
    return backend
