"""Tests for the persisted cart record."""

import json

from shopping.cart.cart import Cart
from shopping.cart.persistence import (
    CART_STORAGE_KEY,
    CartRepository,
    deserialize,
    serialize,
    storage_key_for,
)
from shopping.cart.storage.file_adapter import FileStorage
from shopping.cart.storage.memory_adapter import MemoryStorage


def _cart_with_items():
    cart = Cart.create()
    cart.add_item(
        product_id="prod-001",
        variant_id="var-001",
        name="Ankara Shirt",
        price=15000.0,
        quantity=2,
        image="/images/ankara.jpg",
        size="M",
        color="Black",
        bulk_pricing_tiers=[{"minQuantity": 5, "discountPercent": 10}],
    )
    cart.add_item(product_id="prod-002", variant_id="var-002", name="Bucket Hat", price=4500.0, quantity=1)
    return cart


class TestStorageKey:
    def test_default_key(self):
        assert storage_key_for() == "jfs-cart-storage"
        assert storage_key_for(None) == CART_STORAGE_KEY

    def test_session_key(self):
        assert storage_key_for("sess-42") == "jfs-cart-storage:sess-42"


class TestSerialize:
    def test_record_uses_camel_case_keys(self):
        record = json.loads(serialize(_cart_with_items()))
        assert set(record) >= {"cartId", "items", "version"}
        first = record["items"][0]
        assert first["productId"] == "prod-001"
        assert first["variantId"] == "var-001"
        assert first["bulkPricingTiers"] == [{"minQuantity": 5, "discountPercent": 10.0}]

    def test_absent_optional_fields_are_omitted(self):
        record = json.loads(serialize(_cart_with_items()))
        second = record["items"][1]
        assert "image" not in second
        assert "bulkPricingTiers" not in second

    def test_version_is_zero(self):
        assert json.loads(serialize(Cart.create()))["version"] == 0


class TestDeserialize:
    def test_restores_items_in_order(self):
        original = _cart_with_items()
        restored = deserialize(serialize(original))

        assert str(restored.id) == str(original.id)
        assert [str(i.variant_id) for i in restored.items] == ["var-001", "var-002"]
        first = restored.items[0]
        assert first.name == "Ankara Shirt"
        assert first.quantity == 2
        assert first.price == 15000.0
        assert first.size == "M"
        assert first.color == "Black"
        assert len(first.tiers()) == 1

    def test_restored_cart_prices_the_same(self):
        original = _cart_with_items()
        restored = deserialize(serialize(original))
        assert restored.total() == original.total()
        assert restored.item_count() == original.item_count()

    def test_restore_raises_no_events(self):
        restored = deserialize(serialize(_cart_with_items()))
        assert restored._events == []

    def test_reads_record_without_optional_fields(self):
        raw = json.dumps(
            {
                "items": [
                    {"productId": "p1", "variantId": "v1", "name": "Cap", "price": 2500, "quantity": 3},
                ],
                "version": 0,
            }
        )
        cart = deserialize(raw)
        assert cart.item_count() == 3
        assert cart.total() == 7500.0

    def test_empty_input_is_empty_cart(self):
        assert deserialize(None).is_empty()
        assert deserialize("").is_empty()


class TestCartRepository:
    def test_missing_record_loads_empty_cart(self):
        repository = CartRepository(MemoryStorage())
        assert repository.load().is_empty()

    def test_save_then_load(self):
        storage = MemoryStorage()
        repository = CartRepository(storage, key=storage_key_for("sess-1"))
        repository.save(_cart_with_items())

        assert "jfs-cart-storage:sess-1" in storage.records
        assert repository.load().item_count() == 3

    def test_unreadable_json_loads_empty_cart(self):
        storage = MemoryStorage()
        storage.set_item(CART_STORAGE_KEY, "{not json")
        assert CartRepository(storage).load().is_empty()

    def test_record_with_wrong_shape_loads_empty_cart(self):
        storage = MemoryStorage()
        storage.set_item(CART_STORAGE_KEY, json.dumps({"items": [{"variantId": "v1"}]}))
        assert CartRepository(storage).load().is_empty()

    def test_record_failing_domain_rules_loads_empty_cart(self):
        storage = MemoryStorage()
        raw = {"items": [{"productId": "p1", "variantId": "v1", "name": "Cap", "price": 2500, "quantity": 0}]}
        storage.set_item(CART_STORAGE_KEY, json.dumps(raw))
        assert CartRepository(storage).load().is_empty()

    def test_discard_removes_record(self):
        storage = MemoryStorage()
        repository = CartRepository(storage)
        repository.save(_cart_with_items())
        repository.discard()
        assert storage.get_item(CART_STORAGE_KEY) is None


class TestDuplicateRows:
    def test_rows_for_one_variant_are_merged(self):
        row = {"productId": "p1", "variantId": "v1", "name": "Cap", "price": 2500}
        raw = json.dumps({"items": [{**row, "quantity": 1}, {**row, "quantity": 2}], "version": 0})
        cart = deserialize(raw)
        assert len(cart.items) == 1
        assert cart.items[0].quantity == 3

    def test_merged_row_is_updated_as_one(self):
        row = {"productId": "p1", "variantId": "v1", "name": "Cap", "price": 2500}
        raw = json.dumps({"items": [{**row, "quantity": 1}, {**row, "quantity": 2}], "version": 0})
        cart = deserialize(raw)
        cart.remove_item("v1")
        assert cart.is_empty()


class TestFileBackedRepository:
    def test_undecodable_file_loads_empty_cart(self, tmp_path):
        storage = FileStorage(tmp_path)
        storage._path_for(CART_STORAGE_KEY).write_bytes(b'{"items": [\xff\xfe]}')
        assert CartRepository(storage).load().is_empty()

    def test_undecodable_file_can_be_overwritten(self, tmp_path):
        storage = FileStorage(tmp_path)
        storage._path_for(CART_STORAGE_KEY).write_bytes(b"\xff\xfe\xfd")
        repository = CartRepository(storage)
        cart = repository.load()
        cart.add_item(product_id="p1", variant_id="v1", name="Cap", price=2500.0)
        repository.save(cart)
        assert repository.load().item_count() == 1
