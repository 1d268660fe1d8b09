"""In-process storage for development and testing."""

from shopping.cart.storage.port import CartStorage


class MemoryStorage(CartStorage):
    """Dict-backed storage. Records live as long as the process."""

    def __init__(self) -> None:
        self.records: dict[str, str] = {}
        self.writes: int = 0

    def get_item(self, key: str) -> str | None:
        return self.records.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.records[key] = value
        self.writes += 1

    def remove_item(self, key: str) -> None:
        self.records.pop(key, None)
