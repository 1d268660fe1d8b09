"""File-backed storage, one JSON document per key in a directory."""

import hashlib
from pathlib import Path

import structlog

from shopping.cart.storage.port import CartStorage

logger = structlog.get_logger(__name__)


class FileStorage(CartStorage):
    """Stores each key as ``<directory>/<sha256 of key>.json``.

    File names are digests, so distinct keys never share a file whatever
    characters or length a session id has. Writes go through a temporary file
    and an atomic rename so a reader never sees a half-written record.
    """

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path_for(self, key: str) -> Path:
        return self.directory / f"{hashlib.sha256(key.encode('utf-8')).hexdigest()}.json"

    def get_item(self, key: str) -> str | None:
        path = self._path_for(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set_item(self, key: str, value: str) -> None:
        path = self._path_for(key)
        tmp_path = path.with_suffix(".json.tmp")
        tmp_path.write_text(value, encoding="utf-8")
        tmp_path.replace(path)
        logger.debug("cart_storage_written", key=key, path=str(path), size=len(value))

    def remove_item(self, key: str) -> None:
        self._path_for(key).unlink(missing_ok=True)
