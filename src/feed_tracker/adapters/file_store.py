"""Local file-backed key-value store."""

import os
from dataclasses import dataclass
from pathlib import Path

from feed_tracker.services.feeding import KeyValueStore


@dataclass
class FileKeyValueStore(KeyValueStore):
    """Stores each key as a JSON file inside ``directory``."""

    directory: Path

    def read(self, key: str) -> bytes | None:
        """Return the file contents for a key, if present."""
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_bytes()

    def write(self, key: str, data: bytes) -> None:
        """Write bytes atomically by replacing the key's file."""
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self._path(key)
        tmp_path = path.with_suffix(".tmp")
        tmp_path.write_bytes(data)
        os.replace(tmp_path, path)

    def delete(self, key: str) -> None:
        """Remove the key's file if it exists."""
        self._path(key).unlink(missing_ok=True)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"
