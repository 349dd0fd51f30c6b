"""JSON file implementation of the session key-value storage."""

import json
import os
import tempfile
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path

from sportstribe_admin.services.storage import KeyValueStorage


@dataclass
class JsonFileStorage(KeyValueStorage):
    """Stores string slots in a single JSON object on disk.

    Every call re-reads the file so separate processes sharing the path see
    each other's writes. Each call is one load-modify-replace cycle and the
    replace is atomic, so slots written together through ``set_many`` or
    ``remove_many`` are never observed half-applied. There is no lock across
    processes: two workers writing concurrently resolve as last writer wins.
    """

    path: Path

    def get(self, key: str) -> str | None:
        """Return the stored value, if present."""
        value = self._load().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        """Store a value."""
        self.set_many({key: value})

    def remove(self, key: str) -> None:
        """Remove a value if present."""
        self.remove_many([key])

    def set_many(self, values: Mapping[str, str]) -> None:
        """Store several values with a single file replace."""
        stored = self._load()
        stored.update(values)
        self._save(stored)

    def remove_many(self, keys: Iterable[str]) -> None:
        """Remove several values with a single file replace."""
        stored = self._load()
        present = [key for key in keys if key in stored]
        for key in present:
            del stored[key]
        if present:
            self._save(stored)

    def _load(self) -> dict[str, object]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except ValueError:
            return {}
        return data if isinstance(data, dict) else {}

    def _save(self, values: dict[str, object]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(values, handle)
            Path(tmp_name).replace(self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
