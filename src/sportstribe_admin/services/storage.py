"""Key-value storage abstractions for session persistence."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Protocol


class KeyValueStorage(Protocol):
    """Persistent string slots addressed by key.

    ``set_many`` and ``remove_many`` apply all their slots in one write so
    readers never see only part of the change.
    """

    def get(self, key: str) -> str | None:
        """Return the stored value, if present."""

    def set(self, key: str, value: str) -> None:
        """Store a value, replacing any previous one."""

    def remove(self, key: str) -> None:
        """Remove a value; missing keys are ignored."""

    def set_many(self, values: Mapping[str, str]) -> None:
        """Store several values in one write."""

    def remove_many(self, keys: Iterable[str]) -> None:
        """Remove several values in one write; missing keys are ignored."""


@dataclass
class InMemoryStorage(KeyValueStorage):
    """In-process storage used by tests and single-worker deployments."""

    _values: dict[str, str]

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._values = dict(initial or {})

    def get(self, key: str) -> str | None:
        """Return the stored value, if present."""
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        """Store a value."""
        self._values[key] = value

    def remove(self, key: str) -> None:
        """Remove a value if it exists."""
        self._values.pop(key, None)

    def set_many(self, values: Mapping[str, str]) -> None:
        self._values.update(values)

    def remove_many(self, keys: Iterable[str]) -> None:
        for key in keys:
            self._values.pop(key, None)
