"""MemoryStore — dict-backed store that lives as long as the process."""

from __future__ import annotations

from nightlens_store.base import BaseStore


class MemoryStore(BaseStore):
    """Keeps values in a plain dict.

    Handy in tests (pass ``initial`` to pre-seed a snapshot) and for
    one-shot runs where nothing should touch the filesystem.
    """

    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)
