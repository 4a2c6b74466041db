"""Abstract store interface.

The dashboard keeps exactly one serialized snapshot under one key, so the
store is a plain string key-value map. The cache policy depends on
BaseStore, not on a concrete backend, so tests can hand it a MemoryStore
and the CLI can hand it a SQLiteStore without touching core code.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class BaseStore(ABC):
    """Pluggable string key-value persistence.

    Backends are free to raise on I/O failure. Callers that must never
    crash on a broken store (the cache policy) catch and log.
    """

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the stored value for key, or None if nothing is stored."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove key. Deleting a missing key is not an error."""

    def close(self) -> None:
        """Release any resources held by the store (connections, file handles).

        Optional. Subclasses that need cleanup should override this.
        Default is a no-op so callers can always call close() safely.
        """
