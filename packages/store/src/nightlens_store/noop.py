"""No-op store — used when caching is disabled.

Every load is a cache miss, so every run fetches from GitHub. Using a
NoOpStore rather than None lets the cache policy always call get()/set()
without conditional checks.
"""

from __future__ import annotations

from nightlens_store.base import BaseStore


class NoOpStore(BaseStore):
    """Silently discards all values."""

    def get(self, key: str) -> str | None:
        return None

    def set(self, key: str, value: str) -> None:
        pass  # intentional no-op

    def delete(self, key: str) -> None:
        pass
