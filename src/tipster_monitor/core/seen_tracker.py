"""Tracker for already notified posts to avoid duplicate alerts."""

from collections.abc import Iterable

from tipster_monitor.core.errors import StorageError
from tipster_monitor.core.interfaces import KeyValueStore


DEFAULT_SEEN_KEY = "seen_posts"


class SeenSetStore:
    """Keep the set of notified links under a single storage key.

    Links are only ever appended by normal operation; `clear` is the
    administrative way to start over.
    """

    def __init__(self, store: KeyValueStore, key: str = DEFAULT_SEEN_KEY) -> None:
        self.store = store
        self.key = key

    async def load(self) -> set[str]:
        """Load seen links, treating unreadable storage as empty."""
        try:
            return set(await self._read())
        except StorageError as e:
            print(f"⚠️  Could not read seen posts, treating all as new: {e}")
            return set()

    async def inspect(self) -> list[str]:
        """Return stored links in insertion order. Raises StorageError."""
        return await self._read()

    async def commit(self, new_links: Iterable[str]) -> list[str]:
        """Append new links to the stored list and write it back.

        Returns:
            Links actually added (already stored links are skipped)
        """
        current = await self._read()
        known = set(current)

        added = []
        for link in new_links:
            if link not in known:
                known.add(link)
                added.append(link)

        if not added:
            return []

        try:
            await self.store.set(self.key, current + added)
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to save seen posts: {e}") from e

        return added

    async def clear(self) -> None:
        """Remove all seen links."""
        try:
            await self.store.delete(self.key)
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to clear seen posts: {e}") from e

    async def _read(self) -> list[str]:
        try:
            value = await self.store.get(self.key)
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to read seen posts: {e}") from e

        if value is None:
            return []
        if not isinstance(value, list):
            raise StorageError(
                f"Unexpected seen posts value of type {type(value).__name__}"
            )
        return [str(link) for link in value]
