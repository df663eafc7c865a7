"""Core interfaces for adapters."""

from abc import ABC, abstractmethod
from typing import Any, Optional

from tipster_monitor.core.entities import (
    CandidateItem,
    Channel,
    EnrichedItem,
    NotificationOutcome,
    Tip,
)


class FeedSource(ABC):
    """Interface for fetching candidate posts from a feed."""

    @abstractmethod
    async def fetch_candidates(self) -> list[CandidateItem]:
        """Fetch author posts in feed order. Raises FetchError."""
        pass


class KeyValueStore(ABC):
    """Interface for persistent key-value storage."""

    @abstractmethod
    async def get(self, key: str) -> Optional[Any]:
        """Return stored value or None if the key is absent."""
        pass

    @abstractmethod
    async def set(self, key: str, value: Any) -> None:
        """Store value under key."""
        pass

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove key if present."""
        pass


class TipExtractor(ABC):
    """Interface for structured tip extraction from page content."""

    @abstractmethod
    async def extract(self, html_fragment: str) -> list[Tip]:
        """Extract tips from an HTML fragment."""
        pass


class Enricher(ABC):
    """Interface for enriching new posts with tips."""

    @abstractmethod
    async def enrich(self, item: CandidateItem) -> list[Tip]:
        """Return tips for the item. Must not raise."""
        pass


class Notifier(ABC):
    """Interface for a notification channel."""

    channel: Channel

    @abstractmethod
    async def send(self, items: list[EnrichedItem]) -> NotificationOutcome:
        """Deliver one notification covering all items."""
        pass
