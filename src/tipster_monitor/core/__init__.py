"""Core domain layer."""

from tipster_monitor.core.classifier import classify
from tipster_monitor.core.entities import (
    BetKind,
    CandidateItem,
    Channel,
    EnrichedItem,
    NotificationOutcome,
    RunReport,
    Tip,
)
from tipster_monitor.core.errors import FetchError, MonitorError, StorageError
from tipster_monitor.core.interfaces import (
    Enricher,
    FeedSource,
    KeyValueStore,
    Notifier,
    TipExtractor,
)
from tipster_monitor.core.seen_tracker import SeenSetStore

__all__ = [
    "BetKind",
    "CandidateItem",
    "Channel",
    "EnrichedItem",
    "NotificationOutcome",
    "RunReport",
    "Tip",
    "MonitorError",
    "FetchError",
    "StorageError",
    "FeedSource",
    "KeyValueStore",
    "TipExtractor",
    "Enricher",
    "Notifier",
    "SeenSetStore",
    "classify",
]
