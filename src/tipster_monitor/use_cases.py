"""Business logic use cases."""

import asyncio
from datetime import datetime, timezone, tzinfo
from enum import Enum
from typing import Optional

from tipster_monitor.core import (
    CandidateItem,
    EnrichedItem,
    Enricher,
    FeedSource,
    NotificationOutcome,
    Notifier,
    RunReport,
    SeenSetStore,
    StorageError,
    classify,
)


class RunState(str, Enum):
    """States a monitoring run passes through."""

    IDLE = "idle"
    FETCHING = "fetching"
    CLASSIFYING = "classifying"
    NO_NEW_ITEMS = "no_new_items"
    ENRICHING = "enriching"
    DISPATCHING = "dispatching"
    COMMITTING = "committing"
    FAILED = "failed"
    REPORTING = "reporting"


class NotificationDispatcher:
    """Send alerts over every configured channel concurrently."""

    def __init__(self, notifiers: list[Notifier]) -> None:
        self.notifiers = notifiers

    async def dispatch(self, items: list[EnrichedItem]) -> list[NotificationOutcome]:
        """Deliver items on all channels; one outcome per channel.

        A failing channel never affects the others.
        """
        if not self.notifiers:
            print("📭 No notification channels configured")
            return []

        return list(await asyncio.gather(
            *(self._send(notifier, items) for notifier in self.notifiers)
        ))

    async def _send(self, notifier: Notifier, items: list[EnrichedItem]) -> NotificationOutcome:
        try:
            return await notifier.send(items)
        except Exception as e:
            error = f"{type(e).__name__}: {e}"
            print(f"❌ {notifier.channel.value} channel error: {error}")
            return NotificationOutcome(channel=notifier.channel, succeeded=False, error=error)


class MonitoringService:
    """Run one check: fetch, classify, enrich, dispatch, commit."""

    def __init__(
        self,
        source: FeedSource,
        seen_store: SeenSetStore,
        dispatcher: NotificationDispatcher,
        enricher: Optional[Enricher] = None,
        author: str = "Rhys Williams",
        tz: Optional[tzinfo] = None,
    ) -> None:
        self.source = source
        self.seen_store = seen_store
        self.dispatcher = dispatcher
        self.enricher = enricher
        self.author = author
        self.tz = tz
        self.state = RunState.IDLE
        self.state_history: list[RunState] = [RunState.IDLE]

    def _enter(self, state: RunState) -> None:
        self.state = state
        self.state_history.append(state)

    async def run(self) -> RunReport:
        """Run the pipeline once and return its report."""
        self.state = RunState.IDLE
        self.state_history = [RunState.IDLE]
        started_at = datetime.now(self.tz or timezone.utc)

        print("\n" + "=" * 70)
        print(f"🔍 {self.author.upper()} MONITOR - {started_at:%d/%m/%Y %H:%M:%S}")
        print("=" * 70)

        try:
            new_items = await self._collect_new_items()
        except Exception as e:
            error = str(e) or type(e).__name__
            print(f"\n❌ Error: {error}")
            self._enter(RunState.FAILED)
            self._enter(RunState.REPORTING)
            return RunReport(
                started_at=started_at,
                succeeded=False,
                message="Error occurred while checking RSS feed",
                error=error,
            )

        if not new_items:
            self._enter(RunState.NO_NEW_ITEMS)
            print(f"\n📭 No new {self.author} posts found")
            self._enter(RunState.REPORTING)
            return RunReport(
                started_at=started_at,
                succeeded=True,
                message=f"No new {self.author} posts",
            )

        print(f"\n🎉 Found {len(new_items)} new {self.author} posts!")

        enriched = await self._enrich_items(new_items)

        self._enter(RunState.DISPATCHING)
        print("\n" + "=" * 70)
        print("📣 SENDING ALERTS")
        print("=" * 70)
        outcomes = await self.dispatcher.dispatch(enriched)

        message = f"Found {len(new_items)} new {self.author} posts!"

        self._enter(RunState.COMMITTING)
        try:
            added = await self.seen_store.commit(item.link for item in new_items)
            print(f"\n💾 Saved {len(added)} links to seen posts")
        except StorageError as e:
            print(f"\n⚠️  Could not save seen posts, they may be alerted again: {e}")
            message += f" Warning: seen posts not saved ({e})"

        self._enter(RunState.REPORTING)
        return RunReport(
            started_at=started_at,
            succeeded=True,
            items=enriched,
            notification_outcomes=outcomes,
            message=message,
        )

    async def _collect_new_items(self) -> list[CandidateItem]:
        """Fetch candidates and keep those not seen before."""
        self._enter(RunState.FETCHING)
        emoji = getattr(self.source, "emoji", "📡")
        name = getattr(self.source, "name", self.source.__class__.__name__)
        print(f"\n{emoji} Fetching: {name}")

        candidates = await self.source.fetch_candidates()

        self._enter(RunState.CLASSIFYING)
        seen = await self.seen_store.load()
        new_items = classify(candidates, seen)

        for item in candidates:
            if item in new_items:
                print(f"  ✨ New post: {item.title}")
            else:
                print(f"  👀 Already seen: {item.title}")

        return new_items

    async def _enrich_items(self, items: list[CandidateItem]) -> list[EnrichedItem]:
        """Enrich items one at a time, in feed order."""
        self._enter(RunState.ENRICHING)
        if self.enricher is None:
            return [EnrichedItem(item=item) for item in items]

        print("\n" + "=" * 70)
        print("🔎 EXTRACTING TIPS")
        print("=" * 70)

        enriched = []
        for i, item in enumerate(items, 1):
            print(f"\n  [{i}/{len(items)}] {item.title[:70]}")
            print(f"  └─ URL: {item.link}")
            tips = await self.enricher.enrich(item)
            enriched.append(EnrichedItem(item=item, tips=tips))

        return enriched
