"""Core domain entities."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional


DISPLAY_DATE_FORMAT = "%d/%m/%Y, %H:%M:%S"


class BetKind(str, Enum):
    """Kind of bet suggested by a tip."""

    WIN = "win"
    EACH_WAY = "each-way"

    @classmethod
    def parse(cls, value: Optional[str]) -> "BetKind":
        """Parse free-form bet kind text, defaulting to a win bet."""
        normalized = (value or "").strip().lower().replace("_", "-")
        if normalized in ("each-way", "each way", "eachway", "ew", "e/w", "e-w"):
            return cls.EACH_WAY
        return cls.WIN


class Channel(str, Enum):
    """Notification delivery channel."""

    EMAIL = "email"
    CHAT = "chat"


@dataclass(frozen=True)
class CandidateItem:
    """Feed entry by the target author, not yet checked against history."""

    title: str
    link: str
    published_at: datetime
    author: str

    def __post_init__(self) -> None:
        if not self.title:
            raise ValueError("Title cannot be empty")
        if not self.link:
            raise ValueError("Link cannot be empty")


@dataclass(frozen=True)
class Tip:
    """Single betting tip extracted from a post."""

    subject_name: str
    location: str = ""
    time: str = ""
    suggested_price: str = ""
    stake_units: str = ""
    bet_kind: BetKind = BetKind.WIN

    def to_dict(self) -> dict[str, str]:
        return {
            "horse": self.subject_name,
            "course": self.location,
            "time": self.time,
            "price": self.suggested_price,
            "stake": self.stake_units,
            "betType": self.bet_kind.value,
        }


@dataclass
class EnrichedItem:
    """New item with tips extracted from its page (possibly none)."""

    item: CandidateItem
    tips: list[Tip] = field(default_factory=list)

    @property
    def title(self) -> str:
        return self.item.title

    @property
    def link(self) -> str:
        return self.item.link


@dataclass(frozen=True)
class NotificationOutcome:
    """Result of one delivery attempt on one channel."""

    channel: Channel
    succeeded: bool
    error: Optional[str] = None


@dataclass
class RunReport:
    """Result of one monitoring run."""

    started_at: datetime
    succeeded: bool
    items: list[EnrichedItem] = field(default_factory=list)
    notification_outcomes: list[NotificationOutcome] = field(default_factory=list)
    message: str = ""
    error: Optional[str] = None

    @property
    def new_item_count(self) -> int:
        return len(self.items)

    def outcome_for(self, channel: Channel) -> Optional[NotificationOutcome]:
        """Return the outcome for a channel, or None if it was not attempted."""
        return next(
            (o for o in self.notification_outcomes if o.channel == channel),
            None,
        )

    def _display_date(self, value: datetime) -> str:
        # Post dates are shown in the same timezone as the run timestamp
        if self.started_at.tzinfo is not None and value.tzinfo is not None:
            value = value.astimezone(self.started_at.tzinfo)
        return value.strftime(DISPLAY_DATE_FORMAT)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the JSON result shape."""
        data: dict[str, Any] = {
            "success": self.succeeded,
            "timestamp": self.started_at.strftime(DISPLAY_DATE_FORMAT),
            "newPosts": self.new_item_count,
            "posts": [
                {
                    "title": entry.item.title,
                    "link": entry.item.link,
                    "date": self._display_date(entry.item.published_at),
                    "author": entry.item.author,
                    "tips": [tip.to_dict() for tip in entry.tips],
                }
                for entry in self.items
            ],
            "message": self.message,
        }

        if self.error is not None:
            data["error"] = self.error

        email = self.outcome_for(Channel.EMAIL)
        if email is not None:
            data["emailSent"] = email.succeeded

        chat = self.outcome_for(Channel.CHAT)
        if chat is not None:
            data["slackSent"] = chat.succeeded

        return data
