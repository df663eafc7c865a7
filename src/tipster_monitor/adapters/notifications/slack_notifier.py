"""Slack notification adapter."""

from datetime import datetime, timezone, tzinfo
from typing import Optional

import httpx

from tipster_monitor.adapters.notifications.formatting import render_slack_message
from tipster_monitor.core import Channel, EnrichedItem, NotificationOutcome, Notifier


class SlackNotifier(Notifier):
    """Send notifications to Slack via webhook."""

    channel = Channel.CHAT

    def __init__(
        self,
        webhook_url: str,
        author: str = "Rhys Williams",
        tz: Optional[tzinfo] = None,
        timeout: float = 30.0,
    ) -> None:
        """Initialize Slack notifier.

        Args:
            webhook_url: Slack incoming webhook URL
            author: Tipster name used in the message and bot username
            tz: Timezone for displayed dates
            timeout: Request timeout in seconds
        """
        self.webhook_url = webhook_url
        self.author = author
        self.tz = tz
        self.timeout = timeout

    async def send(self, items: list[EnrichedItem]) -> NotificationOutcome:
        """Post one message listing all new posts."""
        message = render_slack_message(
            items, self.author, datetime.now(timezone.utc), self.tz
        )

        payload = {
            "text": message,
            "mrkdwn": True,
            "username": f"{self.author} Monitor",
            "icon_emoji": ":horse_racing:",
        }

        print("💬 Sending Slack alert...")

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            try:
                response = await client.post(self.webhook_url, json=payload)
            except httpx.HTTPError as e:
                error = f"{type(e).__name__}: {e}"
                print(f"❌ Slack error: {error}")
                return NotificationOutcome(channel=self.channel, succeeded=False, error=error)

        if not response.is_success:
            error = f"HTTP {response.status_code}: {response.text[:500]}"
            print(f"❌ Slack response error: {error}")
            return NotificationOutcome(channel=self.channel, succeeded=False, error=error)

        print("✅ Slack alert sent successfully")
        return NotificationOutcome(channel=self.channel, succeeded=True)
