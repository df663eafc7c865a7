"""Email notification adapter."""

import asyncio
import smtplib
from datetime import datetime, timezone, tzinfo
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

from tipster_monitor.adapters.notifications.formatting import (
    email_subject,
    render_email_html,
    render_email_text,
)
from tipster_monitor.config import EmailConfig
from tipster_monitor.core import Channel, EnrichedItem, NotificationOutcome, Notifier


class EmailNotifier(Notifier):
    """Send a single alert email over SMTP with STARTTLS."""

    channel = Channel.EMAIL

    def __init__(
        self,
        config: EmailConfig,
        author: str = "Rhys Williams",
        tz: Optional[tzinfo] = None,
        timeout: float = 30.0,
    ) -> None:
        self.config = config
        self.author = author
        self.tz = tz
        self.timeout = timeout

    def build_message(self, items: list[EnrichedItem], sent_at: datetime) -> MIMEMultipart:
        """Build the multipart (plain text + HTML) message."""
        msg = MIMEMultipart("alternative")
        msg["From"] = self.config.user
        msg["To"] = self.config.recipient
        msg["Subject"] = email_subject(items, self.author)

        msg.attach(MIMEText(render_email_text(items, self.author, sent_at, self.tz), "plain", "utf-8"))
        msg.attach(MIMEText(render_email_html(items, self.author, sent_at, self.tz), "html", "utf-8"))

        return msg

    async def send(self, items: list[EnrichedItem]) -> NotificationOutcome:
        """Send one email listing all new posts."""
        print("📧 Sending email alert...")

        msg = self.build_message(items, datetime.now(timezone.utc))

        try:
            # smtplib is blocking; keep it off the event loop
            await asyncio.to_thread(self._deliver, msg)
        except smtplib.SMTPAuthenticationError as e:
            error = f"SMTP authentication failed: {e}"
        except (smtplib.SMTPException, OSError) as e:
            error = f"{type(e).__name__}: {e}"
        else:
            print("✅ Email sent successfully")
            return NotificationOutcome(channel=self.channel, succeeded=True)

        print(f"❌ Email error: {error}")
        return NotificationOutcome(channel=self.channel, succeeded=False, error=error)

    def _deliver(self, msg: MIMEMultipart) -> None:
        with smtplib.SMTP(self.config.smtp_server, self.config.smtp_port, timeout=self.timeout) as server:
            server.starttls()
            server.login(self.config.user, self.config.password)
            server.send_message(msg)
