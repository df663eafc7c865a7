"""Message rendering for notification channels.

All functions are pure: items and display settings in, text out.
"""

import html
from datetime import datetime, tzinfo
from typing import Optional

from tipster_monitor.core import EnrichedItem, Tip
from tipster_monitor.core.entities import DISPLAY_DATE_FORMAT


def format_date(value: datetime, tz: Optional[tzinfo] = None) -> str:
    """Format a timestamp for display in the given timezone."""
    if tz is not None:
        value = value.astimezone(tz)
    return value.strftime(DISPLAY_DATE_FORMAT)


def _plural(count: int) -> str:
    return "post" if count == 1 else "posts"


def format_tip(tip: Tip) -> str:
    """Format a tip as a single line."""
    race = " ".join(part for part in (tip.time, tip.location) if part)
    line = f"{race} - {tip.subject_name}" if race else tip.subject_name

    if tip.suggested_price:
        line += f" @ {tip.suggested_price}"

    stake = " ".join(part for part in (tip.stake_units, tip.bet_kind.value) if part)
    return f"{line} ({stake})"


def email_subject(items: list[EnrichedItem], author: str) -> str:
    """Subject line for the alert email."""
    return f"🏇 New {author} Tips - {len(items)} {_plural(len(items))}"


def render_email_text(
    items: list[EnrichedItem],
    author: str,
    sent_at: datetime,
    tz: Optional[tzinfo] = None,
) -> str:
    """Render the plain-text email body."""
    lines = [
        f"New horse racing tips from {author} ({len(items)} {_plural(len(items))}):",
        "",
    ]

    for i, entry in enumerate(items, 1):
        lines.append(f"{i}. {entry.item.title}")
        lines.append(f"   📅 {format_date(entry.item.published_at, tz)}")
        lines.append(f"   🔗 {entry.item.link}")
        for tip in entry.tips:
            lines.append(f"   🐎 {format_tip(tip)}")
        lines.append("")

    lines.append("Happy betting! 🐎")
    lines.append(f"Alert sent at: {format_date(sent_at, tz)}")

    return "\n".join(lines)


def render_email_html(
    items: list[EnrichedItem],
    author: str,
    sent_at: datetime,
    tz: Optional[tzinfo] = None,
) -> str:
    """Render the HTML email body."""
    parts = [
        f"<h2>🏇 New {html.escape(author)} Tips</h2>",
        f"<p>Found <strong>{len(items)}</strong> new {_plural(len(items))}:</p>",
        "<ol>",
    ]

    for entry in items:
        link = html.escape(entry.item.link, quote=True)
        title = html.escape(entry.item.title)
        published = html.escape(format_date(entry.item.published_at, tz))

        parts.append('<li style="margin-bottom: 15px;">')
        parts.append(f'<strong><a href="{link}" target="_blank">{title}</a></strong><br>')
        parts.append(f"<small>📅 {published}</small>")

        if entry.tips:
            parts.append("<ul>")
            for tip in entry.tips:
                parts.append(f"<li>🐎 {html.escape(format_tip(tip))}</li>")
            parts.append("</ul>")

        parts.append("</li>")

    parts.append("</ol>")
    parts.append("<p>Happy betting! 🐎</p>")
    parts.append(f"<p><small>Alert sent at: {html.escape(format_date(sent_at, tz))}</small></p>")

    return "\n".join(parts)


def _escape_mrkdwn(text: str) -> str:
    # Slack requires only these three characters to be escaped
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def _escape_link(url: str) -> str:
    # "|" separates the URL from the label, so it has to be percent-encoded
    return _escape_mrkdwn(url).replace("|", "%7C")


def render_slack_message(
    items: list[EnrichedItem],
    author: str,
    sent_at: datetime,
    tz: Optional[tzinfo] = None,
) -> str:
    """Render the Slack mrkdwn message."""
    lines = [
        f"🏇 *New {_escape_mrkdwn(author)} Tips* ({len(items)} {_plural(len(items))}):",
        "",
    ]

    for i, entry in enumerate(items, 1):
        lines.append(f"{i}. *{_escape_mrkdwn(entry.item.title)}*")
        lines.append(f"   📅 {format_date(entry.item.published_at, tz)}")
        lines.append(f"   🔗 <{_escape_link(entry.item.link)}|Read More>")
        for tip in entry.tips:
            lines.append(f"   🐎 {_escape_mrkdwn(format_tip(tip))}")
        lines.append("")

    lines.append(f"🤖 _Alert sent at {format_date(sent_at, tz)}_")

    return "\n".join(lines)
