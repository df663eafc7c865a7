"""Betfair RSS feed source for tipster posts."""

from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Optional, Union
from xml.etree import ElementTree as ET

import httpx

from tipster_monitor.adapters.sources.filters import is_by_author
from tipster_monitor.config import DEFAULT_USER_AGENT
from tipster_monitor.core import CandidateItem, FeedSource, FetchError


class BetfairRSSSource(FeedSource):
    """Fetch posts by one author from the Betfair betting RSS feed."""

    emoji = "🏇"
    name = "Betfair RSS"

    def __init__(
        self,
        url: str = "https://betting.betfair.com/index.xml",
        author: str = "Rhys Williams",
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = 30.0,
    ) -> None:
        self.url = url
        self.author = author
        self.user_agent = user_agent
        self.timeout = timeout

    async def fetch_candidates(self) -> list[CandidateItem]:
        """Fetch the feed and return author posts in feed order."""
        fetched_at = datetime.now(timezone.utc)

        async with httpx.AsyncClient(timeout=self.timeout, follow_redirects=True) as client:
            try:
                response = await client.get(
                    self.url,
                    headers={
                        "User-Agent": self.user_agent,
                        "Accept": "application/rss+xml, application/xml, text/xml, */*",
                    },
                )
            except httpx.HTTPError as e:
                raise FetchError(f"Failed to fetch RSS feed: {e}") from e

        if not response.is_success:
            raise FetchError(f"Failed to fetch RSS feed: HTTP {response.status_code}")

        print(f"  └─ RSS response: HTTP {response.status_code}, {len(response.content)} bytes")

        return self.parse_feed(response.content, fallback_time=fetched_at)

    def parse_feed(
        self,
        xml_content: Union[str, bytes],
        fallback_time: Optional[datetime] = None,
    ) -> list[CandidateItem]:
        """Parse RSS 2.0 XML into candidate items by the configured author.

        Entries without a title or link are skipped. Entries by other
        authors are dropped silently.
        """
        fallback_time = fallback_time or datetime.now(timezone.utc)

        try:
            root = ET.fromstring(xml_content)
        except ET.ParseError as e:
            raise FetchError(f"Failed to parse RSS feed: {e}") from e

        entries = root.findall(".//item")
        print(f"  └─ Entries in feed: {len(entries)}")

        candidates = []
        skipped = 0

        for index, entry in enumerate(entries, 1):
            title = _text(entry.find("title"))
            link = _text(entry.find("link"))

            if not title or not link:
                skipped += 1
                print(f"  └─ Skipped entry {index}: missing title or link")
                continue

            categories = [
                _text(category) for category in entry.findall("category")
            ]

            if not is_by_author(self.author, title, categories):
                continue

            candidates.append(CandidateItem(
                title=title,
                link=link,
                published_at=parse_pub_date(_text(entry.find("pubDate")), fallback_time),
                author=self.author,
            ))

        print(f"  └─ Posts by {self.author}: {len(candidates)}")
        if skipped:
            print(f"  └─ Malformed entries skipped: {skipped}")

        return candidates


def parse_pub_date(value: str, fallback: datetime) -> datetime:
    """Parse an RFC 822 pubDate, returning fallback when it cannot be read."""
    if not value:
        return fallback

    try:
        published = parsedate_to_datetime(value)
    except (TypeError, ValueError, IndexError):
        return fallback

    if published.tzinfo is None:
        published = published.replace(tzinfo=timezone.utc)
    return published


def _text(elem: Optional[ET.Element]) -> str:
    if elem is None or not elem.text:
        return ""
    return elem.text.strip()
