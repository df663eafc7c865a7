"""Enrich new posts with tips extracted from the post page."""

import asyncio
from collections.abc import Sequence

import httpx
from bs4 import BeautifulSoup

from tipster_monitor.config import DEFAULT_USER_AGENT
from tipster_monitor.core import CandidateItem, Enricher, Tip, TipExtractor


BOT_CHALLENGE_TITLES = (
    "just a moment...",
    "attention required! | cloudflare",
)

BOT_CHALLENGE_MARKERS = (
    "cf-browser-verification",
    "cf-challenge",
)


def is_bot_challenge(html: str) -> bool:
    """Check if a response body is a Cloudflare interstitial page."""
    soup = BeautifulSoup(html, "html.parser")
    title = soup.title.get_text(strip=True).lower() if soup.title else ""
    if title in BOT_CHALLENGE_TITLES:
        return True

    # Interstitials tag their form or wrapper with one of these ids or classes
    for tag in soup.find_all(True):
        names = [tag.get("id") or ""] + list(tag.get("class") or [])
        if any(name.lower().startswith(m) for name in names for m in BOT_CHALLENGE_MARKERS):
            return True
    return False


class PageEnricher(Enricher):
    """Fetch a post page and extract tips from its article body."""

    def __init__(
        self,
        extractor: TipExtractor,
        delay_seconds: float = 2.0,
        content_selectors: Sequence[str] = (".entry_content", "article .content", "article"),
        max_fragment_chars: int = 20000,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = 30.0,
    ) -> None:
        self.extractor = extractor
        self.delay_seconds = delay_seconds
        self.content_selectors = tuple(content_selectors)
        self.max_fragment_chars = max_fragment_chars
        self.user_agent = user_agent
        self.timeout = timeout

    async def enrich(self, item: CandidateItem) -> list[Tip]:
        """Return tips for the post; any failure yields an empty list."""
        try:
            return await self._enrich(item)
        except Exception as e:
            print(f"  └─ ⚠️  Enrichment failed: {type(e).__name__}: {e}")
            return []

    async def _enrich(self, item: CandidateItem) -> list[Tip]:
        # Pace page requests so they look less like automated traffic
        if self.delay_seconds > 0:
            await asyncio.sleep(self.delay_seconds)

        async with httpx.AsyncClient(timeout=self.timeout, follow_redirects=True) as client:
            response = await client.get(
                item.link,
                headers={
                    "User-Agent": self.user_agent,
                    "Accept": "text/html,application/xhtml+xml",
                },
            )

        html = response.text

        if is_bot_challenge(html):
            print("  └─ 🤖 Bot challenge page, skipping tips")
            return []

        if not response.is_success:
            print(f"  └─ Page returned HTTP {response.status_code}, skipping tips")
            return []

        fragment = self.find_content(html)
        if not fragment:
            print("  └─ Article content not found, skipping tips")
            return []

        tips = await self.extractor.extract(fragment[:self.max_fragment_chars])
        print(f"  └─ Tips extracted: {len(tips)}")
        return tips

    def find_content(self, html: str) -> str:
        """Return the HTML of the first non-empty content region, or ''."""
        soup = BeautifulSoup(html, "html.parser")

        for selector in self.content_selectors:
            region = soup.select_one(selector)
            if region is not None and region.get_text(strip=True):
                return str(region)

        return ""
