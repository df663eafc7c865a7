"""Claude API client for extracting betting tips from post content."""

import asyncio
import json
import re
from typing import Any

import httpx

from tipster_monitor.config import ClaudeConfig
from tipster_monitor.core import BetKind, Tip, TipExtractor


SYSTEM_PROMPT = (
    "You extract horse racing betting tips from tipster articles. "
    "Reply with JSON only."
)

USER_PROMPT = """Extract every betting tip from the article HTML below.

Return a JSON array. Each element must be an object with these string fields:
- "horse": horse name
- "course": racecourse
- "time": race time as written (e.g. "15:30")
- "price": suggested odds (e.g. "9/2")
- "stake": stake in points/units (e.g. "1pt")
- "betType": "win" or "each-way"

Return [] if the article contains no tips.

Article HTML:
{fragment}
"""


class ClaudeTipExtractor(TipExtractor):
    """Claude API client implementation."""

    def __init__(self, api_key: str, config: ClaudeConfig | None = None) -> None:
        config = config or ClaudeConfig()
        self.api_key = api_key
        self.model = config.model
        self.max_tokens = config.max_tokens
        self.temperature = config.temperature
        self.base_url = "https://api.anthropic.com/v1"
        self.max_retries = config.max_retries
        self.initial_retry_delay = config.initial_retry_delay
        self.request_delay = config.request_delay
        self._last_request_time = 0.0

    async def extract(self, html_fragment: str) -> list[Tip]:
        """Extract tips from an article fragment.

        Raises httpx errors when the API cannot be reached; an unreadable
        reply yields an empty list.
        """
        response = await self._call_api(
            prompt=USER_PROMPT.format(fragment=html_fragment),
            system=SYSTEM_PROMPT,
        )

        json_text = self._extract_json(response)

        try:
            data = json.loads(json_text)
        except json.JSONDecodeError as e:
            print(f"  ⚠️  Claude returned invalid JSON: {e}")
            print(f"     Response: {response[:200]}...")
            return []

        if isinstance(data, dict):
            data = data.get("tips", [])
        if not isinstance(data, list):
            return []

        return [tip for tip in (self._parse_tip(record) for record in data) if tip]

    def _parse_tip(self, record: Any) -> Tip | None:
        """Build a Tip from one JSON record, or None if it has no horse."""
        if not isinstance(record, dict):
            return None

        horse = str(record.get("horse") or "").strip()
        if not horse:
            return None

        def field(name: str) -> str:
            value = record.get(name)
            return "" if value is None else str(value).strip()

        return Tip(
            subject_name=horse,
            location=field("course"),
            time=field("time"),
            suggested_price=field("price"),
            stake_units=field("stake"),
            bet_kind=BetKind.parse(field("betType")),
        )

    async def _call_api(self, prompt: str, system: str) -> str:
        """Call Claude API with retry logic and rate limiting."""
        # Rate limiting: ensure minimum delay between requests
        current_time = asyncio.get_running_loop().time()
        time_since_last_request = current_time - self._last_request_time
        if time_since_last_request < self.request_delay:
            await asyncio.sleep(self.request_delay - time_since_last_request)

        last_exception = None

        for attempt in range(self.max_retries):
            try:
                async with httpx.AsyncClient(timeout=60.0) as client:
                    response = await client.post(
                        f"{self.base_url}/messages",
                        headers={
                            "x-api-key": self.api_key,
                            "anthropic-version": "2023-06-01",
                            "content-type": "application/json",
                        },
                        json={
                            "model": self.model,
                            "max_tokens": self.max_tokens,
                            "temperature": self.temperature,
                            "system": system,
                            "messages": [
                                {"role": "user", "content": prompt}
                            ],
                        },
                    )

                    self._last_request_time = asyncio.get_running_loop().time()

                    if response.status_code == 200:
                        data = response.json()
                        return data["content"][0]["text"]

                    # Rate limit - retry with backoff
                    if response.status_code == 429:
                        retry_after = self._get_retry_delay(response, attempt)
                        print(f"⏳ Rate limit hit, retrying after {retry_after:.1f}s (attempt {attempt + 1}/{self.max_retries})")
                        await asyncio.sleep(retry_after)
                        continue

                    # Server errors - retry with backoff
                    if response.status_code >= 500:
                        retry_delay = self.initial_retry_delay * (2 ** attempt)
                        print(f"⚠️  Server error {response.status_code}, retrying after {retry_delay:.1f}s")
                        await asyncio.sleep(retry_delay)
                        continue

                    # Other errors - raise immediately
                    response.raise_for_status()

            except httpx.HTTPStatusError:
                raise
            except httpx.RequestError as e:
                last_exception = e
                if attempt < self.max_retries - 1:
                    retry_delay = self.initial_retry_delay * (2 ** attempt)
                    print(f"⚠️  Network error, retrying after {retry_delay:.1f}s")
                    await asyncio.sleep(retry_delay)
                    continue
                raise

        if last_exception:
            raise last_exception
        raise RuntimeError("Failed to call API after all retries")

    def _get_retry_delay(self, response: httpx.Response, attempt: int) -> float:
        """Calculate retry delay from response headers or use exponential backoff."""
        retry_after = response.headers.get("retry-after")
        if retry_after:
            try:
                return float(retry_after)
            except ValueError:
                pass

        return self.initial_retry_delay * (2 ** attempt)

    def _fix_json(self, text: str) -> str:
        """Try to fix common JSON issues."""
        # Remove trailing commas before } or ]
        return re.sub(r',(\s*[}\]])', r'\1', text)

    def _extract_json(self, text: str) -> str:
        """Extract JSON from markdown code block or raw text."""
        # Strategy 1: JSON in a markdown code block
        code_block_match = re.search(r'```(?:json)?\s*\n(.*?)\n```', text, re.DOTALL)
        if code_block_match:
            return self._fix_json(code_block_match.group(1).strip())

        # Strategy 2: outermost JSON array (a list of tip objects)
        start, end = text.find("["), text.rfind("]")
        if 0 <= start < end:
            candidate = self._fix_json(text[start:end + 1])
            try:
                json.loads(candidate)
                return candidate
            except json.JSONDecodeError:
                pass

        # Strategy 3: outermost JSON object (e.g. {"tips": [...]})
        start, end = text.find("{"), text.rfind("}")
        if 0 <= start < end:
            candidate = self._fix_json(text[start:end + 1])
            try:
                json.loads(candidate)
                return candidate
            except json.JSONDecodeError:
                pass

        # Strategy 4: return as is (last resort)
        return self._fix_json(text.strip())
