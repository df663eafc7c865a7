"""Tests for post page enrichment."""

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from tipster_monitor.adapters.enrichment import PageEnricher, is_bot_challenge
from tipster_monitor.core import BetKind, Tip, TipExtractor


ARTICLE_PAGE = """<html><body>
<header>Betting.Betfair</header>
<div class="entry_content">
  <p>1pt win Kyprios in the 15:40 at Ascot at 2/1</p>
</div>
<footer>Please gamble responsibly</footer>
</body></html>"""

CHALLENGE_PAGE = """<html><head><title>Just a moment...</title></head>
<body><div id="cf-challenge-running"></div></body></html>"""

RECAPTCHA_ARTICLE_PAGE = """<html><head><title>Rhys Williams: Just a moment of Ascot magic</title></head>
<body>
<div class="entry_content">
  <p>1pt win Kyprios in the 15:40 at Ascot at 2/1</p>
</div>
<form class="newsletter"><div class="g-recaptcha" data-sitekey="abc"></div></form>
<div class="h-captcha"></div>
</body></html>"""

TIP = Tip(
    subject_name="Kyprios",
    location="Ascot",
    time="15:40",
    suggested_price="2/1",
    stake_units="1pt",
    bet_kind=BetKind.WIN,
)


@pytest.fixture
def extractor() -> AsyncMock:
    mock = AsyncMock(spec=TipExtractor)
    mock.extract.return_value = [TIP]
    return mock


@pytest.fixture
def enricher(extractor) -> PageEnricher:
    return PageEnricher(extractor=extractor, delay_seconds=0)


def _page(mock_client, status: int, body: str) -> AsyncMock:
    mock_get = AsyncMock(return_value=httpx.Response(status, text=body))
    mock_client.return_value.__aenter__.return_value.get = mock_get
    return mock_get


@pytest.mark.asyncio
async def test_enrich_success(enricher, extractor, make_item) -> None:
    item = make_item(1)

    with patch("httpx.AsyncClient") as mock_client:
        mock_get = _page(mock_client, 200, ARTICLE_PAGE)

        tips = await enricher.enrich(item)

        assert tips == [TIP]
        assert mock_get.call_args.args[0] == item.link

        fragment = extractor.extract.call_args.args[0]
        assert "Kyprios" in fragment
        assert "gamble responsibly" not in fragment


@pytest.mark.asyncio
async def test_enrich_bot_challenge_returns_empty(enricher, extractor, make_item) -> None:
    with patch("httpx.AsyncClient") as mock_client:
        _page(mock_client, 403, CHALLENGE_PAGE)

        assert await enricher.enrich(make_item(1)) == []
        extractor.extract.assert_not_called()


@pytest.mark.asyncio
async def test_enrich_missing_content_returns_empty(enricher, extractor, make_item) -> None:
    with patch("httpx.AsyncClient") as mock_client:
        _page(mock_client, 200, "<html><body><div class='entry_content'>  </div></body></html>")

        assert await enricher.enrich(make_item(1)) == []
        extractor.extract.assert_not_called()


@pytest.mark.asyncio
async def test_enrich_http_error_status_returns_empty(enricher, extractor, make_item) -> None:
    with patch("httpx.AsyncClient") as mock_client:
        _page(mock_client, 500, "<html><body>oops</body></html>")

        assert await enricher.enrich(make_item(1)) == []
        extractor.extract.assert_not_called()


@pytest.mark.asyncio
async def test_enrich_network_error_returns_empty(enricher, make_item) -> None:
    with patch("httpx.AsyncClient") as mock_client:
        mock_client.return_value.__aenter__.return_value.get = AsyncMock(
            side_effect=httpx.ReadTimeout("timed out")
        )

        assert await enricher.enrich(make_item(1)) == []


@pytest.mark.asyncio
async def test_enrich_extractor_failure_returns_empty(enricher, extractor, make_item) -> None:
    extractor.extract.side_effect = httpx.ConnectError("api down")

    with patch("httpx.AsyncClient") as mock_client:
        _page(mock_client, 200, ARTICLE_PAGE)

        assert await enricher.enrich(make_item(1)) == []


@pytest.mark.asyncio
async def test_enrich_waits_before_fetch(extractor, make_item) -> None:
    enricher = PageEnricher(extractor=extractor, delay_seconds=2.5)

    with patch("httpx.AsyncClient") as mock_client, \
            patch("asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
        _page(mock_client, 200, ARTICLE_PAGE)

        await enricher.enrich(make_item(1))

        mock_sleep.assert_awaited_once_with(2.5)


def test_find_content_uses_selector_order(extractor) -> None:
    enricher = PageEnricher(extractor=extractor, content_selectors=(".missing", "article"))
    html = "<html><body><article><p>Tips here</p></article></body></html>"

    assert enricher.find_content(html) == "<article><p>Tips here</p></article>"


def test_find_content_no_region(extractor) -> None:
    enricher = PageEnricher(extractor=extractor)

    assert enricher.find_content("<html><body><p>nothing</p></body></html>") == ""


def test_is_bot_challenge() -> None:
    assert is_bot_challenge(CHALLENGE_PAGE)
    assert is_bot_challenge("<title>Attention Required! | Cloudflare</title>")
    assert not is_bot_challenge(ARTICLE_PAGE)


@pytest.mark.asyncio
async def test_enrich_article_with_captcha_widget(enricher, extractor, make_item) -> None:
    """Test that a normal page embedding a captcha widget is still enriched."""
    with patch("httpx.AsyncClient") as mock_client:
        _page(mock_client, 200, RECAPTCHA_ARTICLE_PAGE)

        tips = await enricher.enrich(make_item(1))

        assert tips == [TIP]
        extractor.extract.assert_awaited_once()
        assert "Kyprios" in extractor.extract.call_args.args[0]


def test_is_bot_challenge_ignores_widgets_and_body_text() -> None:
    assert not is_bot_challenge(RECAPTCHA_ARTICLE_PAGE)
    assert not is_bot_challenge("<html><body><p>Just a moment... then the gates open</p></body></html>")
    assert is_bot_challenge('<html><body><form id="challenge-form" class="cf-browser-verification"></form></body></html>')
