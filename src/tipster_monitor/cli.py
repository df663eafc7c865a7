"""CLI entry point for tipster monitor."""

import asyncio
import json
from datetime import datetime, timezone
from pathlib import Path
from zoneinfo import ZoneInfo

import typer

from tipster_monitor.adapters.enrichment import PageEnricher
from tipster_monitor.adapters.llm import ClaudeTipExtractor
from tipster_monitor.adapters.notifications import EmailNotifier, SlackNotifier
from tipster_monitor.adapters.sources import BetfairRSSSource
from tipster_monitor.adapters.storage import VercelKVStore, YamlFileStore
from tipster_monitor.config import Settings, get_settings
from tipster_monitor.core import KeyValueStore, Notifier, SeenSetStore, StorageError
from tipster_monitor.use_cases import MonitoringService, NotificationDispatcher


app = typer.Typer(help="Watch the Betfair feed for new tipster posts and send alerts.")

CONFIG_OPTION = typer.Option(Path("config.yaml"), "--config", help="Path to YAML config")


def build_store(settings: Settings) -> KeyValueStore:
    """Create the key-value store selected in settings."""
    if settings.storage.backend == "vercel_kv":
        if not (settings.kv_rest_api_url and settings.kv_rest_api_token):
            raise typer.BadParameter("vercel_kv storage needs KV_REST_API_URL and KV_REST_API_TOKEN")
        return VercelKVStore(
            settings.kv_rest_api_url,
            settings.kv_rest_api_token,
            timeout=settings.http.timeout,
        )
    return YamlFileStore(settings.storage.path)


def build_service(
    settings: Settings,
    no_email: bool = False,
    no_slack: bool = False,
    no_enrich: bool = False,
) -> MonitoringService:
    """Wire a monitoring service from settings."""
    tz = ZoneInfo(settings.display_timezone)
    author = settings.feed.author
    channels = settings.enabled_channels(no_email=no_email, no_slack=no_slack)

    notifiers: list[Notifier] = []
    if channels.email:
        notifiers.append(EmailNotifier(settings.email, author=author, tz=tz, timeout=settings.http.timeout))
    if channels.chat and settings.slack_webhook_url:
        notifiers.append(SlackNotifier(settings.slack_webhook_url, author=author, tz=tz, timeout=settings.http.timeout))

    enricher = None
    if settings.enrichment_enabled and not no_enrich:
        enricher = PageEnricher(
            extractor=ClaudeTipExtractor(settings.anthropic_api_key, settings.claude),
            delay_seconds=settings.enrichment.delay_seconds,
            content_selectors=settings.enrichment.content_selectors,
            max_fragment_chars=settings.enrichment.max_fragment_chars,
            user_agent=settings.feed.user_agent,
            timeout=settings.http.timeout,
        )

    return MonitoringService(
        source=BetfairRSSSource(
            url=settings.feed.url,
            author=author,
            user_agent=settings.feed.user_agent,
            timeout=settings.http.timeout,
        ),
        seen_store=SeenSetStore(build_store(settings), settings.storage.key),
        dispatcher=NotificationDispatcher(notifiers),
        enricher=enricher,
        author=author,
        tz=tz,
    )


def print_credentials(settings: Settings, no_email: bool, no_slack: bool, no_enrich: bool) -> None:
    """Show which optional integrations are active."""
    print("\n🔑 Credentials:")

    if no_email:
        print("  ⚠️  EMAIL_USER/EMAIL_PASS - disabled with --no-email")
    elif settings.email.configured:
        print(f"  ✓ EMAIL_USER/EMAIL_PASS - alerts to {settings.email.recipient}")
    else:
        print("  ✗ EMAIL_USER/EMAIL_PASS - not found (email alerts disabled)")

    if no_slack:
        print("  ⚠️  SLACK_WEBHOOK - disabled with --no-slack")
    elif settings.slack_webhook_url:
        print("  ✓ SLACK_WEBHOOK - for Slack alerts")
    else:
        print("  ✗ SLACK_WEBHOOK - not found (Slack alerts disabled)")

    if no_enrich:
        print("  ⚠️  ANTHROPIC_API_KEY - disabled with --no-enrich")
    elif settings.enrichment_enabled:
        print("  ✓ ANTHROPIC_API_KEY - for tip extraction")
    else:
        print("  ✗ ANTHROPIC_API_KEY - not found (tips will not be extracted)")


def _emit(data: dict) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


@app.command()
def check(
    config: Path = CONFIG_OPTION,
    no_email: bool = typer.Option(False, "--no-email", help="Disable email alerts"),
    no_slack: bool = typer.Option(False, "--no-slack", help="Disable Slack alerts"),
    no_enrich: bool = typer.Option(False, "--no-enrich", help="Skip tip extraction"),
) -> None:
    """Check the feed once and alert on new posts."""
    settings = get_settings(config)
    print_credentials(settings, no_email, no_slack, no_enrich)

    service = build_service(settings, no_email=no_email, no_slack=no_slack, no_enrich=no_enrich)
    report = asyncio.run(service.run())

    print()
    _emit(report.to_dict())

    if not report.succeeded:
        raise typer.Exit(code=1)


@app.command("clear-seen")
def clear_seen(config: Path = CONFIG_OPTION) -> None:
    """Forget all seen posts."""
    settings = get_settings(config)
    tracker = SeenSetStore(build_store(settings), settings.storage.key)

    try:
        asyncio.run(tracker.clear())
    except StorageError as e:
        _emit({"success": False, "error": str(e)})
        raise typer.Exit(code=1)

    _emit({
        "success": True,
        "message": "Cleared all seen posts",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    })


@app.command("show-seen")
def show_seen(config: Path = CONFIG_OPTION) -> None:
    """Print stored seen posts."""
    settings = get_settings(config)
    tracker = SeenSetStore(build_store(settings), settings.storage.key)

    try:
        links = asyncio.run(tracker.inspect())
    except StorageError as e:
        _emit({"success": False, "error": str(e)})
        raise typer.Exit(code=1)

    _emit({
        "success": True,
        "seenPostsCount": len(links),
        "seenPosts": links,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    })


if __name__ == "__main__":
    app()
