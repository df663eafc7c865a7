"""Post enrichment adapters."""

from tipster_monitor.adapters.enrichment.page_enricher import PageEnricher, is_bot_challenge

__all__ = ["PageEnricher", "is_bot_challenge"]
