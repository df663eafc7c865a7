"""Source adapters for fetching posts."""

from tipster_monitor.adapters.sources.betfair_rss_source import BetfairRSSSource

__all__ = ["BetfairRSSSource"]
