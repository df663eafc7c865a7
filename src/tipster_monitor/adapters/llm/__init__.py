"""LLM adapters."""

from tipster_monitor.adapters.llm.claude_client import ClaudeTipExtractor

__all__ = ["ClaudeTipExtractor"]
