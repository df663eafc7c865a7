"""Configuration management."""

import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Optional

import yaml


DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; RSS Reader; tipster-monitor)"


@dataclass(frozen=True)
class FeedConfig:
    """Feed settings."""
    url: str = "https://betting.betfair.com/index.xml"
    author: str = "Rhys Williams"
    user_agent: str = DEFAULT_USER_AGENT


@dataclass(frozen=True)
class HttpConfig:
    """Outbound HTTP settings."""
    timeout: float = 30.0


@dataclass(frozen=True)
class EnrichmentConfig:
    """Post page enrichment settings."""
    delay_seconds: float = 2.0
    content_selectors: tuple[str, ...] = (
        ".entry_content",
        "article .content",
        "article",
    )
    max_fragment_chars: int = 20000


@dataclass(frozen=True)
class ClaudeConfig:
    """Claude API settings."""
    model: str = "claude-sonnet-4-20250514"
    max_tokens: int = 2048
    temperature: float = 0.0
    max_retries: int = 3
    initial_retry_delay: float = 2.0
    request_delay: float = 1.5


@dataclass(frozen=True)
class StorageConfig:
    """Seen posts storage settings."""
    backend: str = "file"
    path: Path = Path("artifacts/seen_posts.yaml")
    key: str = "seen_posts"


@dataclass(frozen=True)
class EmailConfig:
    """SMTP email settings (credentials from environment only)."""
    user: str = ""
    password: str = ""
    to: str = ""
    smtp_server: str = "smtp.gmail.com"
    smtp_port: int = 587

    @property
    def configured(self) -> bool:
        return bool(self.user and self.password)

    @property
    def recipient(self) -> str:
        return self.to or self.user


@dataclass(frozen=True)
class EnabledChannels:
    """Notification channels resolved for one run."""
    email: bool = False
    chat: bool = False

    @property
    def any(self) -> bool:
        return self.email or self.chat


@dataclass(frozen=True)
class Settings:
    """Application settings."""

    # Secrets (from environment only)
    anthropic_api_key: str = ""
    slack_webhook_url: Optional[str] = None
    kv_rest_api_url: Optional[str] = None
    kv_rest_api_token: Optional[str] = None
    email: EmailConfig = field(default_factory=EmailConfig)

    # Config sections
    feed: FeedConfig = field(default_factory=FeedConfig)
    http: HttpConfig = field(default_factory=HttpConfig)
    enrichment: EnrichmentConfig = field(default_factory=EnrichmentConfig)
    claude: ClaudeConfig = field(default_factory=ClaudeConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    display_timezone: str = "Europe/Dublin"

    @property
    def enrichment_enabled(self) -> bool:
        return bool(self.anthropic_api_key)

    def enabled_channels(self, no_email: bool = False, no_slack: bool = False) -> EnabledChannels:
        """Resolve which channels have configuration and are not disabled."""
        return EnabledChannels(
            email=self.email.configured and not no_email,
            chat=bool(self.slack_webhook_url) and not no_slack,
        )


def load_config(config_path: Path = Path("config.yaml")) -> dict:
    """Load configuration from YAML file."""
    if not config_path.exists():
        return {}

    with open(config_path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def _section(config: dict, name: str, cls: type) -> dict:
    """Return the YAML section for a dataclass, dropping unknown keys."""
    values = dict(config.get(name) or {})
    known = {f.name for f in fields(cls)}

    for key in sorted(set(values) - known):
        print(f"⚠️  Ignoring unknown config key: {name}.{key}")
        del values[key]

    return values


def get_settings(config_path: Path = Path("config.yaml")) -> Settings:
    """Get application settings from YAML config and environment."""
    config = load_config(config_path)

    email = EmailConfig(
        user=os.getenv("EMAIL_USER", ""),
        password=os.getenv("EMAIL_PASS", ""),
        to=os.getenv("EMAIL_TO", ""),
        smtp_server=os.getenv("EMAIL_SMTP_SERVER", "smtp.gmail.com"),
        smtp_port=int(os.getenv("EMAIL_SMTP_PORT") or 587),
    )

    enrichment = _section(config, "enrichment", EnrichmentConfig)
    if "content_selectors" in enrichment:
        enrichment["content_selectors"] = tuple(enrichment["content_selectors"])

    storage = _section(config, "storage", StorageConfig)
    if "path" in storage:
        storage["path"] = Path(storage["path"])

    display = config.get("display") or {}

    return Settings(
        anthropic_api_key=os.getenv("ANTHROPIC_API_KEY", ""),
        slack_webhook_url=os.getenv("SLACK_WEBHOOK") or None,
        kv_rest_api_url=os.getenv("KV_REST_API_URL") or None,
        kv_rest_api_token=os.getenv("KV_REST_API_TOKEN") or None,
        email=email,
        feed=FeedConfig(**_section(config, "feed", FeedConfig)),
        http=HttpConfig(**_section(config, "http", HttpConfig)),
        enrichment=EnrichmentConfig(**enrichment),
        claude=ClaudeConfig(**_section(config, "claude", ClaudeConfig)),
        storage=StorageConfig(**storage),
        display_timezone=display.get("timezone", "Europe/Dublin"),
    )
