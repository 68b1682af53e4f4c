"""Configuration management for Parlaid."""

import json
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv
from pydantic import ValidationError

from parlaid.exceptions import ConfigurationError
from parlaid.models.credentials import Credentials

DEFAULT_BASE_URL = "https://api.parler.com/"
DEFAULT_ORIGIN = "https://parler.com"
DEFAULT_AUTH_FILE = "config/auth.json"
DEFAULT_USER_AGENT = " ".join(
    [
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64)",
        "AppleWebKit/537.36 (KHTML, like Gecko)",
        "Chrome/83.0.4103.116",
        "Safari/537.36",
    ]
)


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() not in ("0", "false", "no", "off", "")


@dataclass
class Config:
    """Application configuration."""

    base_url: str = DEFAULT_BASE_URL
    origin: str = DEFAULT_ORIGIN
    user_agent: str = DEFAULT_USER_AGENT
    auth_file: str = DEFAULT_AUTH_FILE

    # Pagination
    page_size: int = 20

    # Rate limiting; when disabled only the per-request jitter is applied
    rate_limiting_enabled: bool = True

    # Timeouts
    request_timeout: float = 30.0

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        # override=False ensures environment variables take precedence over .env
        load_dotenv(override=False)

        return cls(
            base_url=os.getenv("PARLAID_BASE_URL", DEFAULT_BASE_URL),
            user_agent=os.getenv("PARLAID_USER_AGENT", DEFAULT_USER_AGENT),
            auth_file=os.getenv("PARLAID_AUTH_FILE", DEFAULT_AUTH_FILE),
            rate_limiting_enabled=_env_flag("PARLAID_RATE_LIMITING", True),
        )


def load_credentials(path: str | Path) -> Credentials:
    """Read the JSON authorization document at ``path``.

    The document is an object with an ``mst`` token and an optional ``jst``
    token, e.g. ``{"mst": "...", "jst": "..."}``.

    Raises:
        ConfigurationError: If the file is unreadable, is not a JSON object,
            or does not supply the tokens.
    """
    path = Path(path)
    try:
        document = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Unable to read authorization data from {path}") from e

    if not isinstance(document, dict) or "mst" not in document:
        raise ConfigurationError(f"Unable to read authorization data from {path}")

    try:
        return Credentials(mst=document["mst"], jst=document.get("jst") or "")
    except ValidationError as e:
        raise ConfigurationError(f"Invalid authorization data in {path}") from e


# Global config instance
_config: Config | None = None


def get_config() -> Config:
    """Get or create the global configuration instance."""
    global _config
    if _config is None:
        _config = Config.from_env()
    return _config


def set_config(config: Config | None) -> None:
    """Set the global configuration instance (useful for testing)."""
    global _config
    _config = config
