"""Centralised settings for the smart crawler.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (two levels up from this file)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)

_DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)


def _env_flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Workspace / result cache
    # ------------------------------------------------------------------
    workspace_dir: Path = field(
        default_factory=lambda: Path(
            os.environ.get("SMARTCRAWL_WORKSPACE", Path.home() / ".smartcrawl_data")
        )
    )

    @property
    def cache_dir(self) -> Path:
        """Directory holding one JSON file per stored extraction."""
        return self.workspace_dir / "extracted"

    # ------------------------------------------------------------------
    # Lightweight fetch
    # ------------------------------------------------------------------
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("REQUEST_TIMEOUT", "30.0"))
    )
    max_retries: int = field(
        default_factory=lambda: int(os.environ.get("FETCH_MAX_RETRIES", "2"))
    )
    retry_base_delay: float = field(
        default_factory=lambda: float(os.environ.get("RETRY_BASE_DELAY", "1.0"))
    )
    max_redirects: int = field(
        default_factory=lambda: int(os.environ.get("MAX_REDIRECTS", "5"))
    )
    user_agent: str = field(
        default_factory=lambda: os.environ.get("CRAWLER_USER_AGENT", _DEFAULT_USER_AGENT)
    )

    # ------------------------------------------------------------------
    # Rendered fetch (Playwright)
    # ------------------------------------------------------------------
    render_timeout: float = field(
        default_factory=lambda: float(os.environ.get("RENDER_TIMEOUT", "60.0"))
    )
    render_settle_delay: float = field(
        default_factory=lambda: float(os.environ.get("RENDER_SETTLE_DELAY", "2.0"))
    )
    browser_fallback: bool = field(
        default_factory=lambda: _env_flag("BROWSER_FALLBACK", "true")
    )

    # ------------------------------------------------------------------
    # Batch orchestration / locator policy
    # ------------------------------------------------------------------
    batch_delay: float = field(
        default_factory=lambda: float(os.environ.get("BATCH_DELAY", "2.0"))
    )
    block_private_hosts: bool = field(
        default_factory=lambda: _env_flag("BLOCK_PRIVATE_HOSTS", "true")
    )

    def ensure_workspace(self) -> None:
        """Create the workspace and cache directories if they do not exist."""
        self.cache_dir.mkdir(parents=True, exist_ok=True)


# Module-level singleton — import this everywhere:
#   from smartcrawl.config import settings
settings = Settings()
