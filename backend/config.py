"""Centralised settings for the site search backend.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).

The list of sites to crawl lives in a separate JSON file (see
:func:`load_sites`) because it is an ordered list of records rather than a
scalar setting::

    {"sites": [{"url": "https://example.com/", "name": "Example"}]}
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load .env from the project root (two levels up from this file)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)


@dataclass(frozen=True)
class SiteConfig:
    """One configured crawl root."""

    url: str
    name: str


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Workspace / storage
    # ------------------------------------------------------------------
    workspace_dir: Path = field(
        default_factory=lambda: Path(
            os.environ.get("SEARCH_WORKSPACE", Path.home() / ".site_search")
        )
    )

    @property
    def db_path(self) -> Path:
        """Absolute path to the SQLite database file."""
        return self.workspace_dir / "search.db"

    @property
    def schema_path(self) -> Path:
        """Absolute path to the schema SQL file bundled with the package."""
        return Path(__file__).resolve().parent / "db" / "schema.sql"

    sites_file: Path = field(
        default_factory=lambda: Path(
            os.environ.get(
                "SITES_CONFIG",
                Path(os.environ.get("SEARCH_WORKSPACE", Path.home() / ".site_search"))
                / "sites.json",
            )
        )
    )

    # ------------------------------------------------------------------
    # Fetcher
    # ------------------------------------------------------------------
    user_agent: str = field(
        default_factory=lambda: os.environ.get(
            "USER_AGENT", "Mozilla/5.0 (compatible; SiteSearchBot/1.0)"
        )
    )
    referrer: str = field(
        default_factory=lambda: os.environ.get("REFERRER", "http://www.google.com")
    )
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("REQUEST_TIMEOUT", "30.0"))
    )

    # ------------------------------------------------------------------
    # Crawler
    # ------------------------------------------------------------------
    politeness_delay: float = field(
        default_factory=lambda: float(os.environ.get("POLITENESS_DELAY", "0.25"))
    )
    crawl_workers: int = field(
        default_factory=lambda: int(
            os.environ.get("CRAWL_WORKERS", str(os.cpu_count() or 4))
        )
    )

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------
    snippet_length: int = field(
        default_factory=lambda: int(os.environ.get("SNIPPET_LENGTH", "200"))
    )
    snippet_window: int = field(
        default_factory=lambda: int(os.environ.get("SNIPPET_WINDOW", "5"))
    )
    search_limit: int = field(
        default_factory=lambda: int(os.environ.get("SEARCH_LIMIT", "20"))
    )

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    log_level: str = field(
        default_factory=lambda: os.environ.get("LOG_LEVEL", "INFO").upper()
    )

    def ensure_workspace(self) -> None:
        """Create the workspace directory if it does not exist."""
        self.workspace_dir.mkdir(parents=True, exist_ok=True)


def load_sites(path: Optional[Path] = None) -> list[SiteConfig]:
    """Read the configured sites from *path* (defaults to ``settings.sites_file``).

    Returns an empty list when the file does not exist.  Order is preserved:
    single-page indexing picks the first site whose root URL prefixes the
    requested URL.

    Raises:
        ValueError: If the file is not valid JSON or an entry lacks ``url``.
    """
    sites_path = Path(path or settings.sites_file)
    if not sites_path.exists():
        return []

    try:
        raw = json.loads(sites_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid sites file {sites_path}: {exc}") from exc

    entries = raw.get("sites", []) if isinstance(raw, dict) else raw
    sites: list[SiteConfig] = []
    for entry in entries:
        if not entry.get("url"):
            raise ValueError(f"Site entry without url in {sites_path}: {entry!r}")
        sites.append(SiteConfig(url=entry["url"], name=entry.get("name") or entry["url"]))
    return sites


# Module-level singleton; import this everywhere:
#   from backend.config import settings
settings = Settings()
