"""Utilities for rendering index state in the CLI."""

from __future__ import annotations

from backend.responses import SiteStatistics


def render_site(site: SiteStatistics) -> str:
    """One status line per site, e.g. ``  INDEXED   https://a.test  pages=3  lemmas=12``."""
    line = f"  {site.status:<9} {site.url}  pages={site.pages}  lemmas={site.lemmas}"
    if site.error:
        line += f"  error={site.error!r}"
    return line
