"""Search package — query engine and snippet builder."""

from backend.search.engine import SearchService
from backend.search.snippets import build_snippet

__all__ = ["SearchService", "build_snippet"]
