"""Data models for the fetch pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List


@dataclass
class FetchResult:
    """The outcome of fetching a single URL.

    ``content`` is what gets persisted as the page body: the serialized parsed
    document for HTML, the extracted plain text for anything else, and the
    HTTP reason phrase for non-200 responses.
    """

    url: str
    status_code: int
    reason: str
    content_type: str
    body: bytes = b""
    text: str = ""
    content: str = ""
    links: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status_code == 200

    @property
    def is_html(self) -> bool:
        return "text/html" in self.content_type.lower()


class FetchFailure(Exception):
    """A transport-level failure (connection, read, timeout) for one URL."""

    def __init__(self, url: str, cause: Exception) -> None:
        self.url = url
        self.cause = cause
        super().__init__(f"{type(cause).__name__}: {cause}")

    def describe(self) -> str:
        """One-line description stored as the failed page's content."""
        return f"Page processing error: {type(self.cause).__name__} - {self.cause}"
