"""Dataclass models representing DB rows.

These are plain Python objects – not ORM models.  Relations are plain ids;
callers fetch related rows explicitly through the store modules.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class SiteStatus(str, Enum):
    INDEXING = "INDEXING"
    INDEXED = "INDEXED"
    FAILED = "FAILED"


@dataclass
class Site:
    id: int
    url: str
    name: str
    status: SiteStatus
    status_time: int
    last_error: str | None = None


@dataclass
class Page:
    id: int
    site_id: int
    path: str
    code: int
    content: str


@dataclass
class Lemma:
    id: int
    site_id: int
    lemma: str
    frequency: int


@dataclass
class Posting:
    id: int
    page_id: int
    lemma_id: int
    rank: float
