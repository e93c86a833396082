"""Result objects returned by the indexing, search and statistics services.

Plain dataclasses; the API layer converts them with ``to_dict`` and drops
``error`` when it is ``None``.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Optional


def _without_none_error(data: dict[str, Any]) -> dict[str, Any]:
    if data.get("error") is None:
        data.pop("error", None)
    return data


@dataclass
class ApiResponse:
    result: bool
    error: Optional[str] = None

    @classmethod
    def ok(cls) -> "ApiResponse":
        return cls(result=True)

    @classmethod
    def fail(cls, error: str) -> "ApiResponse":
        return cls(result=False, error=error)

    def to_dict(self) -> dict[str, Any]:
        return _without_none_error(asdict(self))


@dataclass
class SearchItem:
    site: str
    site_name: str
    uri: str
    title: str
    relevance: float
    snippet: str


@dataclass
class SearchResponse:
    result: bool
    count: int = 0
    data: list[SearchItem] = field(default_factory=list)
    error: Optional[str] = None

    @classmethod
    def fail(cls, error: str) -> "SearchResponse":
        return cls(result=False, error=error)

    def to_dict(self) -> dict[str, Any]:
        return _without_none_error(asdict(self))


@dataclass
class TotalStatistics:
    sites: int
    pages: int
    lemmas: int
    indexing: bool


@dataclass
class SiteStatistics:
    url: str
    name: str
    status: str
    status_time: int
    error: Optional[str]
    pages: int
    lemmas: int


@dataclass
class StatisticsResponse:
    total: TotalStatistics
    detailed: list[SiteStatistics]
    result: bool = True

    def to_dict(self) -> dict[str, Any]:
        detailed = []
        for item in self.detailed:
            entry = asdict(item)
            if entry["error"] is None:
                entry.pop("error")
            detailed.append(entry)
        return {
            "result": self.result,
            "statistics": {"total": asdict(self.total), "detailed": detailed},
        }
