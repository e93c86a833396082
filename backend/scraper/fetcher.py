"""HTTP fetcher for the crawler and single-page indexing."""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from backend.config import settings
from backend.scraper.extractor import extract_text, parse_html
from backend.scraper.models import FetchFailure, FetchResult

logger = logging.getLogger(__name__)


def default_headers() -> dict[str, str]:
    return {
        "User-Agent": settings.user_agent,
        "Referer": settings.referrer,
    }


def make_client() -> httpx.Client:
    """Return an ``httpx.Client`` configured for crawling.

    The client is thread-safe; one instance is shared by all workers of a run.
    """
    return httpx.Client(
        headers=default_headers(),
        timeout=settings.request_timeout,
        follow_redirects=True,
    )


def fetch_page(url: str, client: Optional[httpx.Client] = None) -> FetchResult:
    """Fetch *url* and return a :class:`FetchResult`.

    Non-200 responses are returned (not raised) with the reason phrase as
    ``content``.  For a 200 response the body is run through
    :func:`~backend.scraper.extractor.extract_text`; HTML bodies are also
    parsed once to collect links and the serialized document.

    Raises:
        FetchFailure: On any transport error (connect, read, timeout) and on
            URLs httpx refuses to request.
    """
    owns_client = client is None
    http = client or make_client()
    try:
        response = http.get(url)
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        raise FetchFailure(url, exc) from exc
    finally:
        if owns_client:
            http.close()

    result = FetchResult(
        url=url,
        status_code=response.status_code,
        reason=response.reason_phrase,
        content_type=response.headers.get("content-type", ""),
        body=response.content,
    )
    logger.debug("GET %s -> %s %s", url, result.status_code, result.content_type)

    if not result.ok:
        result.content = result.reason
        return result

    result.text = extract_text(result.body, result.content_type, response.encoding)
    if result.is_html:
        result.content, result.links = parse_html(response.text, str(response.url))
    else:
        result.content = result.text
    return result
