"""Content extraction: raw response bytes → plain text, titles and links."""

from __future__ import annotations

import io
import logging
from typing import List, Optional
from urllib.parse import urljoin

import trafilatura
from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _decode(body: bytes, encoding: Optional[str]) -> str:
    try:
        return body.decode(encoding or "utf-8", errors="replace")
    except LookupError:
        # Unknown charset label in the Content-Type header
        return body.decode("utf-8", errors="replace")


def _bs4_text(html: str) -> str:
    """Extract the whole visible text of *html* with BeautifulSoup."""
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(["script", "style", "noscript", "template"]):
        tag.decompose()
    return soup.get_text(separator=" ", strip=True)


def _html_text(html: str) -> str:
    """Readable text of an HTML document.

    Tries ``trafilatura`` first.  Falls back to the BeautifulSoup full-text
    extraction when trafilatura returns nothing (tiny or highly dynamic pages).
    """
    text: str | None = trafilatura.extract(
        html,
        include_links=False,
        include_images=False,
        include_tables=True,
        no_fallback=False,
    )
    if not text:
        text = _bs4_text(html)
    return text or ""


def _pdf_text(body: bytes) -> str:
    import pypdf  # noqa: PLC0415

    try:
        reader = pypdf.PdfReader(io.BytesIO(body))
        pages = [page.extract_text() or "" for page in reader.pages]
    except (pypdf.errors.PyPdfError, ValueError) as exc:
        logger.debug("Unreadable PDF: %s", exc)
        return ""
    return "\n\n".join(p for p in pages if p.strip())


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def extract_text(body: bytes, content_type: str, encoding: Optional[str] = None) -> str:
    """Best-effort plain text of an HTTP body of any declared type.

    HTML goes through trafilatura/BeautifulSoup, PDF through ``pypdf``, other
    ``text/*`` types are decoded as-is.  Binary content yields ``""``, and so
    does any body the extractors fail on.
    """
    if not body:
        return ""
    try:
        return _extract(body, (content_type or "").lower(), encoding)
    except Exception as exc:  # noqa: BLE001
        logger.warning("Text extraction failed (%s): %s", content_type, exc)
        return ""


def _extract(body: bytes, ctype: str, encoding: Optional[str]) -> str:
    if "html" in ctype or "xml" in ctype:
        return _html_text(_decode(body, encoding))
    if "application/pdf" in ctype:
        return _pdf_text(body)
    if ctype.startswith("text/") or "json" in ctype:
        return _decode(body, encoding)
    return ""


def parse_html(html: str, base_url: str) -> tuple[str, List[str]]:
    """Parse *html* once and return ``(serialized_document, absolute_links)``.

    Every ``<a href>`` is resolved against *base_url*; order is preserved and
    duplicates are dropped.
    """
    soup = BeautifulSoup(html, "html.parser")
    seen: set[str] = set()
    links: List[str] = []
    for anchor in soup.find_all("a", href=True):
        href = anchor["href"].strip()
        if not href:
            continue
        absolute = urljoin(base_url, href)
        if absolute not in seen:
            seen.add(absolute)
            links.append(absolute)
    return str(soup), links


def extract_title(content: str) -> str:
    """Return the ``<title>`` of stored page content, or empty string."""
    soup = BeautifulSoup(content, "html.parser")
    if soup.title and soup.title.string:
        return soup.title.string.strip()
    return ""


def page_text(content: str) -> str:
    """Visible text of stored page content (HTML or already-plain text)."""
    return _bs4_text(content)
