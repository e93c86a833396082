"""Shared fixtures.

English morphology is replaced by :class:`FakeEnglish` so most of the suite
needs no NLTK data; Russian morphology uses the real pymorphy3 dictionaries.
"""

from __future__ import annotations

import sqlite3
from typing import Generator, Optional

import pytest

from backend.db.connection import get_connection, init_db
from backend.morphology import Lemmatizer, RussianMorphology, WordForm

_ENGLISH_SERVICE = frozenset(
    {"a", "an", "the", "and", "or", "but", "of", "in", "on", "at", "to", "with",
     "he", "she", "it", "they", "we", "you", "i", "oh"}
)


class FakeEnglish:
    """Tiny English analyzer: strips a plural ``s`` and knows a few function words."""

    def analyze(self, word: str) -> Optional[WordForm]:
        if word in _ENGLISH_SERVICE:
            return WordForm(normal_form=word, service=True)
        if len(word) > 3 and word.endswith("s") and not word.endswith("ss"):
            return WordForm(normal_form=word[:-1], service=False)
        return WordForm(normal_form=word, service=False)


@pytest.fixture(scope="session")
def russian() -> RussianMorphology:
    return RussianMorphology()


@pytest.fixture(scope="session")
def lemmatizer(russian: RussianMorphology) -> Lemmatizer:
    return Lemmatizer(russian=russian, english=FakeEnglish())


@pytest.fixture()
def conn() -> Generator[sqlite3.Connection, None, None]:
    """In-memory connection with the schema initialised."""
    connection = get_connection(db_path=":memory:")  # type: ignore[arg-type]
    init_db(connection)
    yield connection
    connection.close()


def html_page(title: str, body: str, links: tuple[str, ...] = ()) -> str:
    anchors = "".join(f'<a href="{href}">link</a>' for href in links)
    return (
        f"<html><head><title>{title}</title></head>"
        f"<body><p>{body}</p>{anchors}</body></html>"
    )
