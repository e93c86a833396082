"""Snippet extraction with query-term highlighting.

The page text is split on whitespace.  A token *matches* when its lemmas
intersect the query lemmas.  Around each match a window of ``window`` tokens
on either side is taken until ``max_length`` characters have been collected;
windows that overlap an earlier one only add their new tail.  Fragments are
joined with ``" ... "``, matching tokens are wrapped in ``<b>``, and all text
is HTML-escaped.
"""

from __future__ import annotations

from html import escape
from typing import AbstractSet

from backend.morphology import Lemmatizer

SEPARATOR = " ... "


def build_snippet(
    text: str,
    query_lemmas: AbstractSet[str],
    lemmatizer: Lemmatizer,
    max_length: int = 200,
    window: int = 5,
) -> str:
    tokens = text.split()
    if not tokens:
        return ""

    cache: dict[str, bool] = {}

    def matches(token: str) -> bool:
        key = token.lower()
        if key not in cache:
            cache[key] = bool(lemmatizer.lemma_set(key) & query_lemmas)
        return cache[key]

    # [start, end) token ranges; adjacent or overlapping windows are merged
    ranges: list[list[int]] = []
    length = 0
    for pos, token in enumerate(tokens):
        if length >= max_length:
            break
        if not matches(token):
            continue
        start = max(0, pos - window)
        end = min(len(tokens), pos + window + 1)
        if ranges and start <= ranges[-1][1]:
            if end <= ranges[-1][1]:
                continue
            added = tokens[ranges[-1][1]:end]
            ranges[-1][1] = end
        else:
            added = tokens[start:end]
            ranges.append([start, end])
        length += sum(len(t) + 1 for t in added)

    if not ranges:
        return escape(" ".join(tokens)[:max_length])

    fragments = []
    for start, end in ranges:
        fragments.append(
            " ".join(
                f"<b>{escape(t)}</b>" if matches(t) else escape(t)
                for t in tokens[start:end]
            )
        )
    return SEPARATOR.join(fragments)
