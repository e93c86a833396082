"""Text → lemma frequency map.

:class:`Lemmatizer` is a plain value holding one analyzer per alphabet.  It is
built once per process with :func:`build_lemmatizer` and shared read-only by
every crawler thread, the search engine, and the snippet builder.
"""

from __future__ import annotations

import re
from collections import Counter
from dataclasses import dataclass

from backend.morphology.analyzers import EnglishMorphology, Morphology, RussianMorphology

WORD_PATTERN = re.compile(r"[a-zA-Zа-яА-Я]+")
_RUSSIAN_LETTER = re.compile(r"[а-я]")


def is_russian(word: str) -> bool:
    """``True`` if the (lower-cased) *word* contains any Cyrillic а–я letter."""
    return _RUSSIAN_LETTER.search(word) is not None


@dataclass(frozen=True)
class Lemmatizer:
    russian: Morphology
    english: Morphology

    def find_lemmas(self, text: str) -> dict[str, int]:
        """Return ``{lemma: occurrences}`` for every meaningful word in *text*.

        Service words are dropped, as are words the analyzer cannot normalise.
        Blank input yields an empty mapping.
        """
        lemmas: Counter[str] = Counter()
        for word in WORD_PATTERN.findall(text.lower()):
            morphology = self.russian if is_russian(word) else self.english
            form = morphology.analyze(word)
            if form is None or form.service or not form.normal_form:
                continue
            lemmas[form.normal_form] += 1
        return dict(lemmas)

    def lemma_set(self, text: str) -> set[str]:
        """Distinct lemmas of *text* (used for single tokens and queries)."""
        return set(self.find_lemmas(text))


def build_lemmatizer() -> Lemmatizer:
    """Load both morphology dictionaries.  Call once at startup."""
    return Lemmatizer(russian=RussianMorphology(), english=EnglishMorphology())
