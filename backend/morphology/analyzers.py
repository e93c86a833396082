"""Morphology analyzers: one per supported alphabet.

Each analyzer answers a single question for a lower-cased word: what is its
dictionary (normal) form, and is it a service part of speech that carries no
search meaning (prepositions, conjunctions, particles, interjections,
pronouns, articles)?

``RussianMorphology`` wraps ``pymorphy3``; ``EnglishMorphology`` combines the
NLTK perceptron tagger with the WordNet lemmatizer.  Both are safe to share
between threads once constructed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Protocol

logger = logging.getLogger(__name__)

_CACHE_SIZE = 100_000


@dataclass(frozen=True)
class WordForm:
    """The analysis of a single word."""

    normal_form: str
    service: bool


class Morphology(Protocol):
    def analyze(self, word: str) -> Optional[WordForm]:
        """Return the analysis of *word*, or ``None`` if it is unknown."""
        ...


# ---------------------------------------------------------------------------
# Russian
# ---------------------------------------------------------------------------

# pymorphy3 (OpenCorpora) part-of-speech tags of function words
RUSSIAN_SERVICE_POS = frozenset({"PREP", "CONJ", "PRCL", "INTJ", "NPRO"})


class RussianMorphology:
    """Russian analyzer backed by :class:`pymorphy3.MorphAnalyzer`."""

    def __init__(self, analyzer=None) -> None:
        if analyzer is None:
            import pymorphy3  # noqa: PLC0415

            analyzer = pymorphy3.MorphAnalyzer(lang="ru")
        self._analyzer = analyzer
        self.analyze = lru_cache(maxsize=_CACHE_SIZE)(self._analyze)

    def _analyze(self, word: str) -> Optional[WordForm]:
        parses = self._analyzer.parse(word)
        if not parses:
            return None
        best = parses[0]
        return WordForm(
            normal_form=best.normal_form,
            service=best.tag.POS in RUSSIAN_SERVICE_POS,
        )


# ---------------------------------------------------------------------------
# English
# ---------------------------------------------------------------------------

# Penn Treebank tags of function words
ENGLISH_SERVICE_TAGS = frozenset(
    {"IN", "CC", "DT", "PDT", "RP", "UH", "TO", "EX", "PRP", "PRP$", "WP", "WP$", "WDT"}
)

# resource path -> downloadable package name
_NLTK_RESOURCES = {
    "taggers/averaged_perceptron_tagger_eng": "averaged_perceptron_tagger_eng",
    "corpora/wordnet": "wordnet",
}


def ensure_nltk_data() -> None:
    """Download the NLTK data packages the English analyzer needs, if missing."""
    import nltk  # noqa: PLC0415

    for resource, package in _NLTK_RESOURCES.items():
        try:
            nltk.data.find(resource)
        except LookupError:
            logger.info("Downloading NLTK data package %r", package)
            nltk.download(package, quiet=True)


def _wordnet_pos(tag: str) -> str:
    """Map a Penn Treebank tag to the WordNet part of speech."""
    if tag.startswith("V"):
        return "v"
    if tag.startswith("J"):
        return "a"
    if tag.startswith("R"):
        return "r"
    return "n"


class EnglishMorphology:
    """English analyzer: NLTK perceptron tagger + WordNet lemmatizer."""

    def __init__(self) -> None:
        from nltk.stem import WordNetLemmatizer  # noqa: PLC0415
        from nltk.tag import PerceptronTagger  # noqa: PLC0415

        ensure_nltk_data()
        self._tagger = PerceptronTagger()
        self._lemmatizer = WordNetLemmatizer()
        # WordNet is a lazy corpus; load it here, not concurrently from workers.
        self._lemmatizer.lemmatize("words")
        self.analyze = lru_cache(maxsize=_CACHE_SIZE)(self._analyze)

    def _analyze(self, word: str) -> Optional[WordForm]:
        tagged = self._tagger.tag([word])
        if not tagged:
            return None
        tag = tagged[0][1]
        normal_form = self._lemmatizer.lemmatize(word, _wordnet_pos(tag))
        if not normal_form:
            return None
        return WordForm(normal_form=normal_form, service=tag in ENGLISH_SERVICE_TAGS)
