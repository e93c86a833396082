"""Morphology package — word normalisation for indexing and search."""

from backend.morphology.analyzers import (
    EnglishMorphology,
    Morphology,
    RussianMorphology,
    WordForm,
)
from backend.morphology.lemmatizer import Lemmatizer, build_lemmatizer

__all__ = [
    "Lemmatizer",
    "build_lemmatizer",
    "Morphology",
    "WordForm",
    "RussianMorphology",
    "EnglishMorphology",
]
