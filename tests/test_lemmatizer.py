"""Tests for the morphology layer (text → lemma counts)."""

from __future__ import annotations

import nltk
import pytest

from backend.morphology import EnglishMorphology, Lemmatizer, RussianMorphology, WordForm
from backend.morphology.analyzers import _wordnet_pos, ensure_nltk_data
from backend.morphology.lemmatizer import is_russian


class TestIsRussian:
    def test_cyrillic(self) -> None:
        assert is_russian("кот")

    def test_latin(self) -> None:
        assert not is_russian("cat")

    def test_mixed_counts_as_russian(self) -> None:
        assert is_russian("catкот")


class TestFindLemmas:
    def test_blank_input(self, lemmatizer: Lemmatizer) -> None:
        assert lemmatizer.find_lemmas("") == {}
        assert lemmatizer.find_lemmas("   \n\t") == {}

    def test_no_letters(self, lemmatizer: Lemmatizer) -> None:
        assert lemmatizer.find_lemmas("123 !!! 4.5") == {}

    def test_russian_inflections_share_a_lemma(self, lemmatizer: Lemmatizer) -> None:
        lemmas = lemmatizer.find_lemmas("Коты и кошки. Кот!")
        assert lemmas == {"кот": 2, "кошка": 1}

    def test_russian_service_words_dropped(self, lemmatizer: Lemmatizer) -> None:
        assert lemmatizer.find_lemmas("и в на но") == {}

    def test_english_goes_to_english_analyzer(self, lemmatizer: Lemmatizer) -> None:
        assert lemmatizer.find_lemmas("The cats and the dogs") == {"cat": 1, "dog": 1}

    def test_mixed_text(self, lemmatizer: Lemmatizer) -> None:
        lemmas = lemmatizer.find_lemmas("cats коты")
        assert lemmas == {"cat": 1, "кот": 1}

    def test_case_insensitive(self, lemmatizer: Lemmatizer) -> None:
        assert lemmatizer.find_lemmas("CAT Cat cat") == {"cat": 3}

    def test_counts_are_positive(self, lemmatizer: Lemmatizer) -> None:
        lemmas = lemmatizer.find_lemmas("кот кот кошка собака cats dog dog")
        assert all(count > 0 for count in lemmas.values())

    def test_deterministic(self, lemmatizer: Lemmatizer) -> None:
        text = "Коты гуляют по крыше, а dogs sleep"
        assert lemmatizer.find_lemmas(text) == lemmatizer.find_lemmas(text)

    def test_digits_split_words(self, lemmatizer: Lemmatizer) -> None:
        assert lemmatizer.find_lemmas("cat2dog") == {"cat": 1, "dog": 1}


class TestUnknownWords:
    class _Nothing:
        def analyze(self, word: str):
            return None

    class _Empty:
        def analyze(self, word: str):
            return WordForm(normal_form="", service=False)

    def test_unanalyzable_words_skipped(self) -> None:
        lemmatizer = Lemmatizer(russian=self._Nothing(), english=self._Empty())
        assert lemmatizer.find_lemmas("кот cat") == {}


class TestLemmaSet:
    def test_distinct(self, lemmatizer: Lemmatizer) -> None:
        assert lemmatizer.lemma_set("кот коты кота") == {"кот"}


class TestWordnetPos:
    def test_mapping(self) -> None:
        assert _wordnet_pos("VBD") == "v"
        assert _wordnet_pos("JJ") == "a"
        assert _wordnet_pos("RB") == "r"
        assert _wordnet_pos("NNS") == "n"


# ---------------------------------------------------------------------------
# NLTK-backed English analyzer
# ---------------------------------------------------------------------------

@pytest.fixture(scope="module")
def english() -> EnglishMorphology:
    return EnglishMorphology()


class TestEnglishMorphology:
    def test_sentence(self, russian: RussianMorphology, english: EnglishMorphology) -> None:
        lemmatizer = Lemmatizer(russian=russian, english=english)
        assert lemmatizer.find_lemmas("The cats and the dogs were running") == {
            "cat": 1, "dog": 1, "be": 1, "run": 1,
        }

    @pytest.mark.parametrize("word", ["the", "and", "of", "they"])
    def test_function_words_are_service(self, english: EnglishMorphology, word: str) -> None:
        assert english.analyze(word).service is True

    @pytest.mark.parametrize("word, normal", [("cats", "cat"), ("running", "run")])
    def test_normal_forms(self, english: EnglishMorphology, word: str, normal: str) -> None:
        form = english.analyze(word)
        assert form == WordForm(normal_form=normal, service=False)

    def test_missing_data_is_downloaded(self, monkeypatch) -> None:
        downloads = []

        def not_found(resource: str) -> None:
            raise LookupError(resource)

        monkeypatch.setattr(nltk.data, "find", not_found)
        monkeypatch.setattr(nltk, "download", lambda package, quiet: downloads.append(package))
        ensure_nltk_data()
        assert downloads == ["averaged_perceptron_tagger_eng", "wordnet"]
