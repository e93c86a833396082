"""Query engine and snippet tests over a hand-built index."""

from __future__ import annotations

import sqlite3

import pytest

from backend.config import Settings
from backend.db import sites
from backend.indexing import save_page
from backend.morphology import Lemmatizer, WordForm
from backend.search import SearchService, build_snippet
from conftest import FakeEnglish, html_page

_PAGES_A = {
    "/": ("Главная", "Кот гуляет. Кот спит."),
    "/a": ("Рыжий", "Рыжий кот и собака."),
    "/b": ("Лай", "Собака лает."),
}
_PAGES_B = {
    "/": ("Другой", "Кот ловит мышь."),
}


def _index(conn: sqlite3.Connection, lemmatizer: Lemmatizer, url: str, name: str, docs) -> None:
    site = sites.create_site(conn, url, name)
    for path, (title, body) in docs.items():
        save_page(conn, site, path, 200, html_page(title, body), lemmatizer.find_lemmas(body))


@pytest.fixture()
def service(conn: sqlite3.Connection, lemmatizer: Lemmatizer) -> SearchService:
    _index(conn, lemmatizer, "https://a.test/", "A", _PAGES_A)
    _index(conn, lemmatizer, "https://b.test/", "B", _PAGES_B)
    return SearchService(conn, lemmatizer, config=Settings())


class TestErrors:
    @pytest.mark.parametrize("query", ["", "   "])
    def test_empty_query(self, service: SearchService, query: str) -> None:
        response = service.search(query)
        assert response.result is False
        assert response.error == "Empty search query"

    def test_indexing_in_progress(self, conn, lemmatizer) -> None:
        service = SearchService(conn, lemmatizer, is_indexing=lambda: True)
        response = service.search("кот")
        assert response.result is False
        assert response.error == (
            "Indexing is in progress, search is unavailable until it completes"
        )


class TestSearch:
    def test_single_term_on_one_site(self, service: SearchService) -> None:
        response = service.search("кот", site="https://a.test/")
        assert response.result is True
        assert response.count == 2
        assert [item.uri for item in response.data] == ["/", "/a"]
        assert [item.relevance for item in response.data] == [1.0, 0.5]

    def test_result_fields(self, service: SearchService) -> None:
        item = service.search("коты", site="https://a.test/").data[0]
        assert item.site == "https://a.test/"
        assert item.site_name == "A"
        assert item.title == "Главная"
        assert "<b>Кот</b>" in item.snippet

    def test_all_sites(self, service: SearchService) -> None:
        response = service.search("кот")
        assert response.count == 3
        assert {(i.site, i.uri) for i in response.data} == {
            ("https://a.test/", "/"), ("https://a.test/", "/a"), ("https://b.test/", "/"),
        }

    def test_and_semantics(self, service: SearchService) -> None:
        response = service.search("кот собака")
        assert response.count == 1
        assert response.data[0].uri == "/a"
        assert response.data[0].relevance == 1.0

    def test_two_terms_ranked_by_rank_sum(self, conn, lemmatizer) -> None:
        _index(conn, lemmatizer, "https://c.test/", "C", {
            "/x": ("X", "кот собака"),
            "/y": ("Y", "кот кот собака собака"),
            "/z": ("Z", "кот"),
        })
        response = SearchService(conn, lemmatizer).search("кот собака", site="https://c.test/")
        assert [i.uri for i in response.data] == ["/y", "/x"]
        assert [i.relevance for i in response.data] == [1.0, 0.5]

    def test_unknown_lemma(self, service: SearchService) -> None:
        response = service.search("кот жираф")
        assert response.result is True
        assert response.count == 0
        assert response.data == []

    def test_service_words_only(self, service: SearchService) -> None:
        response = service.search("и в на")
        assert response.result is True
        assert response.count == 0

    def test_unknown_site(self, service: SearchService) -> None:
        response = service.search("кот", site="https://nope.test/")
        assert response.result is True
        assert response.count == 0

    def test_relevance_bounds(self, service: SearchService) -> None:
        data = service.search("кот").data
        assert max(i.relevance for i in data) == 1.0
        assert all(0.0 < i.relevance <= 1.0 for i in data)

    def test_paging(self, service: SearchService) -> None:
        full = service.search("кот").data
        page = service.search("кот", offset=1, limit=1)
        assert page.count == 3
        assert [(i.site, i.uri) for i in page.data] == [(full[1].site, full[1].uri)]
        assert service.search("кот", offset=10).data == []

    def test_to_dict_omits_null_error(self, service: SearchService) -> None:
        payload = service.search("кот").to_dict()
        assert "error" not in payload
        assert set(payload["data"][0]) == {
            "site", "site_name", "uri", "title", "relevance", "snippet",
        }


# ---------------------------------------------------------------------------
# Snippets
# ---------------------------------------------------------------------------

class _CountingRussian:
    def __init__(self) -> None:
        self.calls = 0

    def analyze(self, word: str):
        self.calls += 1
        return WordForm(normal_form=word, service=False)


class TestSnippet:
    def test_highlight_and_escape(self, lemmatizer) -> None:
        snippet = build_snippet("<script> Кот & собака", {"кот"}, lemmatizer)
        assert snippet == "&lt;script&gt; <b>Кот</b> &amp; собака"

    def test_punctuation_stays_inside_highlight(self, lemmatizer) -> None:
        assert build_snippet("коты, спят", {"кот"}, lemmatizer) == "<b>коты,</b> спят"

    def test_distant_matches_joined(self, lemmatizer) -> None:
        words = [f"w{i}" for i in range(30)]
        words[3] = "кот"
        words[25] = "кот"
        snippet = build_snippet(" ".join(words), {"кот"}, lemmatizer, max_length=500, window=2)
        assert snippet == "w1 w2 <b>кот</b> w4 w5 ... w23 w24 <b>кот</b> w26 w27"

    def test_overlapping_windows_not_repeated(self, lemmatizer) -> None:
        text = "a1 кот b1 кот c1 d1 e1"
        snippet = build_snippet(text, {"кот"}, lemmatizer, max_length=500, window=1)
        assert snippet == "a1 <b>кот</b> b1 <b>кот</b> c1"

    def test_length_budget(self, lemmatizer) -> None:
        words = ["кот" if i % 20 == 0 else f"w{i}" for i in range(200)]
        snippet = build_snippet(" ".join(words), {"кот"}, lemmatizer, max_length=10, window=2)
        assert snippet == "<b>кот</b> w1 w2"

    def test_no_match_falls_back_to_prefix(self, lemmatizer) -> None:
        assert build_snippet("одна две три", {"кот"}, lemmatizer, max_length=8) == "одна две"

    def test_empty_text(self, lemmatizer) -> None:
        assert build_snippet("", {"кот"}, lemmatizer) == ""

    def test_token_lemmas_cached(self) -> None:
        russian = _CountingRussian()
        lemmatizer = Lemmatizer(russian=russian, english=FakeEnglish())
        build_snippet("кот кот кот кот", {"кот"}, lemmatizer)
        assert russian.calls == 1
