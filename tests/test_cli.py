"""CLI tests via typer's CliRunner.

The workspace (DB + sites.json) is redirected to ``tmp_path`` and the
lemmatizer builder is patched so no NLTK data is needed.
"""

from __future__ import annotations

import json

import httpx
import pytest
import respx
from typer.testing import CliRunner

import cli.context
from backend.config import settings
from cli.main import app
from conftest import html_page

runner = CliRunner()
_HTML = {"content-type": "text/html; charset=utf-8"}


@pytest.fixture()
def workspace(tmp_path, monkeypatch, lemmatizer):
    sites_file = tmp_path / "sites.json"
    sites_file.write_text(
        json.dumps({"sites": [{"url": "https://a.test/", "name": "A"}]}), encoding="utf-8"
    )
    monkeypatch.setattr(settings, "workspace_dir", tmp_path)
    monkeypatch.setattr(settings, "sites_file", sites_file)
    monkeypatch.setattr(settings, "politeness_delay", 0.0)
    monkeypatch.setattr(cli.context, "build_lemmatizer", lambda: lemmatizer)
    return tmp_path


@pytest.fixture()
def site():
    with respx.mock(assert_all_called=False) as mock:
        mock.get("https://a.test/").mock(return_value=httpx.Response(
            200, headers=_HTML, text=html_page("Главная", "Кот гуляет по крыше", ("/news",)),
        ))
        mock.get("https://a.test/news").mock(return_value=httpx.Response(
            200, headers=_HTML, text=html_page("Новости", "Собака и кот"),
        ))
        yield mock


def test_db_init(workspace) -> None:
    result = runner.invoke(app, ["db", "init"])
    assert result.exit_code == 0
    assert "Database ready" in result.output
    assert (workspace / "search.db").exists()


def test_stats_empty(workspace) -> None:
    result = runner.invoke(app, ["stats"])
    assert result.exit_code == 0
    assert "sites=0" in result.output


def test_index_start_then_search(workspace, site) -> None:
    result = runner.invoke(app, ["index", "start"])
    assert result.exit_code == 0, result.output
    assert "INDEXED" in result.output
    assert "https://a.test/" in result.output

    result = runner.invoke(app, ["search", "собака"])
    assert result.exit_code == 0, result.output
    assert "1 result(s)" in result.output
    assert "https://a.test/news" in result.output
    assert "<b>Собака</b>" in result.output

    result = runner.invoke(app, ["stats"])
    assert "sites=1  pages=2" in result.output


def test_index_page(workspace, site) -> None:
    result = runner.invoke(app, ["index", "page", "--url", "https://a.test/news"])
    assert result.exit_code == 0, result.output
    assert "Indexed https://a.test/news" in result.output


def test_index_page_outside_sites(workspace) -> None:
    result = runner.invoke(app, ["index", "page", "--url", "https://elsewhere.test/"])
    assert result.exit_code == 1
    assert "outside the sites" in result.output


def test_index_page_fetch_failure(workspace) -> None:
    with respx.mock:
        respx.get("https://a.test/").mock(side_effect=httpx.ConnectError("refused"))
        result = runner.invoke(app, ["index", "page", "--url", "https://a.test/"])
    assert result.exit_code == 1
    assert "Page processing error: ConnectError - refused" in result.output


def test_search_empty_query(workspace) -> None:
    result = runner.invoke(app, ["search", " "])
    assert result.exit_code == 1
    assert "Empty search query" in result.output


def test_search_no_results(workspace) -> None:
    result = runner.invoke(app, ["search", "жираф"])
    assert result.exit_code == 0
    assert "No results" in result.output
