"""Indexing commands: full crawl of the configured sites and single-page refresh."""

from __future__ import annotations

import typer

from backend.scraper import FetchFailure
from cli.context import open_services
from cli.rendering import render_site

index_app = typer.Typer(help="Build and refresh the search index.", no_args_is_help=True)

_POLL_SECONDS = 1.0


@index_app.command("start")
def index_start() -> None:
    """Crawl every configured site and wait for the run to finish (Ctrl-C stops it)."""
    with open_services() as services:
        indexing = services.indexing
        response = indexing.start_indexing()
        if not response.result:
            typer.echo(f"[index start] {response.error}")
            raise typer.Exit(1)

        typer.echo("[index start] Indexing started …")
        try:
            while not indexing.wait(timeout=_POLL_SECONDS):
                pass
        except KeyboardInterrupt:
            indexing.stop_indexing()
            indexing.wait()
            typer.echo("[index start] Stopped by user.")

        for site in services.statistics.get_statistics().detailed:
            typer.echo(render_site(site))


@index_app.command("page")
def index_page(
    url: str = typer.Option(..., "--url", help="Page URL under one of the configured sites."),
) -> None:
    """Fetch one page and replace it in the index."""
    with open_services() as services:
        try:
            indexed = services.indexing.index_single_page(url)
        except FetchFailure as exc:
            typer.echo(f"[index page] {exc.describe()}")
            raise typer.Exit(1)

    if not indexed:
        typer.echo(
            "[index page] This page is outside the sites listed in the configuration file"
        )
        raise typer.Exit(1)
    typer.echo(f"[index page] Indexed {url}")
