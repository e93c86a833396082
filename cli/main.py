"""Site Search CLI — entry-point for all backend operations.

Usage:
    python cli/main.py --help

Commands:
    db init      create the database schema
    index        full crawl (start) or single-page refresh (page)
    search       query the index
    stats        index statistics
    serve        run the REST API with uvicorn
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from backend.xxx import ...`
# works when the CLI is invoked as `python cli/main.py` from any directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from typing import Optional

import typer

from backend.config import settings
from backend.db import get_connection, init_db
from cli.commands.index import index_app
from cli.context import open_services
from cli.rendering import render_site

app = typer.Typer(
    name="site-search",
    help="Site Search backend CLI.",
    no_args_is_help=True,
)

# ---------------------------------------------------------------------------
# DB commands
# ---------------------------------------------------------------------------
db_app = typer.Typer(help="Database operations.", no_args_is_help=True)
app.add_typer(db_app, name="db")


@db_app.command("init")
def db_init() -> None:
    """Initialise the SQLite database (create tables if they do not exist)."""
    conn = get_connection()
    init_db(conn)
    conn.close()
    typer.echo(f"[db init] Database ready at {settings.db_path}")


# ---------------------------------------------------------------------------
# Indexing
# ---------------------------------------------------------------------------
app.add_typer(index_app, name="index")


# ---------------------------------------------------------------------------
# Search & statistics
# ---------------------------------------------------------------------------
@app.command("search")
def search(
    query: str = typer.Argument(..., help="Search query."),
    site: Optional[str] = typer.Option(None, help="Restrict to the site with this root URL."),
    offset: int = typer.Option(0, min=0, help="Number of results to skip."),
    limit: int = typer.Option(settings.search_limit, min=0, help="Maximum results to show."),
) -> None:
    """Search the index and print ranked results with snippets."""
    with open_services() as services:
        response = services.search.search(query, site=site, offset=offset, limit=limit)

    if not response.result:
        typer.echo(f"[search] {response.error}")
        raise typer.Exit(1)
    if not response.data:
        typer.echo(f"[search] No results for {query!r}.")
        return

    typer.echo(f"[search] {response.count} result(s)")
    for item in response.data:
        typer.echo(f"  {item.relevance:.3f}  {item.site.rstrip('/')}{item.uri}  {item.title!r}")
        typer.echo(f"         {item.snippet}")


@app.command("stats")
def stats() -> None:
    """Print index totals and per-site status."""
    with open_services() as services:
        statistics = services.statistics.get_statistics()

    total = statistics.total
    typer.echo(
        f"[stats] sites={total.sites}  pages={total.pages}  "
        f"lemmas={total.lemmas}  indexing={total.indexing}"
    )
    for site in statistics.detailed:
        typer.echo(render_site(site))


# ---------------------------------------------------------------------------
# REST API
# ---------------------------------------------------------------------------
@app.command("serve")
def serve(
    host: str = typer.Option("127.0.0.1", help="Bind address."),
    port: int = typer.Option(8080, help="Bind port."),
) -> None:
    """Run the REST API (``/api/*``) with uvicorn."""
    import uvicorn

    uvicorn.run("backend.api.app:app", host=host, port=port, log_level=settings.log_level.lower())


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
