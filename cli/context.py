"""Runtime state shared by the CLI commands.

Every command that touches the index opens the workspace database, applies
the schema and builds the services around it.  Logging is configured from
``settings.log_level`` the first time a command needs the backend.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from backend.config import settings
from backend.db import get_connection, init_db
from backend.morphology import build_lemmatizer
from backend.services import Services, build_services


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@contextmanager
def open_services() -> Iterator[Services]:
    """Yield ready-to-use services; the connection is closed on exit."""
    configure_logging()
    conn = get_connection()
    init_db(conn)
    try:
        yield build_services(conn, lemmatizer=build_lemmatizer())
    finally:
        conn.close()
