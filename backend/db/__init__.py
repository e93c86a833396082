"""Database layer package.

Public re-exports so callers can write::

    from backend.db import get_connection, init_db, transaction
    from backend.db import sites, pages, lemmas, postings
"""

from backend.db.connection import get_connection, init_db, transaction
from backend.db import lemmas, pages, postings, sites

__all__ = [
    "get_connection",
    "init_db",
    "transaction",
    "sites",
    "pages",
    "lemmas",
    "postings",
]
