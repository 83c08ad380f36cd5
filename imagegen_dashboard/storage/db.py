"""
Database connection management.

Provides the SQLite connection backing the record store.
"""

import sqlite3
from pathlib import Path

DEFAULT_DB_PATH = "imagegen_dashboard.db"

# Seconds to wait on a locked database before failing
BUSY_TIMEOUT = 5.0


def get_connection(db_path: str = DEFAULT_DB_PATH) -> sqlite3.Connection:
    """Open a connection to the record store.

    Rows come back as ``sqlite3.Row`` so columns can be read by name.

    Args:
        db_path: Path to SQLite database file

    Returns:
        SQLite connection
    """
    conn = sqlite3.connect(str(Path(db_path)), timeout=BUSY_TIMEOUT)
    conn.row_factory = sqlite3.Row
    return conn
