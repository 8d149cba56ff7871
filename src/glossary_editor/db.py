"""Database connection, DDL, and key-value access for glossary-editor.

The durable store is a small SQLite file holding independent JSON entries
keyed by name (the record collection, the undo/redo history, preferences).
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path

from glossary_editor.exceptions import DatabaseError

logger = logging.getLogger(__name__)

SCHEMA_VERSION = "1.0"

DEFAULT_DB_PATH = Path.home() / ".glossary_editor.db"

# Entry keys
GLOSSARY_KEY = "glossary.v1"
HISTORY_KEY = "glossary.history.v2"
CLASS_NAME_KEY = "sheets.class_name"

# ---------------------------------------------------------------------------
# DDL statements
# ---------------------------------------------------------------------------

_DDL = """
CREATE TABLE IF NOT EXISTS meta (
    key TEXT NOT NULL,
    value TEXT,
    UNIQUE (key)
);

CREATE TABLE IF NOT EXISTS kv (
    key TEXT NOT NULL PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%f', 'now'))
);
"""


def connect(db_path: str | Path = ":memory:") -> sqlite3.Connection:
    """Open a database connection with editor PRAGMA settings."""
    db_path_str = str(db_path)
    try:
        conn = sqlite3.connect(db_path_str, check_same_thread=False)
    except sqlite3.Error as e:
        raise DatabaseError(f"Cannot open database {db_path_str!r}: {e}") from e
    if db_path_str != ":memory:":
        try:
            conn.execute("PRAGMA journal_mode = WAL")
        except sqlite3.DatabaseError as e:
            logger.warning(f"Could not enable WAL on {db_path_str!r}: {e}")
    conn.row_factory = sqlite3.Row
    return conn


def init_db(conn: sqlite3.Connection) -> None:
    """Initialize all tables if they don't exist. Set schema version."""
    conn.executescript(_DDL)
    conn.execute(
        "INSERT OR IGNORE INTO meta (key, value) VALUES ('schema_version', ?)",
        (SCHEMA_VERSION,),
    )
    conn.execute(
        "INSERT OR IGNORE INTO meta (key, value) "
        "VALUES ('created_at', strftime('%Y-%m-%dT%H:%M:%f', 'now'))",
    )
    conn.commit()


def check_schema_version(conn: sqlite3.Connection) -> None:
    """Verify the database schema version is compatible."""
    try:
        row = conn.execute(
            "SELECT value FROM meta WHERE key = 'schema_version'"
        ).fetchone()
    except sqlite3.OperationalError:
        # meta table doesn't exist - uninitialized DB
        return
    if row is None:
        return
    version = row[0]
    if version != SCHEMA_VERSION:
        raise DatabaseError(
            f"Incompatible schema version: {version} "
            f"(expected {SCHEMA_VERSION})"
        )


# ---------------------------------------------------------------------------
# Key-value helpers
# ---------------------------------------------------------------------------

def read_value(conn: sqlite3.Connection, key: str) -> str | None:
    """Return the stored text for *key*, or None if absent or unreadable."""
    try:
        row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
    except sqlite3.Error as e:
        logger.warning(f"Could not read {key!r} from durable store: {e}")
        return None
    return row["value"] if row else None


def write_value(conn: sqlite3.Connection, key: str, value: str) -> bool:
    """Replace the stored text for *key*.

    A rejected write (disk full, read-only file, closed connection) is logged
    and reported as False; the caller's in-memory state stays authoritative.
    """
    try:
        with conn:
            conn.execute(
                "INSERT INTO kv (key, value) VALUES (?, ?) "
                "ON CONFLICT(key) DO UPDATE SET value = excluded.value, "
                "updated_at = strftime('%Y-%m-%dT%H:%M:%f', 'now')",
                (key, value),
            )
    except sqlite3.Error as e:
        logger.warning(f"Could not persist {key!r}: {e}")
        return False
    return True


def delete_value(conn: sqlite3.Connection, key: str) -> bool:
    """Remove *key* from the store. Same failure policy as :func:`write_value`."""
    try:
        with conn:
            conn.execute("DELETE FROM kv WHERE key = ?", (key,))
    except sqlite3.Error as e:
        logger.warning(f"Could not delete {key!r}: {e}")
        return False
    return True
