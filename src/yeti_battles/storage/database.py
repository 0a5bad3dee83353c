from __future__ import annotations

import contextlib
import importlib
import pathlib
import sqlite3
from typing import Generator


_MIGRATIONS = [
    "001_battle_state",
]


class Database:
    """SQLite store for battle engine save blobs."""

    def __init__(self, db_path: str) -> None:
        self.db_path = db_path
        self._connection: sqlite3.Connection | None = None
        if db_path != ":memory:":
            pathlib.Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    def initialize(self) -> None:
        """Run migrations, skipping already-applied ones."""
        conn = self._get_raw_connection()
        conn.execute(
            "CREATE TABLE IF NOT EXISTS schema_version "
            "(version INTEGER PRIMARY KEY)"
        )
        applied = {
            r[0] for r in conn.execute("SELECT version FROM schema_version").fetchall()
        }
        for i, name in enumerate(_MIGRATIONS, 1):
            if i not in applied:
                mod = importlib.import_module(f"yeti_battles.storage.migrations.{name}")
                mod.upgrade(conn)
                conn.execute("INSERT INTO schema_version VALUES (?)", (i,))
        conn.commit()

    def _get_raw_connection(self) -> sqlite3.Connection:
        if self._connection is None:
            self._connection = sqlite3.connect(self.db_path)
            self._connection.row_factory = sqlite3.Row
            self._connection.execute("PRAGMA journal_mode=WAL")
        return self._connection

    @contextlib.contextmanager
    def get_connection(self) -> Generator[sqlite3.Connection, None, None]:
        """Yield the shared connection; commit on success, roll back on error."""
        conn = self._get_raw_connection()
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise

    def close(self) -> None:
        if self._connection is not None:
            self._connection.close()
            self._connection = None
