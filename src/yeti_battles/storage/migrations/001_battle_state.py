"""Migration 001: battle engine save blobs, one row per game."""
from __future__ import annotations

import sqlite3


def upgrade(conn: sqlite3.Connection) -> None:
    conn.executescript("""
        CREATE TABLE IF NOT EXISTS battle_states (
            game_id TEXT PRIMARY KEY,
            state TEXT NOT NULL,
            ability_belt_level INTEGER NOT NULL DEFAULT 0,
            updated_at TEXT NOT NULL
        );
    """)
