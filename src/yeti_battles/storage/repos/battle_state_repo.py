from __future__ import annotations

import logging
from datetime import datetime, timezone

from pydantic import ValidationError

from yeti_battles.models.encounter import BattleState
from yeti_battles.storage.database import Database

logger = logging.getLogger(__name__)


class BattleStateRepo:
    """Stores the battle engine blob next to the host's own save."""

    def __init__(self, db: Database) -> None:
        self.db = db

    def save(self, game_id: str, state: BattleState) -> None:
        now = datetime.now(timezone.utc).isoformat()
        with self.db.get_connection() as conn:
            conn.execute(
                "INSERT INTO battle_states (game_id, state, ability_belt_level, updated_at) "
                "VALUES (?, ?, ?, ?) "
                "ON CONFLICT(game_id) DO UPDATE SET "
                "state = excluded.state, "
                "ability_belt_level = excluded.ability_belt_level, "
                "updated_at = excluded.updated_at",
                (game_id, state.model_dump_json(), state.ability_belt_level, now),
            )

    def load(self, game_id: str) -> BattleState | None:
        """Return the saved state, or None if missing or unreadable."""
        with self.db.get_connection() as conn:
            row = conn.execute(
                "SELECT state FROM battle_states WHERE game_id = ?", (game_id,)
            ).fetchone()
        if row is None:
            return None
        try:
            return BattleState.model_validate_json(row["state"])
        except ValidationError as e:
            logger.warning(f"Discarding unreadable battle state for {game_id}: {e}")
            return None

    def list_games(self) -> list[dict]:
        with self.db.get_connection() as conn:
            rows = conn.execute(
                "SELECT game_id, ability_belt_level, updated_at FROM battle_states "
                "ORDER BY updated_at DESC"
            ).fetchall()
        return [dict(r) for r in rows]

    def delete(self, game_id: str) -> None:
        with self.db.get_connection() as conn:
            conn.execute("DELETE FROM battle_states WHERE game_id = ?", (game_id,))
