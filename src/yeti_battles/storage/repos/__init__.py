from __future__ import annotations

from yeti_battles.storage.repos.battle_state_repo import BattleStateRepo

__all__ = [
    "BattleStateRepo",
]
