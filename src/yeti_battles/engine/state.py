"""State serializer: captures and restores the engine's own save blob."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from yeti_battles.models.encounter import BattleState

if TYPE_CHECKING:
    from yeti_battles.engine.battle_engine import BattleEngine

logger = logging.getLogger(__name__)


class StateSerializer:
    """Moves the live actor, engagement and ledger in and out of a BattleState.

    Timers are not serializable; the actor's remaining lifetime is stored
    instead and re-armed on restore. An unresolved engagement gets a fresh
    resolution delay.
    """

    def capture(self, engine: BattleEngine) -> BattleState:
        return BattleState(
            enabled=engine.config.enabled,
            unlocked=engine.config.unlocked,
            spawn_probability=engine.config.spawn_probability,
            ability_belt_level=engine.ability_belt_level,
            actor=engine.current_actor,
            actor_remaining_ms=engine.spawner.remaining_ms(),
            engagement=engine.current_engagement.model_copy() if engine.current_engagement else None,
            ledger=engine.ledger.entries(),
        )

    def restore(self, engine: BattleEngine, state: BattleState) -> None:
        engine.reset()
        engine.config.enabled = state.enabled
        engine.config.unlocked = state.unlocked
        engine.set_spawn_probability(state.spawn_probability)
        engine.resolution.ability_belt_level = state.ability_belt_level

        engine.ledger.clear()
        for entry in state.ledger:
            engine.ledger.record(entry)

        engagement = state.engagement
        if engagement is not None and engagement.resolved:
            engagement = None

        if state.actor is not None:
            engaged = engagement is not None and engagement.actor_id == state.actor.id
            engine.spawner.restore(state.actor, state.actor_remaining_ms, engaged=engaged)
        if engagement is not None:
            engine.engagement.restore(engagement)

        logger.debug(
            f"Restored battle state: actor={state.actor.id if state.actor else None}, "
            f"engaged={engagement is not None}, ledger={len(state.ledger)}"
        )
