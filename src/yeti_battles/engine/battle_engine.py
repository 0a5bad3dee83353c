"""Battle engine: wires spawner, engagement and resolution together.

The host constructs one engine per game, hands it a player gateway and a
scheduler, and forwards two things: qualifying triggers (travel completed)
and engage clicks. Everything else arrives back through the hooks.
"""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Any, Callable

from yeti_battles.config import BattleConfig
from yeti_battles.content.loader import RosterEntry, load_roster
from yeti_battles.engine.engagement import EngagementController
from yeti_battles.engine.player import PlayerGateway
from yeti_battles.engine.resolution import ResolutionEngine
from yeti_battles.engine.scheduler import Scheduler
from yeti_battles.engine.spawner import EncounterSpawner, SpawnerState
from yeti_battles.models.encounter import (
    BattleState,
    EngagementRecord,
    OpposingActor,
    OpposingClass,
    ResolutionOutcome,
)
from yeti_battles.storage.encounter_ledger import EncounterLedger

logger = logging.getLogger(__name__)


@dataclass
class EncounterHooks:
    """Callbacks into the UI. All of them are optional."""
    on_encounter_spawned: Callable[[OpposingActor], None] | None = None
    on_encounter_cleared: Callable[[], None] | None = None
    on_engaged: Callable[[EngagementRecord], None] | None = None
    on_resolution: Callable[[ResolutionOutcome], None] | None = None


class BattleEngine:
    def __init__(
        self,
        player: PlayerGateway,
        scheduler: Scheduler,
        config: BattleConfig | None = None,
        hooks: EncounterHooks | None = None,
        ledger: EncounterLedger | None = None,
        roster: dict[OpposingClass, list[RosterEntry]] | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.player = player
        self.scheduler = scheduler
        self.config = config or BattleConfig()
        self.hooks = hooks or EncounterHooks()
        # A ledger built here follows config.history_limit; a supplied one keeps its own cap.
        self._owns_ledger = ledger is None
        self.ledger = ledger if ledger is not None else EncounterLedger(limit=self.config.history_limit)
        self.rng = rng or random.Random()
        roster = roster or load_roster()

        self.spawner = EncounterSpawner(
            scheduler,
            self.config,
            roster=roster,
            rng=self.rng,
            on_spawned=lambda actor: self._emit("on_encounter_spawned", actor),
            on_cleared=lambda actor: self._emit("on_encounter_cleared"),
        )
        self.engagement = EngagementController(
            self.spawner,
            scheduler,
            self.config,
            on_resolve=self._finalize,
            effects={e.name: e.effect for entries in roster.values() for e in entries},
        )
        self.resolution = ResolutionEngine(
            player,
            self.ledger,
            rng=self.rng,
            config=self.config,
        )

    # -- Read-only views --

    @property
    def current_actor(self) -> OpposingActor | None:
        return self.spawner.actor

    @property
    def current_engagement(self) -> EngagementRecord | None:
        return self.engagement.record

    @property
    def state(self) -> SpawnerState:
        return self.spawner.state

    @property
    def ability_belt_level(self) -> int:
        return self.resolution.ability_belt_level

    @property
    def trigger_allowed(self) -> bool:
        return self.config.unlocked and self.config.enabled

    # -- Host inputs --

    def on_trigger(self) -> bool:
        """A qualifying event happened (travel finished). Maybe schedule a yeti."""
        return self.spawner.maybe_spawn(
            self.player.get_player_power,
            self.trigger_allowed,
            self.config.spawn_probability,
        )

    def engage(self, actor_id: str) -> bool:
        record = self.engagement.engage(actor_id)
        if record is None:
            return False
        self._emit("on_engaged", record)
        return True

    def set_unlocked(self, unlocked: bool) -> None:
        self.config.unlocked = unlocked
        if not unlocked:
            self._stand_down()

    def set_enabled(self, enabled: bool) -> None:
        self.config.enabled = enabled
        if not enabled:
            self._stand_down()

    def toggle(self) -> bool:
        self.set_enabled(not self.config.enabled)
        return self.config.enabled

    def set_spawn_probability(self, probability: float) -> None:
        if not isinstance(probability, (int, float)) or not 0.0 <= probability <= 1.0:
            raise ValueError(f"Spawn probability must be within [0, 1], got {probability!r}")
        self.config.spawn_probability = float(probability)

    def reset(self) -> None:
        """Drop every live actor, engagement and pending timer."""
        self.spawner.cancel_pending()
        self.engagement.clear()
        self.spawner.clear(reason="reset")

    # -- Internals --

    def _stand_down(self) -> None:
        # Turning battles off removes a waiting yeti but lets a fight in progress finish.
        self.spawner.cancel_pending()
        if self.spawner.actor is not None and self.spawner.state != SpawnerState.ENGAGED:
            self.spawner.clear(reason="disabled")

    def _finalize(self, record: EngagementRecord) -> None:
        if self._owns_ledger and self.ledger.limit != self.config.history_limit:
            self.ledger.resize(self.config.history_limit)
        outcome = self.resolution.resolve(record, self.player.get_player_power())
        self.engagement.clear()
        if outcome is None:
            return
        live = self.spawner.actor
        if live is not None and live.id == record.actor_id:
            self.spawner.clear(reason="resolved")
        self._emit("on_resolution", outcome)

    def _emit(self, hook: str, *args: Any) -> None:
        callback = getattr(self.hooks, hook)
        if callback is None:
            return
        try:
            callback(*args)
        except Exception:
            logger.exception(f"Battle hook {hook} failed")

    # -- Persistence --

    def to_state(self) -> BattleState:
        from yeti_battles.engine.state import StateSerializer

        return StateSerializer().capture(self)

    def load_state(self, state: BattleState) -> None:
        from yeti_battles.engine.state import StateSerializer

        StateSerializer().restore(self, state)
