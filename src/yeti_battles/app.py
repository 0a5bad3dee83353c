"""Application bootstrap: wires the engine to a simulated player for the CLI."""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Any

from yeti_battles.config import BattleConfig, load_raw_config
from yeti_battles.engine.battle_engine import BattleEngine, EncounterHooks
from yeti_battles.engine.player import InMemoryPlayer
from yeti_battles.engine.scheduler import ManualScheduler
from yeti_battles.models.encounter import OpposingActor, ResolutionOutcome

logger = logging.getLogger(__name__)

# Time between two travels in the simulator.
TRAVEL_INTERVAL_MS = 60_000


@dataclass
class SimulationReport:
    triggers: int = 0
    spawns: int = 0
    outcomes: list[ResolutionOutcome] = field(default_factory=list)
    summary: dict[str, Any] = field(default_factory=dict)
    final_snowballs: int = 0
    ability_belt_level: int = 0


class BattleApp:
    """Runs battles against an in-memory player on a virtual clock."""

    def __init__(self, config_path: str | None = None, seed: int | None = None):
        raw = load_raw_config(config_path)
        self.config = BattleConfig.model_validate(raw.get("battles", {}))
        self.storage_config = raw.get("storage", {})
        self.rng = random.Random(seed)

        # Lazy-initialized components
        self._db = None
        self._state_repo = None

        self.scheduler = ManualScheduler()
        self.player: InMemoryPlayer | None = None
        self.engine: BattleEngine | None = None
        self._spawned: list[OpposingActor] = []
        self._outcomes: list[ResolutionOutcome] = []

    # -- Component initialization (lazy) --

    @property
    def db(self):
        if self._db is None:
            from yeti_battles.storage.database import Database

            db_path = self.storage_config.get("db_path", "saves/battles.db")
            self._db = Database(db_path)
            self._db.initialize()
        return self._db

    @property
    def state_repo(self):
        if self._state_repo is None:
            from yeti_battles.storage.repos import BattleStateRepo

            self._state_repo = BattleStateRepo(self.db)
        return self._state_repo

    def new_session(self, player: InMemoryPlayer) -> BattleEngine:
        self.player = player
        self._spawned = []
        self._outcomes = []
        self.config.unlocked = True
        self.engine = BattleEngine(
            player,
            self.scheduler,
            config=self.config,
            hooks=EncounterHooks(
                on_encounter_spawned=self._spawned.append,
                on_resolution=self._outcomes.append,
            ),
            rng=self.rng,
        )
        return self.engine

    def load_session(self, game_id: str) -> bool:
        if self.engine is None:
            raise RuntimeError("Start a session before loading saved battle state")
        state = self.state_repo.load(game_id)
        if state is None:
            return False
        self.engine.load_state(state)
        return True

    def save_session(self, game_id: str) -> None:
        if self.engine is None:
            raise RuntimeError("No session to save")
        self.state_repo.save(game_id, self.engine.to_state())

    def _advance(self, ms: int, step_ms: int = 100) -> None:
        """Advance the clock in small steps so passive income accrues between timers."""
        remaining = ms
        while remaining > 0:
            step = min(step_ms, remaining)
            self.player.accrue(step)
            self.scheduler.advance(step)
            remaining -= step

    def simulate(self, travels: int, engage_after_ms: int = 2_000) -> SimulationReport:
        """Travel ``travels`` times; engage every yeti ``engage_after_ms`` after it appears."""
        if self.engine is None or self.player is None:
            raise RuntimeError("Start a session before simulating")
        engine = self.engine
        report = SimulationReport()
        for _ in range(travels):
            report.triggers += 1
            engine.on_trigger()
            self._advance(self.config.spawn_delay_ms)
            actor = engine.current_actor
            if actor is not None and engine.current_engagement is None:
                self._advance(engage_after_ms)
                engine.engage(actor.id)
            self._advance(TRAVEL_INTERVAL_MS)
        report.spawns = len(self._spawned)
        report.outcomes = list(self._outcomes)
        report.summary = engine.ledger.summary()
        report.final_snowballs = self.player.resources.snowballs
        report.ability_belt_level = engine.ability_belt_level
        logger.info(f"Simulated {travels} travels: {report.summary}")
        return report
