"""Shared fixtures for the yeti battles test suite."""
from __future__ import annotations

import random

import pytest

from yeti_battles.config import BattleConfig
from yeti_battles.engine.battle_engine import BattleEngine, EncounterHooks
from yeti_battles.engine.player import InMemoryPlayer
from yeti_battles.engine.scheduler import ManualScheduler
from yeti_battles.models.encounter import EngagementRecord, OpposingActor, OpposingClass


class HookRecorder:
    """Collects every hook call so tests can assert on order and count."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, object]] = []

    def hooks(self) -> EncounterHooks:
        return EncounterHooks(
            on_encounter_spawned=lambda actor: self.calls.append(("spawned", actor)),
            on_encounter_cleared=lambda: self.calls.append(("cleared", None)),
            on_engaged=lambda record: self.calls.append(("engaged", record)),
            on_resolution=lambda outcome: self.calls.append(("resolution", outcome)),
        )

    def of(self, name: str) -> list:
        return [payload for kind, payload in self.calls if kind == name]


def make_actor(
    power: int = 1000,
    opposing_class: OpposingClass = OpposingClass.SIPHON,
    actor_id: str = "evil-yeti-test",
    spawn_time_ms: int = 0,
) -> OpposingActor:
    return OpposingActor(
        id=actor_id,
        name=f"Test {opposing_class.value}",
        opposing_class=opposing_class,
        base_power_fraction=0.85,
        power=power,
        spawn_time_ms=spawn_time_ms,
        expiry_duration_ms=20_000,
    )


def make_record(actor: OpposingActor | None = None, **actor_kwargs) -> EngagementRecord:
    return EngagementRecord(actor=actor or make_actor(**actor_kwargs), effect="", start_time_ms=0)


@pytest.fixture
def seeded_rng():
    state = random.getstate()
    random.seed(42)
    yield
    random.setstate(state)


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def battle_config() -> BattleConfig:
    return BattleConfig(unlocked=True)


@pytest.fixture
def player() -> InMemoryPlayer:
    return InMemoryPlayer(
        snowballs=1_000_000,
        snowflakes=3,
        icicles=2,
        assistants={"shoveler": 2, "sculptor": 1},
    )


@pytest.fixture
def recorder() -> HookRecorder:
    return HookRecorder()


@pytest.fixture
def engine(player, scheduler, battle_config, recorder, rng) -> BattleEngine:
    return BattleEngine(player, scheduler, config=battle_config, hooks=recorder.hooks(), rng=rng)


@pytest.fixture
def in_memory_db(tmp_path):
    from yeti_battles.storage.database import Database

    db = Database(str(tmp_path / "test.db"))
    db.initialize()
    yield db
    db.close()


@pytest.fixture(name="make_actor")
def make_actor_fixture():
    return make_actor


@pytest.fixture(name="make_record")
def make_record_fixture():
    return make_record
