"""Tests for src/yeti_battles/engine/engagement.py."""
from __future__ import annotations

import random

import pytest

from yeti_battles.config import BattleConfig
from yeti_battles.engine.engagement import EngagementController
from yeti_battles.engine.spawner import EncounterSpawner, SpawnerState


@pytest.fixture
def resolved():
    return []


@pytest.fixture
def spawner(scheduler):
    return EncounterSpawner(scheduler, BattleConfig(unlocked=True), rng=random.Random(5))


@pytest.fixture
def controller(spawner, scheduler, resolved):
    return EngagementController(
        spawner, scheduler, BattleConfig(resolution_delay_ms=1_000), on_resolve=resolved.append,
        effects={"Vorag the Siphon": "Steals 5% of your snowballs"},
    )


class TestEngage:
    def test_engage_live_actor(self, controller, spawner, scheduler, resolved):
        actor = spawner.spawn_now(1000)
        scheduler.advance(250)
        record = controller.engage(actor.id)
        assert record is not None
        assert record.actor is actor
        assert record.start_time_ms == 250
        assert record.resolved is False
        assert spawner.state == SpawnerState.ENGAGED
        assert scheduler.pending() == ["battle-resolution-timeout"]

        scheduler.advance(999)
        assert resolved == []
        scheduler.advance(1)
        assert resolved == [record]

    def test_effect_text_from_roster(self, controller, spawner, make_actor):
        actor = make_actor().model_copy(update={"name": "Vorag the Siphon"})
        spawner.restore(actor, remaining_ms=10_000)
        record = controller.engage(actor.id)
        assert record.effect == "Steals 5% of your snowballs"

    def test_no_live_actor(self, controller, scheduler):
        assert controller.engage("evil-yeti-ghost") is None
        assert scheduler.pending() == []

    def test_stale_id(self, controller, spawner):
        spawner.spawn_now(1000)
        assert controller.engage("evil-yeti-old") is None
        assert controller.active is False

    def test_double_engage_resolves_once(self, controller, spawner, scheduler, resolved):
        actor = spawner.spawn_now(1000)
        first = controller.engage(actor.id)
        assert controller.engage(actor.id) is None
        scheduler.advance(5_000)
        assert resolved == [first]

    def test_engage_after_despawn_ignored(self, controller, spawner, scheduler):
        actor = spawner.spawn_now(1000)
        scheduler.advance(20_000)
        assert controller.engage(actor.id) is None


class TestClear:
    def test_clear_cancels_resolution(self, controller, spawner, scheduler, resolved):
        actor = spawner.spawn_now(1000)
        record = controller.engage(actor.id)
        assert controller.clear() is record
        assert scheduler.pending() == []
        scheduler.advance(5_000)
        assert resolved == []

    def test_already_resolved_record_skipped(self, controller, spawner, scheduler, resolved):
        actor = spawner.spawn_now(1000)
        record = controller.engage(actor.id)
        record.resolved = True
        scheduler.advance(1_000)
        assert resolved == []


class TestRestore:
    def test_restore_rearms_full_delay(self, controller, scheduler, resolved, make_record):
        record = make_record()
        controller.restore(record)
        assert controller.record is record
        scheduler.advance(1_000)
        assert resolved == [record]

    def test_restore_resolved_record_is_dropped(self, controller, scheduler, make_record):
        record = make_record()
        record.resolved = True
        controller.restore(record)
        assert controller.record is None
        assert scheduler.pending() == []


class TestDelayFromConfig:
    def test_delay_change_applies_to_next_engagement(self, controller, spawner, scheduler, resolved):
        controller.config.resolution_delay_ms = 3_000
        actor = spawner.spawn_now(1000)
        record = controller.engage(actor.id)
        scheduler.advance(2_999)
        assert resolved == []
        scheduler.advance(1)
        assert resolved == [record]
