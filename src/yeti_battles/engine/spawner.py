"""Evil yeti spawning: trigger roll, spawn delay, power lock-in, despawn timer."""
from __future__ import annotations

import logging
import random
import uuid
from enum import Enum
from typing import Any, Callable

from yeti_battles.config import BattleConfig
from yeti_battles.content.loader import RosterEntry, load_roster, pick_yeti
from yeti_battles.engine.scheduler import Scheduler
from yeti_battles.mechanics import power_curve
from yeti_battles.models.encounter import OpposingActor, OpposingClass

logger = logging.getLogger(__name__)


class SpawnerState(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    SPAWNED = "spawned"
    ENGAGED = "engaged"
    DESPAWNED = "despawned"


class EncounterSpawner:
    """Owns the single live-actor slot.

    Idle -> Pending (delay) -> Spawned -> Despawned on timeout, or Engaged
    once the player commits. Engaged actors keep their slot until the
    engine clears them after resolution or a newer yeti replaces them.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        config: BattleConfig,
        roster: dict[OpposingClass, list[RosterEntry]] | None = None,
        rng: random.Random | None = None,
        on_spawned: Callable[[OpposingActor], None] | None = None,
        on_cleared: Callable[[OpposingActor], None] | None = None,
    ) -> None:
        self.scheduler = scheduler
        self.config = config
        self.roster = roster or load_roster()
        self.rng = rng or random.Random()
        self.on_spawned = on_spawned
        self.on_cleared = on_cleared

        self.actor: OpposingActor | None = None
        self.state = SpawnerState.IDLE
        self._despawn_token: Any = None
        self._pending_token: Any = None

    @property
    def spawn_pending(self) -> bool:
        return self._pending_token is not None

    def maybe_spawn(
        self,
        player_power: Callable[[], int],
        trigger_allowed: bool,
        spawn_probability: float,
    ) -> bool:
        """Roll for a spawn after a qualifying trigger. Returns True if one was scheduled.

        ``player_power`` is read when the yeti actually appears, not now.
        """
        if not trigger_allowed:
            logger.debug("Battle trigger ignored: battles locked or disabled")
            return False
        if self._pending_token is not None:
            logger.debug("Battle trigger ignored: a spawn is already pending")
            return False

        roll = self.rng.random()
        if roll > spawn_probability:
            logger.debug(f"No battle this time (roll {roll:.3f} > {spawn_probability})")
            return False

        def _appear() -> None:
            self._pending_token = None
            self.spawn_now(player_power())

        self._pending_token = self.scheduler.schedule(
            self.config.spawn_delay_ms, _appear, "battle-spawn-delay"
        )
        if self.state != SpawnerState.ENGAGED:
            self.state = SpawnerState.PENDING
        logger.info(f"Evil yeti incoming in {self.config.spawn_delay_ms}ms")
        return True

    def spawn_now(self, player_power: int) -> OpposingActor:
        """Create a yeti immediately with power locked to ``player_power``."""
        if self.actor is not None:
            self.clear(reason="replaced")

        entry = pick_yeti(self.roster, self.rng)
        curve = self.config.power_curve
        fraction = power_curve.sample(curve.center, curve.minimum, curve.maximum, curve.std_dev, self.rng)
        low, high = power_curve.estimate_power_range(player_power, curve.minimum, curve.maximum)
        actor = OpposingActor(
            id=f"evil-yeti-{uuid.uuid4().hex[:12]}",
            name=entry.name,
            opposing_class=entry.opposing_class,
            base_power_fraction=fraction,
            power=power_curve.power_from_fraction(fraction, player_power),
            spawn_time_ms=self.scheduler.now_ms(),
            expiry_duration_ms=self.config.despawn_for(entry.opposing_class),
            low_power=low,
            high_power=high,
        )
        self._install(actor, actor.expiry_duration_ms)
        logger.info(
            f"{actor.name} ({actor.opposing_class.value}) appeared with {actor.power:,} power "
            f"({fraction:.1%} of {player_power:,})"
        )
        if self.on_spawned is not None:
            self.on_spawned(actor)
        return actor

    def _install(self, actor: OpposingActor, remaining_ms: int) -> None:
        self.actor = actor
        self.state = SpawnerState.SPAWNED
        actor_id = actor.id
        self._despawn_token = self.scheduler.schedule(
            remaining_ms, lambda: self._despawn(actor_id), "battle-spawn-timeout"
        )

    def _despawn(self, actor_id: str) -> None:
        self._despawn_token = None
        if self.actor is None or self.actor.id != actor_id:
            return
        if self.state == SpawnerState.ENGAGED:
            # Engagement owns the actor now; resolution will clear it.
            return
        logger.info(f"{self.actor.name} wandered off")
        self.clear(reason="despawned")

    def mark_engaged(self, actor_id: str) -> bool:
        """Stop the despawn clock for the live actor once the player engages it."""
        if self.actor is None or self.actor.id != actor_id:
            return False
        self.scheduler.cancel(self._despawn_token)
        self._despawn_token = None
        self.state = SpawnerState.ENGAGED
        return True

    def clear(self, reason: str = "cleared") -> OpposingActor | None:
        """Remove the live actor and cancel its despawn timer."""
        actor = self.actor
        if actor is None:
            return None
        self.scheduler.cancel(self._despawn_token)
        self._despawn_token = None
        self.actor = None
        self.state = SpawnerState.DESPAWNED if reason == "despawned" else SpawnerState.IDLE
        logger.debug(f"Cleared {actor.id} ({reason})")
        if self.on_cleared is not None:
            self.on_cleared(actor)
        return actor

    def cancel_pending(self) -> None:
        if self._pending_token is not None:
            self.scheduler.cancel(self._pending_token)
            self._pending_token = None
            if self.state == SpawnerState.PENDING:
                self.state = SpawnerState.IDLE

    def remaining_ms(self) -> int:
        if self.actor is None:
            return 0
        return max(0, self.actor.expires_at_ms - self.scheduler.now_ms())

    def restore(self, actor: OpposingActor, remaining_ms: int, engaged: bool = False) -> None:
        """Reinstate a saved actor with a fresh despawn timer.

        The saved ``spawn_time_ms`` belongs to the clock it was captured on, so
        the actor is rebased onto this scheduler's clock before it is armed.
        """
        if self.actor is not None:
            self.clear(reason="replaced")
        remaining_ms = max(0, min(remaining_ms, actor.expiry_duration_ms))
        spawn_time = self.scheduler.now_ms() - (actor.expiry_duration_ms - remaining_ms)
        if actor.spawn_time_ms != spawn_time:
            actor = actor.model_copy(update={"spawn_time_ms": spawn_time})
        self._install(actor, remaining_ms)
        if engaged:
            self.mark_engaged(actor.id)
