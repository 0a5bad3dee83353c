"""Player engagement against the live yeti, with a short resolution delay.

The delay is deliberate: passive income keeps accruing between the click and
the resolution, and the player's power is read only when it fires.
"""
from __future__ import annotations

import logging
from typing import Any, Callable

from yeti_battles.config import BattleConfig
from yeti_battles.engine.scheduler import Scheduler
from yeti_battles.engine.spawner import EncounterSpawner
from yeti_battles.models.encounter import EngagementRecord

logger = logging.getLogger(__name__)


class EngagementController:
    def __init__(
        self,
        spawner: EncounterSpawner,
        scheduler: Scheduler,
        config: BattleConfig,
        on_resolve: Callable[[EngagementRecord], None],
        effects: dict[str, str] | None = None,
    ) -> None:
        self.spawner = spawner
        self.scheduler = scheduler
        self.config = config
        self.on_resolve = on_resolve
        self.effects = effects or {}

        self.record: EngagementRecord | None = None
        self._resolution_token: Any = None

    @property
    def resolution_delay_ms(self) -> int:
        return self.config.resolution_delay_ms

    @property
    def active(self) -> bool:
        return self.record is not None

    def engage(self, actor_id: str) -> EngagementRecord | None:
        """Commit to a fight. Stale or duplicate clicks are ignored."""
        actor = self.spawner.actor
        if actor is None or actor.id != actor_id:
            logger.debug(f"Engage ignored: {actor_id} is not the live yeti")
            return None
        if self.record is not None:
            logger.debug(f"Engage ignored: already engaged with {self.record.actor_id}")
            return None

        record = EngagementRecord(
            actor=actor,
            effect=self.effects.get(actor.name, ""),
            start_time_ms=self.scheduler.now_ms(),
        )
        self.record = record
        self.spawner.mark_engaged(actor.id)
        self._arm(record, self.resolution_delay_ms)
        logger.info(f"Engaged {actor.name}; resolving in {self.resolution_delay_ms}ms")
        return record

    def _arm(self, record: EngagementRecord, delay_ms: int) -> None:
        def _fire() -> None:
            self._resolution_token = None
            if self.record is not record or record.resolved:
                logger.debug(f"Resolution skipped for {record.actor_id}: engagement was cleared")
                return
            self.on_resolve(record)

        self._resolution_token = self.scheduler.schedule(delay_ms, _fire, "battle-resolution-timeout")

    def clear(self) -> EngagementRecord | None:
        """Drop the current engagement and cancel its pending resolution."""
        record = self.record
        self.scheduler.cancel(self._resolution_token)
        self._resolution_token = None
        self.record = None
        return record

    def restore(self, record: EngagementRecord) -> None:
        """Reinstate a saved, unresolved engagement with a fresh resolution delay."""
        self.clear()
        if record.resolved:
            return
        self.record = record
        self._arm(record, self.resolution_delay_ms)
