"""What the battle engine needs from the host game, plus an in-memory stand-in."""
from __future__ import annotations

import logging
from typing import Protocol

from yeti_battles.models.encounter import PlayerBuffs, PlayerResources, ResourceKind

logger = logging.getLogger(__name__)


class PlayerGateway(Protocol):
    def get_player_power(self) -> int: ...

    def get_player_buffs(self) -> PlayerBuffs: ...

    def get_player_resources(self) -> PlayerResources:
        """Return the live balances. Penalties mutate this object in place."""
        ...

    def mutate_resource(self, kind: ResourceKind, delta: int) -> None: ...

    def mark_production_stale(self) -> None:
        """Derived production rates depend on balances that just changed."""
        ...


class InMemoryPlayer:
    """Plain player state used by the CLI simulator and the tests.

    Power is the snowball balance. Each assistant produces
    ``sps_per_assistant`` snowballs per second.
    """

    def __init__(
        self,
        snowballs: int = 0,
        snowflakes: int = 0,
        icicles: int = 0,
        assistants: dict[str, int] | None = None,
        buffs: PlayerBuffs | None = None,
        sps_per_assistant: float = 1.0,
    ) -> None:
        self.resources = PlayerResources(
            snowballs=snowballs,
            snowflakes=snowflakes,
            icicles=icicles,
            assistants=dict(assistants or {}),
        )
        self.buffs = buffs or PlayerBuffs()
        self.sps_per_assistant = sps_per_assistant
        self.production_stale = False
        self._sps = 0.0
        self._carry = 0.0
        self.recalculate_sps()

    # -- PlayerGateway --

    def get_player_power(self) -> int:
        return self.resources.snowballs

    def get_player_buffs(self) -> PlayerBuffs:
        return self.buffs

    def get_player_resources(self) -> PlayerResources:
        return self.resources

    def mutate_resource(self, kind: ResourceKind, delta: int) -> None:
        if kind == ResourceKind.ASSISTANTS:
            raise ValueError("Assistants are owned per type; adjust resources.assistants directly")
        current = getattr(self.resources, kind.value)
        setattr(self.resources, kind.value, max(0, current + int(delta)))

    def mark_production_stale(self) -> None:
        self.production_stale = True

    # -- Production --

    @property
    def sps(self) -> float:
        if self.production_stale:
            self.recalculate_sps()
        return self._sps

    def recalculate_sps(self) -> float:
        self._sps = self.resources.assistant_count * self.sps_per_assistant
        self.production_stale = False
        return self._sps

    def set_buffs(self, primary: str | None = None, secondary: str | None = None) -> None:
        """Set both buff slots; ``stacked`` follows from them matching."""
        self.buffs = PlayerBuffs(
            primary_class=primary,
            secondary_class=secondary,
            stacked=primary is not None and primary == secondary,
        )

    def accrue(self, ms: int) -> int:
        """Add passive income for ``ms`` milliseconds. Returns snowballs gained."""
        self._carry += self.sps * ms / 1000.0
        gained = int(self._carry)
        self._carry -= gained
        if gained:
            self.resources.snowballs += gained
        return gained
