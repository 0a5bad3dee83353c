from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class OpposingClass(str, Enum):
    SIPHON = "Siphon"
    ASSAILANT = "Assailant"
    ANCHOR = "Anchor"
    SCRAMBLER = "Scrambler"


class AdvantageClass(str, Enum):
    HARVESTER = "Harvester"
    DEFENDER = "Defender"
    TRAVELER = "Traveler"
    SCHOLAR = "Scholar"


class ResourceKind(str, Enum):
    SNOWBALLS = "snowballs"
    ASSISTANTS = "assistants"
    SNOWFLAKES = "snowflakes"
    ICICLES = "icicles"


class WinType(str, Enum):
    NORMAL = "normal"
    CLASS_ADVANTAGE = "class_advantage"


class ResultKind(str, Enum):
    NORMAL = "normal"
    CLASS_ADVANTAGE = "class_advantage"
    PENALTY = "penalty"


class PlayerBuffs(BaseModel):
    """Buff classes the player currently holds.

    ``primary_class`` comes from the yeti companion, ``secondary_class`` from
    the current location. ``stacked`` is set by the host only when both buffs
    are the same class.
    """
    model_config = ConfigDict(from_attributes=True)

    primary_class: Optional[str] = None
    secondary_class: Optional[str] = None
    stacked: bool = False


class PlayerResources(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    snowballs: int = 0
    snowflakes: int = 0
    icicles: int = 0
    assistants: dict[str, int] = Field(default_factory=dict)

    @property
    def assistant_count(self) -> int:
        return sum(n for n in self.assistants.values() if n > 0)


class OpposingActor(BaseModel):
    """An evil yeti on screen. Power is locked in at spawn time."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    opposing_class: OpposingClass
    base_power_fraction: float
    power: int
    spawn_time_ms: int
    expiry_duration_ms: int
    low_power: int = 0
    high_power: int = 0

    @property
    def expires_at_ms(self) -> int:
        return self.spawn_time_ms + self.expiry_duration_ms


class EngagementRecord(BaseModel):
    actor: OpposingActor
    effect: str
    start_time_ms: int
    resolved: bool = False
    penalty_applied: bool = False

    @property
    def actor_id(self) -> str:
        return self.actor.id

    @property
    def opposing_class(self) -> OpposingClass:
        return self.actor.opposing_class


class PenaltyResult(BaseModel):
    resource_kind: Optional[ResourceKind] = None
    amount: int = 0
    targets: list[str] = Field(default_factory=list)
    description: str = ""


class ResolutionOutcome(BaseModel):
    actor_id: str
    opposing_class: OpposingClass
    player_won: bool
    win_type: WinType = WinType.NORMAL
    reward_multiplier: int = 1
    snowball_reward: int = 0
    penalty: Optional[PenaltyResult] = None
    player_power: int = 0
    opponent_power: int = 0
    advantage_source: str = ""
    ability_belt_level: int = 0

    @property
    def result_kind(self) -> ResultKind:
        if not self.player_won:
            return ResultKind.PENALTY
        if self.win_type == WinType.CLASS_ADVANTAGE:
            return ResultKind.CLASS_ADVANTAGE
        return ResultKind.NORMAL


class LedgerEntry(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    actor_name: str = ""
    actor_class: OpposingClass
    player_won: bool
    result_kind: ResultKind
    resources: PlayerResources = Field(default_factory=PlayerResources)


class BattleState(BaseModel):
    """The engine's own save blob. The host embeds it in its game save."""

    enabled: bool = True
    unlocked: bool = False
    spawn_probability: float = 1.0
    ability_belt_level: int = 0
    actor: Optional[OpposingActor] = None
    actor_remaining_ms: int = 0
    engagement: Optional[EngagementRecord] = None
    ledger: list[LedgerEntry] = Field(default_factory=list)
