"""Class advantage checks: pure lookups, no I/O.

Every evil yeti class is countered by exactly one player buff class:

  Siphon (steals snowballs)    <-> Harvester (generates snowballs)
  Assailant (steals assistants) <-> Defender (protects assistants)
  Anchor (steals snowflakes)   <-> Traveler (generates through travel)
  Scrambler (steals icicles)   <-> Scholar (generates through knowledge)

Holding either buff of the counter class is an instant win at 2x reward.
Holding both, stacked, upgrades the reward to 3x.
"""
from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from yeti_battles.models.encounter import AdvantageClass, OpposingClass, PlayerBuffs

CLASS_OPPOSITION: Mapping[OpposingClass, AdvantageClass] = MappingProxyType({
    OpposingClass.SIPHON: AdvantageClass.HARVESTER,
    OpposingClass.ASSAILANT: AdvantageClass.DEFENDER,
    OpposingClass.ANCHOR: AdvantageClass.TRAVELER,
    OpposingClass.SCRAMBLER: AdvantageClass.SCHOLAR,
})


@dataclass(frozen=True)
class AdvantageCheck:
    has_advantage: bool = False
    # Upgrades the 2x class-advantage reward to the 3x tier.
    upgrades_to_triple: bool = False
    advantage_source: str = ""


NO_ADVANTAGE = AdvantageCheck()


def counter_class(opposing_class: OpposingClass | str) -> AdvantageClass | None:
    """Return the buff class that counters ``opposing_class``, or None."""
    try:
        return CLASS_OPPOSITION[OpposingClass(opposing_class)]
    except ValueError:
        return None


def _class_name(value: object) -> str | None:
    if value is None:
        return None
    if isinstance(value, AdvantageClass):
        return value.value
    return str(value)


def resolve(opposing_class: OpposingClass | str, buffs: PlayerBuffs) -> AdvantageCheck:
    """Check whether the player's current buffs counter ``opposing_class``.

    Unknown classes never grant an advantage.
    """
    counter = counter_class(opposing_class)
    if counter is None:
        return NO_ADVANTAGE

    primary = _class_name(buffs.primary_class) == counter.value
    secondary = _class_name(buffs.secondary_class) == counter.value
    if not (primary or secondary):
        return NO_ADVANTAGE

    if primary and secondary:
        source = f"{counter.value} yeti + location buffs"
    elif primary:
        source = f"{counter.value} yeti buff"
    else:
        source = f"{counter.value} location buff"

    return AdvantageCheck(
        has_advantage=True,
        upgrades_to_triple=primary and secondary and buffs.stacked,
        advantage_source=source,
    )


def advantage_report(buffs: PlayerBuffs) -> dict[OpposingClass, AdvantageCheck]:
    """Evaluate the player's buffs against every evil yeti class."""
    return {cls: resolve(cls, buffs) for cls in OpposingClass}
