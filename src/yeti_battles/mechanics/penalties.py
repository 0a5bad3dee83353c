"""Defeat penalties: mutates raw resource balances only, no I/O.

Each evil yeti class drains exactly one resource:
  Siphon:    5% of snowballs (rounded down)
  Assailant: 1 random assistant
  Anchor:    1 snowflake
  Scrambler: 1 icicle

Balances never go below zero. Anything derived from the drained resource
(e.g. snowballs-per-second after losing an assistant) is the caller's job
to recompute.
"""
from __future__ import annotations

import math
import random
from typing import Mapping

from yeti_battles.models.encounter import (
    OpposingClass,
    PenaltyResult,
    PlayerResources,
    ResourceKind,
)
from yeti_battles.models.penalty import (
    PenaltyEffect,
    StealAssistants,
    StealFraction,
    StealUnits,
)

DEFAULT_SIPHON_FRACTION = 0.05

_UNIT_NAMES = {
    ResourceKind.SNOWBALLS: "snowball",
    ResourceKind.SNOWFLAKES: "snowflake",
    ResourceKind.ICICLES: "icicle",
    ResourceKind.ASSISTANTS: "assistant",
}


def build_penalty_table(
    siphon_fraction: float = DEFAULT_SIPHON_FRACTION,
) -> dict[OpposingClass, PenaltyEffect]:
    return {
        OpposingClass.SIPHON: StealFraction(resource=ResourceKind.SNOWBALLS, fraction=siphon_fraction),
        OpposingClass.ASSAILANT: StealAssistants(count=1),
        OpposingClass.ANCHOR: StealUnits(resource=ResourceKind.SNOWFLAKES, count=1),
        OpposingClass.SCRAMBLER: StealUnits(resource=ResourceKind.ICICLES, count=1),
    }


PENALTY_TABLE = build_penalty_table()


def _drain_balance(resources: PlayerResources, kind: ResourceKind, amount: int) -> int:
    """Subtract up to ``amount`` from a scalar balance. Returns what was removed."""
    current = getattr(resources, kind.value)
    removed = max(0, min(amount, current))
    setattr(resources, kind.value, max(0, current - amount))
    return removed


def steal_random_assistants(
    resources: PlayerResources, count: int, rng: random.Random | None = None
) -> list[str]:
    """Remove ``count`` assistant instances, uniformly among owned instances.

    An assistant type owned three times is three times as likely to be hit
    as one owned once. Returns the ids removed (one entry per instance).
    """
    rng = rng or random
    pool = [aid for aid, owned in sorted(resources.assistants.items()) for _ in range(max(0, owned))]
    stolen: list[str] = []
    for _ in range(min(count, len(pool))):
        aid = pool.pop(rng.randrange(len(pool)))
        resources.assistants[aid] = max(0, resources.assistants.get(aid, 0) - 1)
        stolen.append(aid)
    return stolen


def apply_effect(
    effect: PenaltyEffect, resources: PlayerResources, rng: random.Random | None = None
) -> PenaltyResult:
    if isinstance(effect, StealFraction):
        balance = getattr(resources, effect.resource.value)
        amount = _drain_balance(resources, effect.resource, math.floor(balance * effect.fraction))
        return PenaltyResult(resource_kind=effect.resource, amount=amount)
    if isinstance(effect, StealUnits):
        amount = _drain_balance(resources, effect.resource, effect.count)
        return PenaltyResult(resource_kind=effect.resource, amount=amount)
    if isinstance(effect, StealAssistants):
        stolen = steal_random_assistants(resources, effect.count, rng)
        return PenaltyResult(resource_kind=ResourceKind.ASSISTANTS, amount=len(stolen), targets=stolen)
    raise TypeError(f"Unsupported penalty effect: {effect!r}")


def describe_penalty(opposing_class: OpposingClass | str, result: PenaltyResult) -> str:
    name = getattr(opposing_class, "value", opposing_class)
    if result.resource_kind is None:
        return f"{name} applied an unknown penalty"
    if result.amount == 0:
        return f"{name} found no {result.resource_kind.value} to steal"
    unit = _UNIT_NAMES[result.resource_kind]
    plural = "" if result.amount == 1 else "s"
    return f"{name} stole {result.amount:,} {unit}{plural}"


def apply_penalty(
    opposing_class: OpposingClass | str,
    resources: PlayerResources,
    rng: random.Random | None = None,
    table: Mapping[OpposingClass, PenaltyEffect] | None = None,
) -> PenaltyResult:
    """Debit the resource ``opposing_class`` targets and report what was lost."""
    table = PENALTY_TABLE if table is None else table
    try:
        effect = table[OpposingClass(opposing_class)]
    except (KeyError, ValueError):
        result = PenaltyResult()
    else:
        result = apply_effect(effect, resources, rng)
    result.description = describe_penalty(opposing_class, result)
    return result
