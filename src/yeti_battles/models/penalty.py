"""Penalty effects an evil yeti applies when it wins.

Each variant carries its own payload; callers dispatch on the variant type.
"""
from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from yeti_battles.models.encounter import ResourceKind


class StealFraction(BaseModel):
    """Drain a fraction of a currency balance (rounded down)."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["steal_fraction"] = "steal_fraction"
    resource: ResourceKind = ResourceKind.SNOWBALLS
    fraction: float = Field(gt=0, le=1)


class StealUnits(BaseModel):
    """Drain a fixed number of units from a currency balance."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["steal_units"] = "steal_units"
    resource: ResourceKind
    count: int = Field(default=1, ge=1)


class StealAssistants(BaseModel):
    """Take owned assistant instances, chosen uniformly at random."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["steal_assistants"] = "steal_assistants"
    count: int = Field(default=1, ge=1)


PenaltyEffect = Annotated[
    Union[StealFraction, StealUnits, StealAssistants],
    Field(discriminator="kind"),
]

penalty_adapter: TypeAdapter[PenaltyEffect] = TypeAdapter(PenaltyEffect)
