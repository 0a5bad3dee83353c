"""Battle tuning loaded from config.toml, validated up front."""
from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from yeti_battles.models.encounter import OpposingClass

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent / "config.toml"


class PowerCurveConfig(BaseModel):
    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    center: float = 0.85
    minimum: float = 0.5
    maximum: float = 1.2
    std_dev: float = Field(default=0.15, gt=0)

    @model_validator(mode="after")
    def _check_bounds(self) -> PowerCurveConfig:
        if not (self.minimum < self.center < self.maximum):
            raise ValueError(
                f"power curve needs minimum < center < maximum, "
                f"got {self.minimum} / {self.center} / {self.maximum}"
            )
        return self


def _default_despawn() -> dict[OpposingClass, int]:
    return {cls: 20_000 for cls in OpposingClass}


class BattleConfig(BaseModel):
    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    unlocked: bool = False
    enabled: bool = True
    spawn_probability: float = Field(default=1.0, ge=0.0, le=1.0)
    spawn_delay_ms: int = Field(default=10_000, ge=0)
    resolution_delay_ms: int = Field(default=1_000, ge=0)
    history_limit: int = Field(default=50, ge=1)
    siphon_fraction: float = Field(default=0.05, gt=0.0, le=1.0)
    power_curve: PowerCurveConfig = Field(default_factory=PowerCurveConfig)
    despawn_ms: dict[OpposingClass, int] = Field(default_factory=_default_despawn)

    @field_validator("despawn_ms")
    @classmethod
    def _check_despawn(cls, value: dict[OpposingClass, int]) -> dict[OpposingClass, int]:
        merged = _default_despawn()
        merged.update(value)
        bad = {k.value: v for k, v in merged.items() if v <= 0}
        if bad:
            raise ValueError(f"despawn durations must be positive, got {bad}")
        return merged

    def despawn_for(self, opposing_class: OpposingClass) -> int:
        return self.despawn_ms[opposing_class]


def load_raw_config(path: Path | str | None = None) -> dict[str, Any]:
    """Load the whole TOML file; a missing file means defaults."""
    config_path = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    if not config_path.exists():
        logger.debug(f"No config at {config_path}, using defaults")
        return {}
    with open(config_path, "rb") as f:
        return tomllib.load(f)


def load_config(path: Path | str | None = None) -> BattleConfig:
    """Build a BattleConfig from the ``[battles]`` table.

    Raises pydantic.ValidationError (a ValueError) on malformed values.
    """
    return BattleConfig.model_validate(load_raw_config(path).get("battles", {}))
