from __future__ import annotations
import random
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from yeti_battles.models.encounter import OpposingClass

CONTENT_DIR = Path(__file__).parent


@dataclass(frozen=True)
class RosterEntry:
    opposing_class: OpposingClass
    name: str
    description: str = ""
    effect: str = ""
    color_theme: str = ""


def load_toml(filepath: Path) -> dict[str, Any]:
    with open(filepath, "rb") as f:
        return tomllib.load(f)


def load_roster(filepath: Path | None = None) -> dict[OpposingClass, list[RosterEntry]]:
    """Load evil yetis grouped by class. Every class gets at least one entry."""
    data = load_toml(filepath or CONTENT_DIR / "evil_yetis.toml")
    roster: dict[OpposingClass, list[RosterEntry]] = {cls: [] for cls in OpposingClass}
    for raw in data.get("yetis", []):
        entry = RosterEntry(
            opposing_class=OpposingClass(raw["class"]),
            name=raw["name"],
            description=raw.get("description", ""),
            effect=raw.get("effect", ""),
            color_theme=raw.get("color_theme", ""),
        )
        roster[entry.opposing_class].append(entry)
    for cls, entries in roster.items():
        if not entries:
            entries.append(RosterEntry(opposing_class=cls, name=f"Evil {cls.value} Yeti"))
    return roster


def pick_yeti(
    roster: dict[OpposingClass, list[RosterEntry]], rng: random.Random | None = None
) -> RosterEntry:
    """Pick a class uniformly, then a yeti of that class."""
    rng = rng or random
    cls = rng.choice(list(OpposingClass))
    return rng.choice(roster[cls])
