from __future__ import annotations

from collections import Counter
from typing import Any, Iterable

from yeti_battles.models.encounter import LedgerEntry

DEFAULT_LIMIT = 50


class EncounterLedger:
    """Append-only history of recent battles, capped at ``limit`` entries.

    Older entries are dropped from the front once the cap is exceeded.
    """

    def __init__(self, limit: int = DEFAULT_LIMIT, entries: Iterable[LedgerEntry] | None = None) -> None:
        if limit < 1:
            raise ValueError(f"Ledger limit must be positive, got {limit}")
        self.limit = limit
        self._entries: list[LedgerEntry] = []
        for entry in entries or []:
            self.record(entry)

    def resize(self, limit: int) -> None:
        """Change the cap, dropping the oldest entries if it shrank."""
        if limit < 1:
            raise ValueError(f"Ledger limit must be positive, got {limit}")
        self.limit = limit
        self._entries = self._entries[-limit:]

    def record(self, entry: LedgerEntry) -> None:
        self._entries.append(entry)
        if len(self._entries) > self.limit:
            self._entries = self._entries[-self.limit:]

    def entries(self) -> list[LedgerEntry]:
        return list(self._entries)

    def latest(self) -> LedgerEntry | None:
        return self._entries[-1] if self._entries else None

    def clear(self) -> None:
        self._entries = []

    def __len__(self) -> int:
        return len(self._entries)

    def summary(self) -> dict[str, Any]:
        """Win/loss totals overall and per evil yeti class."""
        wins = sum(1 for e in self._entries if e.player_won)
        by_class: dict[str, dict[str, int]] = {}
        for e in self._entries:
            stats = by_class.setdefault(e.actor_class.value, {"wins": 0, "losses": 0})
            stats["wins" if e.player_won else "losses"] += 1
        kinds = Counter(e.result_kind.value for e in self._entries)
        return {
            "battles": len(self._entries),
            "wins": wins,
            "losses": len(self._entries) - wins,
            "by_class": by_class,
            "by_result": dict(kinds),
        }

    def to_list(self) -> list[dict[str, Any]]:
        return [e.model_dump(mode="json") for e in self._entries]

    @classmethod
    def from_list(cls, data: Iterable[dict[str, Any]], limit: int = DEFAULT_LIMIT) -> EncounterLedger:
        return cls(limit=limit, entries=(LedgerEntry.model_validate(d) for d in data))
