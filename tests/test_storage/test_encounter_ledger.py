"""Tests for src/yeti_battles/storage/encounter_ledger.py."""
from __future__ import annotations

import pytest

from yeti_battles.models.encounter import LedgerEntry, OpposingClass, PlayerResources, ResultKind
from yeti_battles.storage.encounter_ledger import EncounterLedger


def _entry(name: str, won: bool = True, cls: OpposingClass = OpposingClass.SIPHON) -> LedgerEntry:
    return LedgerEntry(
        actor_name=name,
        actor_class=cls,
        player_won=won,
        result_kind=ResultKind.NORMAL if won else ResultKind.PENALTY,
        resources=PlayerResources(snowballs=100),
    )


class TestCap:
    def test_default_limit(self):
        assert EncounterLedger().limit == 50

    def test_oldest_dropped_after_51(self):
        ledger = EncounterLedger()
        for i in range(51):
            ledger.record(_entry(f"yeti-{i}"))
        names = [e.actor_name for e in ledger.entries()]
        assert len(names) == 50
        assert "yeti-0" not in names
        assert names[0] == "yeti-1"
        assert ledger.latest().actor_name == "yeti-50"

    def test_small_limit(self):
        ledger = EncounterLedger(limit=2, entries=[_entry("a"), _entry("b"), _entry("c")])
        assert [e.actor_name for e in ledger.entries()] == ["b", "c"]

    @pytest.mark.parametrize("limit", [0, -3])
    def test_bad_limit(self, limit):
        with pytest.raises(ValueError):
            EncounterLedger(limit=limit)


class TestViews:
    def test_entries_returns_copy(self):
        ledger = EncounterLedger(entries=[_entry("a")])
        ledger.entries().clear()
        assert len(ledger) == 1

    def test_empty(self):
        ledger = EncounterLedger()
        assert ledger.latest() is None
        assert ledger.summary() == {
            "battles": 0, "wins": 0, "losses": 0, "by_class": {}, "by_result": {},
        }

    def test_summary(self):
        ledger = EncounterLedger(entries=[
            _entry("a", True),
            _entry("b", False),
            _entry("c", False, OpposingClass.ANCHOR),
        ])
        summary = ledger.summary()
        assert summary["battles"] == 3
        assert summary["wins"] == 1
        assert summary["losses"] == 2
        assert summary["by_class"]["Siphon"] == {"wins": 1, "losses": 1}
        assert summary["by_class"]["Anchor"] == {"wins": 0, "losses": 1}
        assert summary["by_result"] == {"normal": 1, "penalty": 2}

    def test_clear(self):
        ledger = EncounterLedger(entries=[_entry("a")])
        ledger.clear()
        assert len(ledger) == 0


class TestSerialization:
    def test_list_round_trip(self):
        ledger = EncounterLedger(entries=[_entry("a"), _entry("b", False)])
        data = ledger.to_list()
        assert data[0]["actor_class"] == "Siphon"
        assert isinstance(data[0]["timestamp"], str)
        restored = EncounterLedger.from_list(data)
        assert restored.entries() == ledger.entries()

    def test_from_list_respects_limit(self):
        data = [_entry(str(i)).model_dump(mode="json") for i in range(5)]
        restored = EncounterLedger.from_list(data, limit=3)
        assert [e.actor_name for e in restored.entries()] == ["2", "3", "4"]


class TestResize:
    def test_shrink_drops_oldest(self):
        ledger = EncounterLedger(entries=[_entry("a"), _entry("b"), _entry("c")])
        ledger.resize(2)
        assert [e.actor_name for e in ledger.entries()] == ["b", "c"]
        ledger.record(_entry("d"))
        assert [e.actor_name for e in ledger.entries()] == ["c", "d"]

    def test_bad_size(self):
        with pytest.raises(ValueError):
            EncounterLedger().resize(0)
