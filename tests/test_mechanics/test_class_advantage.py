"""Tests for src/yeti_battles/mechanics/class_advantage.py."""
from __future__ import annotations

import pytest

from yeti_battles.mechanics.class_advantage import (
    CLASS_OPPOSITION,
    advantage_report,
    counter_class,
    resolve,
)
from yeti_battles.models.encounter import AdvantageClass, OpposingClass, PlayerBuffs


class TestOppositionTable:
    @pytest.mark.parametrize("opposing, counter", [
        ("Siphon", "Harvester"),
        ("Assailant", "Defender"),
        ("Anchor", "Traveler"),
        ("Scrambler", "Scholar"),
    ])
    def test_pairs(self, opposing, counter):
        assert counter_class(opposing) == AdvantageClass(counter)

    def test_covers_every_class(self):
        assert set(CLASS_OPPOSITION) == set(OpposingClass)

    def test_table_is_read_only(self):
        with pytest.raises(TypeError):
            CLASS_OPPOSITION[OpposingClass.SIPHON] = AdvantageClass.SCHOLAR


class TestResolve:
    def test_single_primary_buff(self):
        check = resolve("Siphon", PlayerBuffs(primary_class="Harvester"))
        assert check.has_advantage is True
        assert check.upgrades_to_triple is False
        assert check.advantage_source == "Harvester yeti buff"

    def test_single_secondary_buff(self):
        check = resolve("Anchor", PlayerBuffs(secondary_class="Traveler"))
        assert check.has_advantage is True
        assert check.upgrades_to_triple is False
        assert check.advantage_source == "Traveler location buff"

    def test_both_buffs_stacked(self):
        buffs = PlayerBuffs(primary_class="Harvester", secondary_class="Harvester", stacked=True)
        check = resolve("Siphon", buffs)
        assert check.has_advantage is True
        assert check.upgrades_to_triple is True
        assert check.advantage_source == "Harvester yeti + location buffs"

    def test_both_buffs_without_stacked_flag(self):
        buffs = PlayerBuffs(primary_class="Harvester", secondary_class="Harvester", stacked=False)
        check = resolve("Siphon", buffs)
        assert check.has_advantage is True
        assert check.upgrades_to_triple is False

    def test_stacked_flag_with_wrong_class(self):
        buffs = PlayerBuffs(primary_class="Scholar", secondary_class="Scholar", stacked=True)
        check = resolve("Siphon", buffs)
        assert check.has_advantage is False
        assert check.upgrades_to_triple is False

    def test_one_matching_one_not(self):
        buffs = PlayerBuffs(primary_class="Defender", secondary_class="Scholar")
        check = resolve("Scrambler", buffs)
        assert check.has_advantage is True
        assert check.advantage_source == "Scholar location buff"

    def test_no_buffs(self):
        check = resolve("Assailant", PlayerBuffs())
        assert check.has_advantage is False
        assert check.advantage_source == ""

    def test_enum_inputs(self):
        buffs = PlayerBuffs(primary_class=AdvantageClass.DEFENDER.value)
        assert resolve(OpposingClass.ASSAILANT, buffs).has_advantage is True

    @pytest.mark.parametrize("unknown", ["Goblin", "", "siphon"])
    def test_unknown_class_is_not_an_error(self, unknown):
        check = resolve(unknown, PlayerBuffs(primary_class="Harvester"))
        assert check.has_advantage is False


class TestAdvantageReport:
    def test_only_countered_class_flagged(self):
        report = advantage_report(PlayerBuffs(primary_class="Scholar"))
        assert set(report) == set(OpposingClass)
        flagged = [cls for cls, check in report.items() if check.has_advantage]
        assert flagged == [OpposingClass.SCRAMBLER]
