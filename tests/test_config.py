"""Tests for src/yeti_battles/config.py."""
from __future__ import annotations

import pytest
from pydantic import ValidationError

from yeti_battles.config import (
    DEFAULT_CONFIG_PATH,
    BattleConfig,
    PowerCurveConfig,
    load_config,
    load_raw_config,
)
from yeti_battles.models.encounter import OpposingClass


class TestBattleConfig:
    def test_defaults(self):
        config = BattleConfig()
        assert config.unlocked is False
        assert config.enabled is True
        assert config.spawn_probability == 1.0
        assert config.spawn_delay_ms == 10_000
        assert config.resolution_delay_ms == 1_000
        assert config.history_limit == 50
        assert config.despawn_for(OpposingClass.SCRAMBLER) == 20_000

    @pytest.mark.parametrize("field,value", [
        ("spawn_probability", 1.01),
        ("spawn_probability", -0.5),
        ("history_limit", 0),
        ("spawn_delay_ms", -1),
        ("siphon_fraction", 0),
    ])
    def test_rejects_bad_values(self, field, value):
        with pytest.raises(ValidationError):
            BattleConfig(**{field: value})

    def test_rejects_unknown_keys(self):
        with pytest.raises(ValidationError):
            BattleConfig(spawn_chance=0.5)

    def test_assignment_is_validated(self):
        config = BattleConfig()
        with pytest.raises(ValidationError):
            config.spawn_probability = 2.0

    def test_partial_despawn_table_merges(self):
        config = BattleConfig(despawn_ms={"Anchor": 5_000})
        assert config.despawn_for(OpposingClass.ANCHOR) == 5_000
        assert config.despawn_for(OpposingClass.SIPHON) == 20_000

    def test_non_positive_despawn_rejected(self):
        with pytest.raises(ValidationError):
            BattleConfig(despawn_ms={"Siphon": 0})


class TestPowerCurveConfig:
    def test_bounds_must_bracket_center(self):
        with pytest.raises(ValidationError):
            PowerCurveConfig(center=1.5)
        with pytest.raises(ValidationError):
            PowerCurveConfig(minimum=1.3, maximum=1.2)

    def test_std_dev_positive(self):
        with pytest.raises(ValidationError):
            PowerCurveConfig(std_dev=0)


class TestLoading:
    def test_repository_config(self):
        assert DEFAULT_CONFIG_PATH.exists()
        config = load_config()
        assert config.power_curve.center == 0.85
        assert config.history_limit == 50

    def test_missing_file_means_defaults(self, tmp_path):
        assert load_raw_config(tmp_path / "absent.toml") == {}
        assert load_config(tmp_path / "absent.toml") == BattleConfig()

    def test_custom_file(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text(
            "[battles]\nunlocked = true\nspawn_probability = 0.3\n"
            "[battles.power_curve]\ncenter = 0.9\n"
        )
        config = load_config(path)
        assert config.unlocked is True
        assert config.spawn_probability == 0.3
        assert config.power_curve.center == 0.9
        assert config.power_curve.minimum == 0.5

    def test_bad_file_fails_fast(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text("[battles]\nspawn_probability = 3\n")
        with pytest.raises(ValueError):
            load_config(path)
