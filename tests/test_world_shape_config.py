"""Tests for world shape configuration and presets."""

import pytest
from pydantic import ValidationError

from hexworld.config import PRESETS, Settings, WorldShapeConfig, get_preset, list_presets


class TestWorldShapeConfig:
    """Test validation and defaults."""

    def test_defaults(self):
        config = WorldShapeConfig()
        assert config.continent_count == 4
        assert config.target_land_fraction == 0.35
        assert config.sea_level_variance == 0.1
        assert config.rainfall_multiplier == 0.9
        assert config.archipelago_zones == 1
        assert config.inland_seas is False

    @pytest.mark.parametrize(
        "field,value",
        [
            ("continent_count", 0),
            ("continent_count", 9),
            ("target_land_fraction", 1.5),
            ("target_land_fraction", -0.1),
            ("sea_level_variance", 0.6),
            ("global_temperature", 0.0),
            ("archipelago_zones", -1),
        ],
    )
    def test_out_of_range_rejected(self, field, value):
        with pytest.raises(ValidationError):
            WorldShapeConfig(**{field: value})

    def test_validation_error_is_value_error(self):
        with pytest.raises(ValueError):
            WorldShapeConfig(continent_size=10.0)

    def test_unknown_field_rejected(self):
        with pytest.raises(ValidationError):
            WorldShapeConfig(ocean_color="blue")

    def test_frozen(self):
        config = WorldShapeConfig()
        with pytest.raises(ValidationError):
            config.continent_count = 2

    def test_with_overrides(self):
        config = WorldShapeConfig()
        changed = config.with_overrides(continent_count=1, target_land_fraction=1.0)
        assert changed.continent_count == 1
        assert changed.target_land_fraction == 1.0
        assert config.continent_count == 4

    def test_with_overrides_validates(self):
        with pytest.raises(ValidationError):
            WorldShapeConfig().with_overrides(continent_count=20)


class TestPresets:
    """Test named presets."""

    def test_list_presets(self):
        assert list_presets() == sorted(
            ["default", "pangaea", "archipelago", "fragmented", "dual_supercontinents", "mediterranean"]
        )

    def test_get_preset(self):
        pangaea = get_preset("pangaea")
        assert pangaea.continent_count == 1
        assert pangaea.continent_size == 2.5
        assert get_preset("default") == WorldShapeConfig()

    def test_archipelago_preset(self):
        archipelago = PRESETS["archipelago"]
        assert archipelago.archipelago_zones == 4
        assert archipelago.target_land_fraction == 0.25

    def test_unknown_preset(self):
        with pytest.raises(KeyError) as exc_info:
            get_preset("atlantis")
        assert "pangaea" in str(exc_info.value)


class TestSettings:
    """Test runtime settings."""

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("HEXWORLD_DEFAULT_RADIUS", "12")
        monkeypatch.setenv("HEXWORLD_SEED", "abc")
        settings = Settings()
        assert settings.default_radius == 12
        assert settings.seed == "abc"

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("HEXWORLD_SEED", raising=False)
        monkeypatch.delenv("HEXWORLD_LOG_LEVEL", raising=False)
        settings = Settings(_env_file=None)
        assert settings.log_level == "INFO"
        assert settings.default_preset == "default"
