"""Test Settings loading and threshold validation."""

import pytest

from trade_journal.core.config import Settings, load_settings
from trade_journal.core.errors import ConfigError


class TestSettingsDefaults:
    def test_default_settings(self):
        settings = Settings()
        assert settings.filter_sync.debounce_ms == 500
        assert settings.leaning.threshold == 15.0
        assert settings.api.port == 8000

    def test_coupling_defaults(self):
        settings = Settings()
        assert settings.coupling.max_deviation == 30.0
        assert settings.coupling.upper_extreme == 90.0
        assert settings.coupling.lower_extreme == 10.0
        assert settings.coupling.default_discipline == 85.0
        assert settings.coupling.default_tilt == 72.0
        assert settings.coupling.min_stability_index == 20.0


class TestLoadSettings:
    def test_toml_file(self, tmp_path):
        path = tmp_path / "journal.toml"
        path.write_text(
            'trades_file = "trades.json"\n'
            "[leaning]\nthreshold = 20.0\n"
            "[coupling]\nmax_deviation = 25.0\n"
        )
        settings = load_settings(config_path=path)
        assert settings.trades_file == "trades.json"
        assert settings.leaning.threshold == 20.0
        assert settings.coupling.max_deviation == 25.0

    def test_missing_file_uses_defaults(self, tmp_path):
        settings = load_settings(config_path=tmp_path / "absent.toml")
        assert settings.leaning.threshold == 15.0

    def test_invalid_toml(self, tmp_path):
        path = tmp_path / "broken.toml"
        path.write_text("[leaning\nthreshold = ")
        with pytest.raises(ConfigError, match="Invalid config file"):
            load_settings(config_path=path)

    def test_overrides(self):
        settings = load_settings(overrides={"api": {"port": 9100}})
        assert settings.api.port == 9100

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("JOURNAL_LEANING__THRESHOLD", "5")
        monkeypatch.setenv("JOURNAL_TRADES_FILE", "/data/trades.json")
        settings = load_settings()
        assert settings.leaning.threshold == 5.0
        assert settings.trades_file == "/data/trades.json"


class TestValidateThresholds:
    @pytest.mark.parametrize("overrides,match", [
        ({"coupling": {"max_deviation": 0}}, "max_deviation"),
        ({"coupling": {"max_deviation": 150}}, "max_deviation"),
        ({"coupling": {"lower_extreme": 90, "upper_extreme": 10}}, "extremes"),
        ({"coupling": {"min_stability_index": -1}}, "min_stability_index"),
        ({"coupling": {"min_stability_index": 101}}, "min_stability_index"),
        ({"leaning": {"threshold": -1}}, "threshold"),
        ({"filter_sync": {"debounce_ms": -5}}, "debounce_ms"),
    ])
    def test_rejects_incoherent_bounds(self, overrides, match):
        with pytest.raises(ConfigError, match=match):
            load_settings(overrides=overrides)

    def test_defaults_pass(self):
        Settings().validate_thresholds()  # Should not raise
