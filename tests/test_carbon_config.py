# -*- coding: utf-8 -*-
"""Tests for CarbonAccountingConfig and the config singleton."""

import pytest

from bluecarbon.carbon_accounting.config import (
    CarbonAccountingConfig,
    get_config,
    reset_config,
    set_config,
)


class TestDefaults:

    def test_default_values(self):
        config = CarbonAccountingConfig()

        assert config.sequestration_rate_t_co2_per_ha_year == 3.14
        assert config.enable_provenance is True
        assert config.enable_metrics is True
        assert config.batch_max_size == 1000
        assert config.export_max_records == 10000
        assert config.log_level == "INFO"


class TestFromEnv:
    """Tests for CarbonAccountingConfig.from_env."""

    def test_no_env_gives_defaults(self, monkeypatch):
        for name in ("BATCH_MAX_SIZE", "ENABLE_METRICS", "LOG_LEVEL"):
            monkeypatch.delenv(f"BC_CARBON_ACCOUNTING_{name}", raising=False)
        assert CarbonAccountingConfig.from_env() == CarbonAccountingConfig()

    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("BC_CARBON_ACCOUNTING_SEQUESTRATION_RATE_T_CO2_PER_HA_YEAR", "4.5")
        monkeypatch.setenv("BC_CARBON_ACCOUNTING_BATCH_MAX_SIZE", "25")
        monkeypatch.setenv("BC_CARBON_ACCOUNTING_EXPORT_MAX_RECORDS", "10")
        monkeypatch.setenv("BC_CARBON_ACCOUNTING_LOG_LEVEL", "DEBUG")

        config = CarbonAccountingConfig.from_env()

        assert config.sequestration_rate_t_co2_per_ha_year == 4.5
        assert config.batch_max_size == 25
        assert config.export_max_records == 10
        assert config.log_level == "DEBUG"

    @pytest.mark.parametrize("raw,expected", [
        ("true", True), ("1", True), ("YES", True),
        ("false", False), ("0", False), ("off", False),
    ])
    def test_boolean_parsing(self, monkeypatch, raw, expected):
        monkeypatch.setenv("BC_CARBON_ACCOUNTING_ENABLE_PROVENANCE", raw)
        assert CarbonAccountingConfig.from_env().enable_provenance is expected

    def test_invalid_integer_keeps_default(self, monkeypatch, caplog):
        monkeypatch.setenv("BC_CARBON_ACCOUNTING_BATCH_MAX_SIZE", "lots")

        config = CarbonAccountingConfig.from_env()

        assert config.batch_max_size == 1000
        assert "Invalid integer" in caplog.text

    def test_invalid_float_keeps_default(self, monkeypatch):
        monkeypatch.setenv(
            "BC_CARBON_ACCOUNTING_SEQUESTRATION_RATE_T_CO2_PER_HA_YEAR", "fast",
        )
        assert CarbonAccountingConfig.from_env().sequestration_rate_t_co2_per_ha_year == 3.14


class TestSingleton:
    """Tests for get_config / set_config / reset_config."""

    def test_get_config_is_cached(self):
        assert get_config() is get_config()

    def test_set_config_replaces_instance(self):
        custom = CarbonAccountingConfig(batch_max_size=5)
        set_config(custom)
        assert get_config() is custom

    def test_reset_config_rebuilds(self, monkeypatch):
        set_config(CarbonAccountingConfig(batch_max_size=5))
        reset_config()
        monkeypatch.setenv("BC_CARBON_ACCOUNTING_BATCH_MAX_SIZE", "7")
        assert get_config().batch_max_size == 7
