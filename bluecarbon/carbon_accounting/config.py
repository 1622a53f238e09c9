# -*- coding: utf-8 -*-
"""
Carbon Accounting Service Configuration - BC-MRV-001: Carbon Accounting

Centralized configuration for the Carbon Accounting SDK covering:
- Sequestration: default annual CO2 sequestration rate per hectare
- Audit: provenance tracking and metrics toggles
- Batch processing: max records per validation batch
- Export: max records per CSV export
- Logging level

The allometric constants and GPS accuracy tiers are fixed business rules kept
in ``constants``; the zone, species and carbon-stock tables live in
``reference_data``.

All settings can be overridden via environment variables with the
``BC_CARBON_ACCOUNTING_`` prefix (e.g. ``BC_CARBON_ACCOUNTING_BATCH_MAX_SIZE``).

Example:
    >>> from bluecarbon.carbon_accounting.config import get_config
    >>> cfg = get_config()
    >>> print(cfg.sequestration_rate_t_co2_per_ha_year, cfg.batch_max_size)
"""

from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass
from typing import Any, Optional

logger = logging.getLogger(__name__)

_ENV_PREFIX = "BC_CARBON_ACCOUNTING_"


# ---------------------------------------------------------------------------
# CarbonAccountingConfig
# ---------------------------------------------------------------------------


@dataclass
class CarbonAccountingConfig:
    """Complete configuration for the BlueCarbon Carbon Accounting SDK.

    Attributes:
        sequestration_rate_t_co2_per_ha_year: Annual sequestration rate used
            for plot-level projections (t CO2 / ha / year).
        enable_provenance: Whether the service records SHA-256 provenance.
        enable_metrics: Whether the service emits Prometheus metrics.
        batch_max_size: Maximum number of records per validation batch.
        export_max_records: Maximum number of records per CSV export.
        log_level: Logging level applied to the ``bluecarbon`` logger.
    """

    # -- Sequestration -------------------------------------------------------
    sequestration_rate_t_co2_per_ha_year: float = 3.14

    # -- Audit ---------------------------------------------------------------
    enable_provenance: bool = True
    enable_metrics: bool = True

    # -- Batch processing ----------------------------------------------------
    batch_max_size: int = 1000

    # -- Export --------------------------------------------------------------
    export_max_records: int = 10000

    # -- Logging -------------------------------------------------------------
    log_level: str = "INFO"

    # ------------------------------------------------------------------
    # Factory helpers
    # ------------------------------------------------------------------

    @classmethod
    def from_env(cls) -> CarbonAccountingConfig:
        """Build a CarbonAccountingConfig from environment variables.

        Every field can be overridden via ``BC_CARBON_ACCOUNTING_<FIELD_UPPER>``.
        Boolean values accept ``true/1/yes`` (case-insensitive). Unparseable
        numbers are logged and replaced by the default.

        Returns:
            Populated CarbonAccountingConfig instance.
        """
        prefix = _ENV_PREFIX

        def _env(name: str, default: Any = None) -> Optional[str]:
            return os.environ.get(f"{prefix}{name}", default)

        def _bool(name: str, default: bool) -> bool:
            val = _env(name)
            if val is None:
                return default
            return val.lower() in ("true", "1", "yes")

        def _int(name: str, default: int) -> int:
            val = _env(name)
            if val is None:
                return default
            try:
                return int(val)
            except ValueError:
                logger.warning(
                    "Invalid integer for %s%s=%s, using default %d",
                    prefix, name, val, default,
                )
                return default

        def _float(name: str, default: float) -> float:
            val = _env(name)
            if val is None:
                return default
            try:
                return float(val)
            except ValueError:
                logger.warning(
                    "Invalid float for %s%s=%s, using default %f",
                    prefix, name, val, default,
                )
                return default

        def _str(name: str, default: str) -> str:
            val = _env(name)
            if val is None:
                return default
            return val

        config = cls(
            sequestration_rate_t_co2_per_ha_year=_float(
                "SEQUESTRATION_RATE_T_CO2_PER_HA_YEAR",
                cls.sequestration_rate_t_co2_per_ha_year,
            ),
            enable_provenance=_bool(
                "ENABLE_PROVENANCE", cls.enable_provenance,
            ),
            enable_metrics=_bool("ENABLE_METRICS", cls.enable_metrics),
            batch_max_size=_int("BATCH_MAX_SIZE", cls.batch_max_size),
            export_max_records=_int(
                "EXPORT_MAX_RECORDS", cls.export_max_records,
            ),
            log_level=_str("LOG_LEVEL", cls.log_level),
        )

        logger.info(
            "CarbonAccountingConfig loaded: sequestration_rate=%.2f, "
            "provenance=%s, metrics=%s, batch_size=%d, export_max=%d, "
            "log_level=%s",
            config.sequestration_rate_t_co2_per_ha_year,
            config.enable_provenance,
            config.enable_metrics,
            config.batch_max_size,
            config.export_max_records,
            config.log_level,
        )
        return config


# ---------------------------------------------------------------------------
# Thread-safe singleton accessor
# ---------------------------------------------------------------------------

_config_instance: Optional[CarbonAccountingConfig] = None
_config_lock = threading.Lock()


def get_config() -> CarbonAccountingConfig:
    """Return the singleton CarbonAccountingConfig, creating from env if needed.

    Returns:
        CarbonAccountingConfig singleton instance.
    """
    global _config_instance
    if _config_instance is None:
        with _config_lock:
            if _config_instance is None:
                _config_instance = CarbonAccountingConfig.from_env()
    return _config_instance


def set_config(config: CarbonAccountingConfig) -> None:
    """Replace the singleton CarbonAccountingConfig (useful for testing).

    Args:
        config: New configuration to install.
    """
    global _config_instance
    with _config_lock:
        _config_instance = config
    logger.info("CarbonAccountingConfig replaced programmatically")


def reset_config() -> None:
    """Reset the singleton (primarily for test teardown)."""
    global _config_instance
    with _config_lock:
        _config_instance = None


__all__ = [
    "CarbonAccountingConfig",
    "get_config",
    "set_config",
    "reset_config",
]
