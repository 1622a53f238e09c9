# -*- coding: utf-8 -*-
"""
Prometheus Metrics - BC-MRV-001: Carbon Accounting

Metrics:
    1. bc_ca_validations_total (Counter, labels: ecosystem_type, status)
    2. bc_ca_validation_issues_total (Counter, labels: severity)
    3. bc_ca_carbon_estimates_total (Counter, labels: scope)
    4. bc_ca_estimated_co2_kg (Histogram)
    5. bc_ca_gps_classifications_total (Counter, labels: level)
    6. bc_ca_processing_duration_seconds (Histogram, labels: operation)
    7. bc_ca_records_stored (Gauge)
    8. bc_ca_processing_errors_total (Counter, labels: error_type)

Metrics are registered on the default prometheus_client registry at
import time.
"""

from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram


# ---------------------------------------------------------------------------
# Metric definitions
# ---------------------------------------------------------------------------

# 1. Record validations by ecosystem and outcome
ca_validations_total = Counter(
    "bc_ca_validations_total",
    "Total ecosystem records validated",
    labelnames=["ecosystem_type", "status"],
)

# 2. Validation errors and warnings raised
ca_validation_issues_total = Counter(
    "bc_ca_validation_issues_total",
    "Total validation issues reported",
    labelnames=["severity"],
)

# 3. Carbon estimates by scope (tree, plot)
ca_carbon_estimates_total = Counter(
    "bc_ca_carbon_estimates_total",
    "Total carbon estimates computed",
    labelnames=["scope"],
)

# 4. Estimated CO2e per plot estimate
ca_estimated_co2_kg = Histogram(
    "bc_ca_estimated_co2_kg",
    "Estimated CO2-equivalent per plot estimate in kg",
    buckets=(
        10.0, 50.0, 100.0, 500.0, 1000.0,
        5000.0, 10000.0, 50000.0, 100000.0,
    ),
)

# 5. GPS fixes by accuracy level
ca_gps_classifications_total = Counter(
    "bc_ca_gps_classifications_total",
    "Total GPS fixes classified",
    labelnames=["level"],
)

# 6. Processing duration by operation
ca_processing_duration_seconds = Histogram(
    "bc_ca_processing_duration_seconds",
    "Carbon accounting processing duration in seconds",
    labelnames=["operation"],
    buckets=(
        0.001, 0.005, 0.01, 0.025, 0.05,
        0.1, 0.25, 0.5, 1.0, 2.5, 5.0,
    ),
)

# 7. Validated records held in memory
ca_records_stored = Gauge(
    "bc_ca_records_stored",
    "Number of validated records held by the service",
)

# 8. Processing errors by type
ca_processing_errors_total = Counter(
    "bc_ca_processing_errors_total",
    "Total processing errors encountered",
    labelnames=["error_type"],
)


# ---------------------------------------------------------------------------
# Helper functions
# ---------------------------------------------------------------------------


def record_validation(ecosystem_type: str, status: str) -> None:
    """Record one record validation.

    Args:
        ecosystem_type: Declared ecosystem of the record.
        status: Validation outcome (valid, invalid).
    """
    ca_validations_total.labels(
        ecosystem_type=ecosystem_type, status=status,
    ).inc()


def record_validation_issues(errors: int, warnings: int) -> None:
    """Add the error and warning counts of a validation."""
    if errors:
        ca_validation_issues_total.labels(severity="error").inc(errors)
    if warnings:
        ca_validation_issues_total.labels(severity="warning").inc(warnings)


def record_carbon_estimate(scope: str, co2_kg: float) -> None:
    """Record a carbon estimate.

    Args:
        scope: ``tree`` or ``plot``.
        co2_kg: Estimated CO2-equivalent (kg). Only plot estimates feed
            the CO2 histogram.
    """
    ca_carbon_estimates_total.labels(scope=scope).inc()
    if scope == "plot":
        ca_estimated_co2_kg.observe(co2_kg)


def record_gps_classification(level: str) -> None:
    ca_gps_classifications_total.labels(level=level).inc()


def observe_duration(operation: str, seconds: float) -> None:
    """Record the duration of a processing operation."""
    ca_processing_duration_seconds.labels(operation=operation).observe(seconds)


def set_records_stored(count: int) -> None:
    ca_records_stored.set(count)


def record_processing_error(error_type: str) -> None:
    """Record a processing error.

    Args:
        error_type: Error category (parse_error, data_error, unexpected).
    """
    ca_processing_errors_total.labels(error_type=error_type).inc()


__all__ = [
    "ca_validations_total",
    "ca_validation_issues_total",
    "ca_carbon_estimates_total",
    "ca_estimated_co2_kg",
    "ca_gps_classifications_total",
    "ca_processing_duration_seconds",
    "ca_records_stored",
    "ca_processing_errors_total",
    "record_validation",
    "record_validation_issues",
    "record_carbon_estimate",
    "record_gps_classification",
    "observe_duration",
    "set_records_stored",
    "record_processing_error",
]
