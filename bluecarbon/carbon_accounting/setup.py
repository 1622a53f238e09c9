# -*- coding: utf-8 -*-
"""
Carbon Accounting Service Setup - BC-MRV-001: Carbon Accounting

Provides ``configure_carbon_accounting(app)`` which wires up the Carbon
Accounting SDK (tree and plot carbon estimation, ecosystem record
validation, GPS accuracy classification, CSV export, provenance tracker)
and mounts the REST API.

Also exposes ``get_carbon_accounting(app)`` for programmatic access and
the ``CarbonAccountingService`` facade class.

Usage:
    >>> from fastapi import FastAPI
    >>> from bluecarbon.carbon_accounting.setup import configure_carbon_accounting
    >>> app = FastAPI()
    >>> import asyncio
    >>> service = asyncio.run(configure_carbon_accounting(app))
"""

from __future__ import annotations

import logging
import threading
import time
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from pydantic import ValidationError

from bluecarbon.carbon_accounting.biomass import (
    calculate_basal_area,
    calculate_carbon_from_biomass,
    calculate_total_carbon,
    calculate_tree_biomass,
    estimate_annual_sequestration,
)
from bluecarbon.carbon_accounting.config import (
    CarbonAccountingConfig,
    get_config,
)
from bluecarbon.carbon_accounting.export import export_validation_results
from bluecarbon.carbon_accounting.formatting import square_meters_to_hectares
from bluecarbon.carbon_accounting.geometry import calculate_polygon_area
from bluecarbon.carbon_accounting.metrics import (
    observe_duration,
    record_carbon_estimate,
    record_gps_classification,
    record_processing_error,
    record_validation,
    record_validation_issues,
    set_records_stored,
)
from bluecarbon.carbon_accounting.models import (
    CarbonAccountingStatistics,
    Coordinate,
    EcosystemRecord,
    GPSAccuracyResult,
    PlotCarbonEstimate,
    TreeCarbonEstimate,
    TreeMeasurement,
    ValidatedRecord,
    ValidationStatus,
    parse_ecosystem_type,
)
from bluecarbon.carbon_accounting.provenance import ProvenanceTracker
from bluecarbon.carbon_accounting.validators import (
    classify_gps_accuracy,
    validate_ecosystem_data,
)
from bluecarbon.exceptions import (
    BlueCarbonException,
    ConfigurationError,
    InvalidRecordError,
)

logger = logging.getLogger(__name__)

# Thread-safe singleton lock
_singleton_lock = threading.Lock()
_singleton_instance: Optional["CarbonAccountingService"] = None

UNKNOWN_ECOSYSTEM_LABEL = "unknown"


def _utcnow() -> datetime:
    """Return current UTC datetime with microseconds zeroed."""
    return datetime.now(timezone.utc).replace(microsecond=0)


def _ecosystem_key(value: Any) -> str:
    """Canonical ecosystem key for record filtering, or the raw text if unknown."""
    ecosystem = parse_ecosystem_type(value)
    return ecosystem.value if ecosystem is not None else str(value)


def _ecosystem_label(value: Any) -> str:
    """Canonical ecosystem key for metrics and statistics.

    Unrecognised keys all map to ``UNKNOWN_ECOSYSTEM_LABEL`` so caller text
    never becomes a metric label or statistics key.
    """
    ecosystem = parse_ecosystem_type(value)
    return ecosystem.value if ecosystem is not None else UNKNOWN_ECOSYSTEM_LABEL


# ===================================================================
# CarbonAccountingService facade
# ===================================================================


class CarbonAccountingService:
    """Unified facade over the Carbon Accounting SDK.

    Wraps the pure estimation and validation functions with an in-memory
    record store, running statistics, SHA-256 provenance and Prometheus
    metrics. Store and statistics updates are guarded by a lock so the
    facade can be shared across request threads.

    Attributes:
        config: CarbonAccountingConfig instance.
        provenance: ProvenanceTracker for SHA-256 audit trails.

    Example:
        >>> service = CarbonAccountingService()
        >>> estimate = service.estimate_plot_carbon(
        ...     [TreeMeasurement(dbh=25.0, height=12.0)],
        ... )
        >>> print(estimate.tree_count, estimate.total_co2_kg)
    """

    def __init__(
        self,
        config: Optional[CarbonAccountingConfig] = None,
    ) -> None:
        """Initialize the Carbon Accounting Service facade.

        Args:
            config: Optional configuration. Uses global config if None.

        Raises:
            ConfigurationError: If the configuration is unusable.
        """
        self.config = config or get_config()
        self._check_config(self.config)

        self.provenance = ProvenanceTracker()

        # In-memory stores
        self._records: Dict[str, ValidatedRecord] = {}
        self._lock = threading.Lock()

        # Statistics
        self._stats = CarbonAccountingStatistics()
        self._started = False

        logger.info("CarbonAccountingService facade created")

    @staticmethod
    def _check_config(config: CarbonAccountingConfig) -> None:
        if config.batch_max_size <= 0:
            raise ConfigurationError(
                message="batch_max_size must be positive",
                context={"batch_max_size": config.batch_max_size},
            )
        if config.export_max_records <= 0:
            raise ConfigurationError(
                message="export_max_records must be positive",
                context={"export_max_records": config.export_max_records},
            )
        if config.sequestration_rate_t_co2_per_ha_year < 0:
            raise ConfigurationError(
                message="sequestration_rate_t_co2_per_ha_year must not be negative",
                context={
                    "sequestration_rate_t_co2_per_ha_year":
                        config.sequestration_rate_t_co2_per_ha_year,
                },
            )
        if not isinstance(logging.getLevelName(config.log_level.upper()), int):
            raise ConfigurationError(
                message=f"Unknown log level: {config.log_level}",
                context={"log_level": config.log_level},
            )

    # ------------------------------------------------------------------
    # Carbon estimation
    # ------------------------------------------------------------------

    def estimate_tree(self, measurement: TreeMeasurement) -> TreeCarbonEstimate:
        """Estimate biomass and CO2-equivalent for a single tree.

        Args:
            measurement: Tree measurement with dbh (cm) and height (m).

        Returns:
            TreeCarbonEstimate for the tree.
        """
        biomass = calculate_tree_biomass(measurement.dbh, measurement.height)
        co2 = calculate_carbon_from_biomass(biomass)
        basal_area = (
            measurement.basal_area
            if measurement.basal_area is not None
            else calculate_basal_area(measurement.dbh)
        )

        estimate = TreeCarbonEstimate(
            species=measurement.species,
            dbh=measurement.dbh,
            height=measurement.height,
            basal_area_cm2=basal_area,
            biomass_kg=biomass,
            co2_kg=co2,
        )

        if self.config.enable_provenance:
            estimate.provenance_hash = self.provenance.build_hash(
                estimate.model_dump(mode="json"),
            )
            self.provenance.record(
                entity_type="tree_estimate",
                entity_id=estimate.estimate_id,
                action="estimate",
                data_hash=estimate.provenance_hash,
            )

        with self._lock:
            self._stats.total_estimates += 1

        if self.config.enable_metrics:
            record_carbon_estimate("tree", co2)

        return estimate

    def estimate_plot_carbon(
        self,
        measurements: Iterable[TreeMeasurement],
        polygon: Optional[Sequence[Coordinate]] = None,
    ) -> PlotCarbonEstimate:
        """Estimate plot-level carbon from tree measurements.

        The plot area comes from the boundary polygon when one is given and
        drives the annual sequestration projection; without a polygon both
        are zero.

        Args:
            measurements: Tree measurements in the plot.
            polygon: Optional plot boundary vertices.

        Returns:
            PlotCarbonEstimate with totals, area and provenance hash.
        """
        start_time = time.time()
        trees = list(measurements)

        total_biomass = 0.0
        for tree in trees:
            total_biomass += calculate_tree_biomass(tree.dbh, tree.height)
        total_co2 = calculate_total_carbon(trees)

        area_m2 = calculate_polygon_area(polygon) if polygon else 0.0
        area_ha = square_meters_to_hectares(area_m2)
        annual = estimate_annual_sequestration(
            area_ha, rate=self.config.sequestration_rate_t_co2_per_ha_year,
        )

        estimate = PlotCarbonEstimate(
            tree_count=len(trees),
            total_biomass_kg=total_biomass,
            total_co2_kg=total_co2,
            total_co2_tonnes=total_co2 / 1000.0,
            area_m2=area_m2,
            area_hectares=area_ha,
            annual_sequestration_t_co2=annual,
            processing_time_ms=round((time.time() - start_time) * 1000.0, 3),
        )

        if self.config.enable_provenance:
            estimate.provenance_hash = self.provenance.build_hash(
                estimate.model_dump(mode="json"),
            )
            self.provenance.record(
                entity_type="plot_estimate",
                entity_id=estimate.estimate_id,
                action="estimate",
                data_hash=estimate.provenance_hash,
            )

        with self._lock:
            self._stats.total_estimates += 1

        if self.config.enable_metrics:
            record_carbon_estimate("plot", total_co2)
            observe_duration("estimate_plot", time.time() - start_time)

        logger.info(
            "Estimated plot %s: %d trees, %.2f kg CO2e, %.4f ha",
            estimate.estimate_id, len(trees), total_co2, area_ha,
        )
        return estimate

    # ------------------------------------------------------------------
    # Record validation
    # ------------------------------------------------------------------

    def _parse_record(self, payload: Any) -> EcosystemRecord:
        """Parse a raw payload into an EcosystemRecord.

        Raises:
            InvalidRecordError: If the payload is not a valid record.
        """
        if not isinstance(payload, Mapping):
            raise InvalidRecordError(
                message=(
                    "Record payload must be an object, got "
                    f"{type(payload).__name__}"
                ),
            )
        try:
            return EcosystemRecord.model_validate(payload)
        except ValidationError as exc:
            schema_errors = [
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
                for err in exc.errors()
            ]
            raise InvalidRecordError(
                message=(
                    f"Invalid ecosystem record: {len(schema_errors)} "
                    "schema error(s)"
                ),
                schema_errors=schema_errors,
                cause=exc,
            ) from exc

    def validate_record(
        self,
        record: Union[EcosystemRecord, Mapping[str, Any]],
    ) -> ValidatedRecord:
        """Validate an ecosystem record and store the verdict.

        Args:
            record: An EcosystemRecord or a raw dict to parse into one.

        Returns:
            ValidatedRecord with the validation verdict.

        Raises:
            InvalidRecordError: If a raw payload cannot be parsed.
        """
        start_time = time.time()

        if not isinstance(record, EcosystemRecord):
            try:
                record = self._parse_record(record)
            except InvalidRecordError:
                with self._lock:
                    self._stats.failed_records += 1
                if self.config.enable_metrics:
                    record_processing_error("parse_error")
                raise

        validation = validate_ecosystem_data(record)
        status = (
            ValidationStatus.VALID if validation.is_valid
            else ValidationStatus.INVALID
        )
        elapsed_ms = (time.time() - start_time) * 1000.0

        validated = ValidatedRecord(
            record=record,
            validation=validation,
            validation_status=status,
            processing_time_ms=round(elapsed_ms, 3),
        )

        if self.config.enable_provenance:
            validated.provenance_hash = self.provenance.build_hash(
                validated.model_dump(mode="json"),
            )
            self.provenance.record(
                entity_type="ecosystem_record",
                entity_id=record.record_id,
                action="validate",
                data_hash=validated.provenance_hash,
            )

        ecosystem = _ecosystem_label(record.ecosystem_type)
        with self._lock:
            self._records[record.record_id] = validated
            self._update_stats(ecosystem, status, elapsed_ms)
            stored = len(self._records)

        if self.config.enable_metrics:
            record_validation(ecosystem, status.value)
            record_validation_issues(
                len(validation.errors), len(validation.warnings),
            )
            observe_duration("validate", time.time() - start_time)
            set_records_stored(stored)

        logger.info(
            "Validated record %s (%s): %s, %d errors, %d warnings",
            record.record_id, record.ecosystem_type, status.value,
            len(validation.errors), len(validation.warnings),
        )
        return validated

    def validate_batch(
        self,
        records: Sequence[Union[EcosystemRecord, Mapping[str, Any]]],
    ) -> Dict[str, Any]:
        """Validate a batch of records, isolating per-record failures.

        Args:
            records: EcosystemRecords or raw dicts.

        Returns:
            Dict with ``total``, ``valid``, ``invalid``, ``failed``,
            ``results`` (ValidatedRecords in input order), ``errors``
            (one entry per record that could not be validated) and
            ``duration_seconds``.

        Raises:
            ValueError: If the batch exceeds ``batch_max_size``.
        """
        if len(records) > self.config.batch_max_size:
            raise ValueError(
                f"Batch of {len(records)} records exceeds maximum "
                f"of {self.config.batch_max_size}"
            )

        start_time = time.time()
        results: List[ValidatedRecord] = []
        errors: List[Dict[str, Any]] = []
        valid = invalid = 0

        for index, item in enumerate(records):
            try:
                validated = self.validate_record(item)
            except BlueCarbonException as exc:
                logger.warning("Batch record %d skipped: %s", index, exc)
                errors.append({"index": index, **exc.to_dict()})
                continue
            results.append(validated)
            if validated.validation_status is ValidationStatus.VALID:
                valid += 1
            else:
                invalid += 1

        duration = time.time() - start_time
        if self.config.enable_metrics:
            observe_duration("validate_batch", duration)

        logger.info(
            "Validated batch: %d records, %d valid, %d invalid, %d failed "
            "in %.3fs",
            len(records), valid, invalid, len(errors), duration,
        )
        return {
            "total": len(records),
            "valid": valid,
            "invalid": invalid,
            "failed": len(errors),
            "results": results,
            "errors": errors,
            "duration_seconds": round(duration, 6),
        }

    def classify_gps_accuracy(self, accuracy: float) -> GPSAccuracyResult:
        """Classify a GPS fix and count it by level.

        Args:
            accuracy: Reported horizontal accuracy (m).

        Returns:
            GPSAccuracyResult.
        """
        result = classify_gps_accuracy(accuracy)
        if self.config.enable_metrics:
            record_gps_classification(result.level.value)
        return result

    # ------------------------------------------------------------------
    # Record access
    # ------------------------------------------------------------------

    def get_record(self, record_id: str) -> Optional[ValidatedRecord]:
        """Get a validated record by ID, or None if not found."""
        with self._lock:
            return self._records.get(record_id)

    def list_records(
        self,
        ecosystem_type: Optional[str] = None,
        status: Optional[Union[ValidationStatus, str]] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[ValidatedRecord]:
        """List validated records in validation order.

        Args:
            ecosystem_type: Only records of this ecosystem (any spelling).
            status: Only records with this validation status.
            limit: Maximum number of records to return.
            offset: Number of matching records to skip.

        Returns:
            List of ValidatedRecord instances.

        Raises:
            ValueError: If ``status`` is not a known validation status.
        """
        wanted_status = ValidationStatus(status) if status is not None else None
        wanted_ecosystem = (
            _ecosystem_key(ecosystem_type) if ecosystem_type is not None
            else None
        )

        with self._lock:
            records = list(self._records.values())

        if wanted_ecosystem is not None:
            records = [
                r for r in records
                if _ecosystem_key(r.record.ecosystem_type) == wanted_ecosystem
            ]
        if wanted_status is not None:
            records = [
                r for r in records if r.validation_status is wanted_status
            ]
        return records[offset:offset + limit]

    def export_csv(self, record_ids: Optional[Sequence[str]] = None) -> str:
        """Export validated records as CSV.

        Args:
            record_ids: Records to export, in order; all records if None.
                Unknown IDs are skipped.

        Returns:
            CSV text, capped at ``export_max_records`` rows.
        """
        start_time = time.time()
        with self._lock:
            if record_ids is None:
                records = list(self._records.values())
            else:
                records = [
                    self._records[rid] for rid in record_ids
                    if rid in self._records
                ]

        limit = self.config.export_max_records
        if len(records) > limit:
            logger.warning(
                "CSV export truncated from %d to %d records",
                len(records), limit,
            )
            records = records[:limit]

        content = export_validation_results(records)

        if self.config.enable_metrics:
            observe_duration("export", time.time() - start_time)
        logger.info("Exported %d records to CSV", len(records))
        return content

    # ------------------------------------------------------------------
    # Statistics and health
    # ------------------------------------------------------------------

    def _update_stats(
        self,
        ecosystem: str,
        status: ValidationStatus,
        elapsed_ms: float,
    ) -> None:
        """Fold one validation into the running statistics (lock held)."""
        stats = self._stats
        stats.total_validations += 1
        if status is ValidationStatus.VALID:
            stats.valid_records += 1
        else:
            stats.invalid_records += 1

        total = stats.total_validations
        stats.avg_validation_time_ms = (
            (stats.avg_validation_time_ms * (total - 1) + elapsed_ms) / total
        )
        stats.last_validation = _utcnow()

        counters = stats.by_ecosystem.setdefault(
            ecosystem, {"valid": 0, "invalid": 0},
        )
        counters[status.value] += 1

    def get_statistics(self) -> CarbonAccountingStatistics:
        """Get a snapshot of the running statistics."""
        with self._lock:
            return self._stats.model_copy(deep=True)

    def health_check(self) -> Dict[str, Any]:
        """Perform a health check on the service.

        Returns:
            Health status dict.
        """
        with self._lock:
            records = len(self._records)
        return {
            "status": "healthy" if self._started else "not_started",
            "service": "carbon-accounting",
            "started": self._started,
            "records": records,
            "provenance_entries": self.provenance.entry_count,
            "provenance_chain_valid": self.provenance.verify_global_chain(),
        }

    def get_provenance(self) -> ProvenanceTracker:
        """Get the ProvenanceTracker instance."""
        return self.provenance

    def get_metrics(self) -> Dict[str, Any]:
        """Get a summary of service counters.

        Returns:
            Dictionary with service metric summaries.
        """
        stats = self.get_statistics()
        return {
            "metrics_enabled": self.config.enable_metrics,
            "started": self._started,
            "total_validations": stats.total_validations,
            "valid_records": stats.valid_records,
            "invalid_records": stats.invalid_records,
            "failed_records": stats.failed_records,
            "total_estimates": stats.total_estimates,
            "avg_validation_time_ms": stats.avg_validation_time_ms,
            "provenance_entries": self.provenance.entry_count,
        }

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def startup(self) -> None:
        """Start the carbon accounting service.

        Applies ``config.log_level`` to the ``bluecarbon`` logger. Safe to
        call multiple times.
        """
        if self._started:
            logger.debug("CarbonAccountingService already started; skipping")
            return

        logging.getLogger("bluecarbon").setLevel(self.config.log_level.upper())
        self._started = True
        logger.info("CarbonAccountingService startup complete")

    def shutdown(self) -> None:
        """Shut down the carbon accounting service."""
        if not self._started:
            return

        self._started = False
        logger.info("CarbonAccountingService shut down")


# ===================================================================
# Thread-safe singleton access
# ===================================================================


def get_service() -> CarbonAccountingService:
    """Get or create the singleton CarbonAccountingService instance."""
    global _singleton_instance
    if _singleton_instance is None:
        with _singleton_lock:
            if _singleton_instance is None:
                _singleton_instance = CarbonAccountingService()
    return _singleton_instance


def reset_service() -> None:
    """Drop the singleton (primarily for test teardown)."""
    global _singleton_instance
    with _singleton_lock:
        _singleton_instance = None


# ===================================================================
# FastAPI integration
# ===================================================================


async def configure_carbon_accounting(
    app: Any,
    config: Optional[CarbonAccountingConfig] = None,
) -> CarbonAccountingService:
    """Configure the Carbon Accounting Service on a FastAPI application.

    Creates the CarbonAccountingService, stores it in app.state, mounts
    the carbon accounting API router, and starts the service.

    Args:
        app: FastAPI application instance.
        config: Optional carbon accounting config.

    Returns:
        CarbonAccountingService instance.
    """
    global _singleton_instance

    service = CarbonAccountingService(config=config)

    with _singleton_lock:
        _singleton_instance = service

    app.state.carbon_accounting_service = service
    app.include_router(get_router())
    logger.info("Carbon accounting API router mounted")

    service.startup()

    logger.info("Carbon accounting service configured on app")
    return service


def get_carbon_accounting(app: Any) -> CarbonAccountingService:
    """Get the CarbonAccountingService instance from app state.

    Args:
        app: FastAPI application instance.

    Returns:
        CarbonAccountingService instance.

    Raises:
        RuntimeError: If the carbon accounting service is not configured.
    """
    service = getattr(app.state, "carbon_accounting_service", None)
    if service is None:
        raise RuntimeError(
            "Carbon accounting service not configured. "
            "Call configure_carbon_accounting(app) first."
        )
    return service


def get_router() -> Any:
    """Get the carbon accounting API router.

    Returns:
        FastAPI APIRouter mounted at ``/api/v1/carbon-accounting``.
    """
    from bluecarbon.carbon_accounting.api.router import router
    return router


__all__ = [
    "CarbonAccountingService",
    "configure_carbon_accounting",
    "get_carbon_accounting",
    "get_service",
    "reset_service",
    "get_router",
]
