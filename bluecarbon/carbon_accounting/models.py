# -*- coding: utf-8 -*-
"""
Carbon Accounting Data Models - BC-MRV-001: Carbon Accounting

Pydantic v2 data models for the Carbon Accounting SDK. Defines the
enumerations, field-measurement models, validation result models, service
records and request wrappers used across the package.

Models:
    - Enumerations: EcosystemType, GPSAccuracyLevel, ValidationConfidence,
        ValidationStatus, UnitType
    - Field data: Coordinate, Location, TreeMeasurement, CarbonPools,
        EcosystemRecord
    - Reference data: GeoBounds, EcosystemZone, CarbonStockRange
    - Results: GPSAccuracyResult, ValidationResult,
        CoordinateValidationResult, CarbonStockValidationResult,
        SpeciesValidationResult, EcosystemValidationResult
    - Service records: ValidatedRecord, TreeCarbonEstimate,
        PlotCarbonEstimate, CarbonAccountingStatistics
    - Request models: EstimatePlotRequest, ValidateBatchRequest

Field data models accept physically invalid values where a validator is
expected to report them (e.g. negative carbon pools, out-of-range
coordinates); ``ValidationResult.is_valid`` is always derived from
``errors``.
"""

from __future__ import annotations

import re
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

from bluecarbon.carbon_accounting.biomass import calculate_basal_area
from bluecarbon.carbon_accounting.constants import (
    MAX_TREE_DBH_CM,
    MAX_TREE_HEIGHT_M,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _utcnow() -> datetime:
    """Return current UTC datetime with microseconds zeroed."""
    return datetime.now(timezone.utc).replace(microsecond=0)


def _new_record_id() -> str:
    return f"REC-{uuid.uuid4().hex[:12]}"


# =============================================================================
# Enumerations
# =============================================================================


class EcosystemType(str, Enum):
    """Blue-carbon ecosystem types tracked per plot.

    Lookups also accept the legacy app spellings (``saltMarsh``,
    ``salt-marsh``, ``Salt Marsh``), which resolve to ``SALT_MARSH``.
    """

    MANGROVE = "mangrove"
    SEAGRASS = "seagrass"
    SALT_MARSH = "salt_marsh"

    @classmethod
    def _missing_(cls, value: object) -> Optional["EcosystemType"]:
        if not isinstance(value, str):
            return None
        text = value.strip().replace("-", "_").replace(" ", "_")
        snake = re.sub(r"(?<=[a-z])(?=[A-Z])", "_", text).lower()
        for member in cls:
            if member.value == snake:
                return member
        return None


def parse_ecosystem_type(value: Any) -> Optional[EcosystemType]:
    """Resolve a caller-supplied ecosystem key, or None if unrecognised.

    Args:
        value: EcosystemType member or string key.

    Returns:
        Matching EcosystemType, or None.
    """
    if isinstance(value, EcosystemType):
        return value
    try:
        return EcosystemType(value)
    except ValueError:
        return None


class GPSAccuracyLevel(str, Enum):
    """Four-tier GPS fix quality classification."""

    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


class ValidationConfidence(str, Enum):
    """Confidence that a coordinate belongs to its declared ecosystem."""

    HIGH = "high"
    MEDIUM = "medium"


class ValidationStatus(str, Enum):
    """Outcome of validating an uploaded ecosystem record."""

    VALID = "valid"
    INVALID = "invalid"


class UnitType(str, Enum):
    """Unit families understood by ``format_number``."""

    AREA = "area"
    CARBON = "carbon"
    DISTANCE = "distance"


# =============================================================================
# Field Data Models
# =============================================================================


class Coordinate(BaseModel):
    """A WGS84 point in decimal degrees.

    No range constraint is applied here: ``validate_coordinates`` reports
    out-of-range values and the geometry functions compute on them as given.
    """

    model_config = ConfigDict(frozen=True)

    latitude: float = Field(..., description="Latitude in decimal degrees")
    longitude: float = Field(..., description="Longitude in decimal degrees")


class Location(Coordinate):
    """A plot location with optional administrative labels."""

    state: str = Field(default="", description="State or province")
    district: str = Field(default="", description="District")


class TreeMeasurement(BaseModel):
    """A single tree observation recorded in the field.

    Attributes:
        dbh: Diameter at breast height (cm).
        height: Tree height (m).
        species: Scientific name as recorded by the collector.
        basal_area: Basal area (cm2); derived from ``dbh`` when omitted.
    """

    model_config = ConfigDict(frozen=True)

    dbh: float = Field(
        ..., gt=0.0, le=MAX_TREE_DBH_CM,
        description="Diameter at breast height (cm)",
    )
    height: float = Field(
        ..., gt=0.0, le=MAX_TREE_HEIGHT_M, description="Tree height (m)",
    )
    species: str = Field(default="", description="Scientific name")
    basal_area: Optional[float] = Field(
        default=None, ge=0.0, validate_default=True,
        description="Basal area (cm2)",
    )

    @field_validator("basal_area")
    @classmethod
    def derive_basal_area(
        cls, v: Optional[float], info: Any
    ) -> Optional[float]:
        """Fill ``basal_area`` from the coerced ``dbh`` when not supplied."""
        if v is None and info.data.get("dbh") is not None:
            return calculate_basal_area(info.data["dbh"])
        return v


class CarbonPools(BaseModel):
    """Carbon stocks of one plot, in tonnes of carbon per hectare.

    Negative values are representable so that ``validate_carbon_stocks``
    can report them as errors.
    """

    above_ground_biomass: float = Field(..., description="AGB (tC/ha)")
    below_ground_biomass: float = Field(..., description="BGB (tC/ha)")
    soil_organic_carbon: float = Field(..., description="SOC (tC/ha)")

    @property
    def total(self) -> float:
        """Sum of the three pools (tC/ha)."""
        return (
            self.above_ground_biomass
            + self.below_ground_biomass
            + self.soil_organic_carbon
        )


class EcosystemRecord(BaseModel):
    """One uploaded ecosystem plot record awaiting validation.

    ``ecosystem_type`` is kept as a free string so that unknown ecosystems
    surface as validation errors rather than parse failures.
    """

    record_id: str = Field(default_factory=_new_record_id)
    ecosystem_type: str = Field(..., min_length=1)
    location: Location
    carbon_pools: CarbonPools
    species: Optional[str] = Field(default=None)
    timestamp: datetime = Field(default_factory=_utcnow)

    @field_validator("species")
    @classmethod
    def blank_species_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            return None
        return v


# =============================================================================
# Reference Data Models
# =============================================================================


class GeoBounds(BaseModel):
    """Axis-aligned bounding box in decimal degrees."""

    model_config = ConfigDict(frozen=True)

    north: float
    south: float
    east: float
    west: float

    def contains(self, latitude: float, longitude: float) -> bool:
        """Return True if the point lies inside the box (edges inclusive)."""
        return (
            self.south <= latitude <= self.north
            and self.west <= longitude <= self.east
        )


class EcosystemZone(BaseModel):
    """A named region known to host a blue-carbon ecosystem."""

    model_config = ConfigDict(frozen=True)

    name: str
    state: str
    bounds: GeoBounds


class CarbonStockRange(BaseModel):
    """Expected total carbon stock range for an ecosystem."""

    model_config = ConfigDict(frozen=True)

    min_value: float
    max_value: float
    unit: str = "tC/ha"


# =============================================================================
# Result Models
# =============================================================================


class GPSAccuracyResult(BaseModel):
    """Classification of a GPS fix by its reported accuracy radius."""

    is_valid: bool
    level: GPSAccuracyLevel
    message: str


class ValidationResult(BaseModel):
    """Base validation verdict.

    Errors block acceptance; warnings are advisory. ``is_valid`` is
    recomputed from ``errors`` on construction.
    """

    is_valid: bool = True
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def sync_validity(self) -> "ValidationResult":
        self.is_valid = not self.errors
        return self


class CoordinateValidationResult(ValidationResult):
    """Coordinate verdict with the matched ecosystem zone, if any."""

    matched_zone: Optional[EcosystemZone] = None
    confidence: ValidationConfidence = ValidationConfidence.MEDIUM


class CarbonStockValidationResult(ValidationResult):
    """Carbon-stock verdict with the computed total and expected range."""

    total_carbon: float = 0.0
    expected_range: Optional[CarbonStockRange] = None


class SpeciesValidationResult(ValidationResult):
    """Species verdict; ``is_known_species`` reports reference-list membership."""

    is_known_species: bool = False


class EcosystemValidationDetails(BaseModel):
    """Per-check results behind an aggregate ecosystem verdict."""

    coordinates: CoordinateValidationResult
    carbon_stocks: CarbonStockValidationResult
    species: Optional[SpeciesValidationResult] = None


class EcosystemValidationResult(ValidationResult):
    """Aggregate verdict over coordinate, carbon-stock and species checks."""

    details: EcosystemValidationDetails


# =============================================================================
# Service Records
# =============================================================================


class ValidatedRecord(BaseModel):
    """An ecosystem record together with its validation verdict."""

    record: EcosystemRecord
    validation: EcosystemValidationResult
    validation_status: ValidationStatus
    validated_at: datetime = Field(default_factory=_utcnow)
    processing_time_ms: float = Field(default=0.0, ge=0.0)
    provenance_hash: str = Field(default="")


class TreeCarbonEstimate(BaseModel):
    """Biomass and CO2-equivalent estimate for a single tree."""

    estimate_id: str = Field(
        default_factory=lambda: f"EST-{uuid.uuid4().hex[:12]}",
    )
    species: str = ""
    dbh: float
    height: float
    basal_area_cm2: float
    biomass_kg: float
    co2_kg: float
    provenance_hash: str = Field(default="")


class PlotCarbonEstimate(BaseModel):
    """Plot-level carbon estimate built from tree measurements.

    Attributes:
        estimate_id: Unique estimate identifier.
        tree_count: Number of measured trees.
        total_biomass_kg: Summed above-ground biomass (kg).
        total_co2_kg: Summed CO2-equivalent (kg).
        total_co2_tonnes: Summed CO2-equivalent (t).
        area_m2: Plot area from the boundary polygon (m2), 0 without one.
        area_hectares: Plot area (ha).
        annual_sequestration_t_co2: Projected yearly sequestration (t CO2).
        calculated_at: Timestamp of the calculation.
        processing_time_ms: Processing duration in milliseconds.
        provenance_hash: SHA-256 provenance hash.
    """

    estimate_id: str = Field(
        default_factory=lambda: f"EST-{uuid.uuid4().hex[:12]}",
    )
    tree_count: int = Field(default=0, ge=0)
    total_biomass_kg: float = Field(default=0.0)
    total_co2_kg: float = Field(default=0.0)
    total_co2_tonnes: float = Field(default=0.0)
    area_m2: float = Field(default=0.0, ge=0.0)
    area_hectares: float = Field(default=0.0, ge=0.0)
    annual_sequestration_t_co2: float = Field(default=0.0, ge=0.0)
    calculated_at: datetime = Field(default_factory=_utcnow)
    processing_time_ms: float = Field(default=0.0, ge=0.0)
    provenance_hash: str = Field(default="")


class CarbonAccountingStatistics(BaseModel):
    """Running counters kept by the service facade."""

    total_validations: int = 0
    valid_records: int = 0
    invalid_records: int = 0
    failed_records: int = 0
    total_estimates: int = 0
    avg_validation_time_ms: float = 0.0
    last_validation: Optional[datetime] = None
    by_ecosystem: Dict[str, Dict[str, int]] = Field(default_factory=dict)


# =============================================================================
# Request Models
# =============================================================================


class EstimatePlotRequest(BaseModel):
    """Request body for a plot-level carbon estimate."""

    measurements: List[TreeMeasurement] = Field(default_factory=list)
    polygon: Optional[List[Coordinate]] = Field(default=None)


class ValidateBatchRequest(BaseModel):
    """Request body for batch validation.

    Records stay raw here so that one unparseable record is reported as a
    per-record failure instead of rejecting the whole batch.
    """

    records: List[Dict[str, Any]] = Field(..., min_length=1)


__all__ = [
    # Enumerations
    "EcosystemType",
    "GPSAccuracyLevel",
    "ValidationConfidence",
    "ValidationStatus",
    "UnitType",
    "parse_ecosystem_type",
    # Field data
    "Coordinate",
    "Location",
    "TreeMeasurement",
    "CarbonPools",
    "EcosystemRecord",
    # Reference data
    "GeoBounds",
    "EcosystemZone",
    "CarbonStockRange",
    # Results
    "GPSAccuracyResult",
    "ValidationResult",
    "CoordinateValidationResult",
    "CarbonStockValidationResult",
    "SpeciesValidationResult",
    "EcosystemValidationDetails",
    "EcosystemValidationResult",
    # Service records
    "ValidatedRecord",
    "TreeCarbonEstimate",
    "PlotCarbonEstimate",
    "CarbonAccountingStatistics",
    # Requests
    "EstimatePlotRequest",
    "ValidateBatchRequest",
]
