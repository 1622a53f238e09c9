# -*- coding: utf-8 -*-
"""
Field Data Validators - BC-MRV-001: Carbon Accounting

Deterministic quality checks for uploaded blue-carbon field data:

- GPS fix accuracy tiers (excellent / good / fair / poor)
- Coordinate range and known-zone containment
- Carbon pool sign and ecosystem range checks
- Species binomial format and reference-list membership
- Aggregate ecosystem record validation

Validators never raise for malformed business data. Violations accumulate
as ``errors`` (blocking) and ``warnings`` (advisory) in the returned
result; ``is_valid`` is True exactly when ``errors`` is empty. Every
function is pure: identical input yields identical output.

Example:
    >>> from bluecarbon.carbon_accounting.validators import validate_coordinates
    >>> result = validate_coordinates(22.26, 88.94, "mangrove")
    >>> result.confidence.value, result.matched_zone.name
    ('high', 'Sundarbans')
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional

from bluecarbon.carbon_accounting.constants import (
    GPS_EXCELLENT_MAX_M,
    GPS_FAIR_MAX_M,
    GPS_GOOD_MAX_M,
)
from bluecarbon.carbon_accounting.models import (
    CarbonPools,
    CarbonStockRange,
    CarbonStockValidationResult,
    CoordinateValidationResult,
    EcosystemRecord,
    EcosystemValidationDetails,
    EcosystemValidationResult,
    GPSAccuracyLevel,
    GPSAccuracyResult,
    SpeciesValidationResult,
    ValidationConfidence,
    parse_ecosystem_type,
)
from bluecarbon.carbon_accounting.reference_data import (
    find_zone,
    get_carbon_stock_range,
    get_known_species,
    is_binomial_name,
)
from bluecarbon.exceptions import UnknownEcosystemError

logger = logging.getLogger(__name__)


def _ecosystem_label(ecosystem_type: Any) -> str:
    """Canonical key for known ecosystems, the caller's text otherwise."""
    ecosystem = parse_ecosystem_type(ecosystem_type)
    if ecosystem is not None:
        return ecosystem.value
    return str(ecosystem_type)


# =============================================================================
# GPS accuracy
# =============================================================================


def classify_gps_accuracy(accuracy: float) -> GPSAccuracyResult:
    """Classify a GPS fix by its reported accuracy radius.

    Tiers (inclusive upper bounds): <= 3 m excellent, <= 5 m good,
    <= 10 m fair; anything else is poor and invalid.

    Args:
        accuracy: Reported horizontal accuracy (m).

    Returns:
        GPSAccuracyResult with validity, level and a user-facing message.
    """
    if accuracy <= GPS_EXCELLENT_MAX_M:
        return GPSAccuracyResult(
            is_valid=True,
            level=GPSAccuracyLevel.EXCELLENT,
            message="Excellent GPS accuracy",
        )
    if accuracy <= GPS_GOOD_MAX_M:
        return GPSAccuracyResult(
            is_valid=True,
            level=GPSAccuracyLevel.GOOD,
            message="Good GPS accuracy",
        )
    if accuracy <= GPS_FAIR_MAX_M:
        return GPSAccuracyResult(
            is_valid=True,
            level=GPSAccuracyLevel.FAIR,
            message="Fair GPS accuracy - consider retaking",
        )
    return GPSAccuracyResult(
        is_valid=False,
        level=GPSAccuracyLevel.POOR,
        message="Poor GPS accuracy - please move to open area",
    )


# =============================================================================
# Coordinates
# =============================================================================


def validate_coordinates(
    latitude: float,
    longitude: float,
    ecosystem_type: Any,
) -> CoordinateValidationResult:
    """Validate a plot coordinate against WGS84 ranges and known zones.

    Args:
        latitude: Latitude in decimal degrees.
        longitude: Longitude in decimal degrees.
        ecosystem_type: Declared ecosystem (EcosystemType or string key).

    Returns:
        CoordinateValidationResult. Confidence is ``high`` when the point
        falls inside a known zone of the ecosystem, ``medium`` otherwise.
    """
    errors: List[str] = []
    warnings: List[str] = []

    if not -90.0 <= latitude <= 90.0:
        errors.append("Invalid latitude: must be between -90 and 90")
    if not -180.0 <= longitude <= 180.0:
        errors.append("Invalid longitude: must be between -180 and 180")

    matched_zone = find_zone(latitude, longitude, ecosystem_type)
    if matched_zone is None:
        warnings.append(
            f"Coordinates do not fall within known "
            f"{_ecosystem_label(ecosystem_type)} zones"
        )

    logger.debug(
        "Coordinate check (%.6f, %.6f) %s: zone=%s errors=%d",
        latitude, longitude, ecosystem_type,
        matched_zone.name if matched_zone else None, len(errors),
    )
    return CoordinateValidationResult(
        errors=errors,
        warnings=warnings,
        matched_zone=matched_zone,
        confidence=(
            ValidationConfidence.HIGH if matched_zone
            else ValidationConfidence.MEDIUM
        ),
    )


# =============================================================================
# Carbon stocks
# =============================================================================


def validate_carbon_stocks(
    carbon_pools: CarbonPools,
    ecosystem_type: Any,
) -> CarbonStockValidationResult:
    """Validate carbon pools against sign rules and the ecosystem range.

    Each negative pool is an error. An unrecognised ecosystem is an error
    and skips the range check; the pool checks still run. A total outside
    the ecosystem's expected range is a warning.

    Args:
        carbon_pools: AGB, BGB and SOC stocks (tC/ha).
        ecosystem_type: Declared ecosystem (EcosystemType or string key).

    Returns:
        CarbonStockValidationResult with the total and the expected range.
    """
    errors: List[str] = []
    warnings: List[str] = []
    total = carbon_pools.total

    expected_range: Optional[CarbonStockRange] = None
    try:
        expected_range = get_carbon_stock_range(ecosystem_type)
    except UnknownEcosystemError as exc:
        logger.warning("Carbon stock range lookup failed: %s", exc)
        errors.append(exc.message)

    if expected_range is not None:
        unit = expected_range.unit
        bounds = (
            f"({expected_range.min_value:g}-{expected_range.max_value:g} {unit})"
        )
        if total < expected_range.min_value:
            warnings.append(
                f"Total carbon stock ({total:.1f} {unit}) is below "
                f"typical range {bounds}"
            )
        elif total > expected_range.max_value:
            warnings.append(
                f"Total carbon stock ({total:.1f} {unit}) is above "
                f"typical range {bounds}"
            )

    if carbon_pools.above_ground_biomass < 0:
        errors.append("Above-ground biomass cannot be negative")
    if carbon_pools.below_ground_biomass < 0:
        errors.append("Below-ground biomass cannot be negative")
    if carbon_pools.soil_organic_carbon < 0:
        errors.append("Soil organic carbon cannot be negative")

    return CarbonStockValidationResult(
        errors=errors,
        warnings=warnings,
        total_carbon=total,
        expected_range=expected_range,
    )


# =============================================================================
# Species
# =============================================================================


def validate_species(
    scientific_name: str,
    ecosystem_type: Any,
) -> SpeciesValidationResult:
    """Validate a species name's format and reference-list membership.

    Args:
        scientific_name: Name as recorded, expected as ``Genus species``.
        ecosystem_type: Declared ecosystem (EcosystemType or string key).

    Returns:
        SpeciesValidationResult. Format mismatch is an error; absence from
        the ecosystem's reference list is a warning.
    """
    errors: List[str] = []
    warnings: List[str] = []

    is_known = scientific_name in get_known_species(ecosystem_type)
    if not is_known:
        warnings.append(
            f'Species "{scientific_name}" not found in known '
            f"{_ecosystem_label(ecosystem_type)} species database"
        )

    if not is_binomial_name(scientific_name):
        errors.append(
            "Invalid scientific name format (should be 'Genus species')"
        )

    return SpeciesValidationResult(
        errors=errors,
        warnings=warnings,
        is_known_species=is_known,
    )


# =============================================================================
# Aggregate
# =============================================================================


def validate_ecosystem_data(record: EcosystemRecord) -> EcosystemValidationResult:
    """Run every applicable check on an uploaded ecosystem record.

    Coordinate and carbon-stock checks always run; the species check runs
    when the record names a species. Errors and warnings are concatenated
    in that order.

    Args:
        record: The ecosystem record to validate.

    Returns:
        EcosystemValidationResult with per-check details.
    """
    coordinates = validate_coordinates(
        record.location.latitude,
        record.location.longitude,
        record.ecosystem_type,
    )
    carbon_stocks = validate_carbon_stocks(
        record.carbon_pools, record.ecosystem_type,
    )
    species: Optional[SpeciesValidationResult] = None
    if record.species:
        species = validate_species(record.species, record.ecosystem_type)

    errors: List[str] = [*coordinates.errors, *carbon_stocks.errors]
    warnings: List[str] = [*coordinates.warnings, *carbon_stocks.warnings]
    if species is not None:
        errors.extend(species.errors)
        warnings.extend(species.warnings)

    return EcosystemValidationResult(
        errors=errors,
        warnings=warnings,
        details=EcosystemValidationDetails(
            coordinates=coordinates,
            carbon_stocks=carbon_stocks,
            species=species,
        ),
    )


__all__ = [
    "classify_gps_accuracy",
    "validate_coordinates",
    "validate_carbon_stocks",
    "validate_species",
    "validate_ecosystem_data",
]
