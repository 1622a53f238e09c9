# -*- coding: utf-8 -*-
"""
BC-MRV-001: BlueCarbon Carbon Accounting SDK
============================================

Carbon estimation and field data validation for blue-carbon MRV
(Measurement, Reporting and Verification). It supports:

- Haversine distance and Shoelace plot area from GPS coordinates
- Mangrove allometric biomass and CO2-equivalent per tree and per plot
- Annual sequestration projection from plot area
- GPS accuracy classification (excellent, good, fair, poor)
- Coordinate, carbon-stock and species validation against reference data
  for mangrove, seagrass and salt-marsh ecosystems
- Human-readable area, carbon and distance formatting
- CSV export of validated records
- SHA-256 provenance chain tracking
- 8 Prometheus metrics
- FastAPI REST API with 10 endpoints
- Thread-safe configuration with BC_CARBON_ACCOUNTING_ env prefix

Key Components:
    - geometry: distance and polygon area
    - biomass: allometric biomass and carbon conversion
    - validators: GPS, coordinate, carbon-stock, species and record checks
    - formatting: unit conversion and display strings
    - reference_data: ecosystem zones, species lists, carbon-stock ranges
    - export: CSV export
    - config: CarbonAccountingConfig
    - provenance: SHA-256 chain-hashed audit trail
    - metrics: Prometheus metrics
    - api: FastAPI HTTP service
    - setup: CarbonAccountingService facade

Example:
    >>> from bluecarbon.carbon_accounting import (
    ...     TreeMeasurement, calculate_total_carbon,
    ... )
    >>> trees = [TreeMeasurement(dbh=25.0, height=12.0)]
    >>> round(calculate_total_carbon(trees), 2) > 0
    True
"""

__version__ = "1.0.0"

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------
from bluecarbon.carbon_accounting.config import (
    CarbonAccountingConfig,
    get_config,
    set_config,
    reset_config,
)

# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------
from bluecarbon.carbon_accounting.models import (
    CarbonAccountingStatistics,
    CarbonPools,
    CarbonStockRange,
    CarbonStockValidationResult,
    Coordinate,
    CoordinateValidationResult,
    EcosystemRecord,
    EcosystemType,
    EcosystemValidationResult,
    EcosystemZone,
    GeoBounds,
    GPSAccuracyLevel,
    GPSAccuracyResult,
    Location,
    PlotCarbonEstimate,
    SpeciesValidationResult,
    TreeCarbonEstimate,
    TreeMeasurement,
    UnitType,
    ValidatedRecord,
    ValidationConfidence,
    ValidationResult,
    ValidationStatus,
)

# ---------------------------------------------------------------------------
# Core functions
# ---------------------------------------------------------------------------
from bluecarbon.carbon_accounting.geometry import (
    calculate_distance,
    calculate_polygon_area,
)
from bluecarbon.carbon_accounting.biomass import (
    calculate_basal_area,
    calculate_carbon_from_biomass,
    calculate_total_carbon,
    calculate_tree_biomass,
    estimate_annual_sequestration,
)
from bluecarbon.carbon_accounting.validators import (
    classify_gps_accuracy,
    validate_carbon_stocks,
    validate_coordinates,
    validate_ecosystem_data,
    validate_species,
)
from bluecarbon.carbon_accounting.formatting import (
    format_number,
    square_meters_to_hectares,
)
from bluecarbon.carbon_accounting.export import export_validation_results

# ---------------------------------------------------------------------------
# Provenance and service
# ---------------------------------------------------------------------------
from bluecarbon.carbon_accounting.provenance import ProvenanceTracker
from bluecarbon.carbon_accounting.setup import (
    CarbonAccountingService,
    configure_carbon_accounting,
    get_carbon_accounting,
    get_router,
)

__all__ = [
    "__version__",
    # Configuration
    "CarbonAccountingConfig",
    "get_config",
    "set_config",
    "reset_config",
    # Models
    "CarbonAccountingStatistics",
    "CarbonPools",
    "CarbonStockRange",
    "CarbonStockValidationResult",
    "Coordinate",
    "CoordinateValidationResult",
    "EcosystemRecord",
    "EcosystemType",
    "EcosystemValidationResult",
    "EcosystemZone",
    "GeoBounds",
    "GPSAccuracyLevel",
    "GPSAccuracyResult",
    "Location",
    "PlotCarbonEstimate",
    "SpeciesValidationResult",
    "TreeCarbonEstimate",
    "TreeMeasurement",
    "UnitType",
    "ValidatedRecord",
    "ValidationConfidence",
    "ValidationResult",
    "ValidationStatus",
    # Core functions
    "calculate_distance",
    "calculate_polygon_area",
    "calculate_basal_area",
    "calculate_carbon_from_biomass",
    "calculate_total_carbon",
    "calculate_tree_biomass",
    "estimate_annual_sequestration",
    "classify_gps_accuracy",
    "validate_carbon_stocks",
    "validate_coordinates",
    "validate_ecosystem_data",
    "validate_species",
    "format_number",
    "square_meters_to_hectares",
    "export_validation_results",
    # Provenance and service
    "ProvenanceTracker",
    "CarbonAccountingService",
    "configure_carbon_accounting",
    "get_carbon_accounting",
    "get_router",
]
