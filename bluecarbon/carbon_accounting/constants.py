# -*- coding: utf-8 -*-
"""
Carbon Accounting Constants - BC-MRV-001

Fixed numeric coefficients shared by the geometry, biomass and validation
modules. All values are deterministic; none are configurable.

SOURCES:
- Allometric coefficients: mangrove-calibrated power law
  AGB = a * (DBH_m^2 * H)^b * rho
- Carbon fraction of dry biomass: IPCC default 0.47
- CO2 / C molecular weight ratio: 44 / 12 ≈ 3.67
- Mangrove sequestration rate: 3.14 t CO2 / ha / year
"""

# =============================================================================
# Geodesy
# =============================================================================

#: Mean Earth radius used by the Haversine formula (m).
EARTH_RADIUS_M = 6371e3

#: Metres per degree at the equator (equirectangular approximation).
METERS_PER_DEGREE = 111320.0

#: Square metres per hectare.
SQUARE_METERS_PER_HECTARE = 10000.0

# =============================================================================
# Biomass and carbon
# =============================================================================

ALLOMETRIC_A = 0.251
ALLOMETRIC_B = 2.46

#: Mangrove wood density (g/cm3).
WOOD_DENSITY = 0.6

#: Carbon fraction in dry biomass.
CARBON_FRACTION = 0.47

#: Conversion factor from C to CO2.
CO2_TO_C_RATIO = 3.67

#: Mangrove sequestration rate (t CO2 / ha / year).
MANGROVE_SEQUESTRATION_RATE = 3.14

#: Upper bounds accepted for a field tree measurement.
MAX_TREE_DBH_CM = 2000.0
MAX_TREE_HEIGHT_M = 150.0

# =============================================================================
# GPS accuracy tiers (m, inclusive upper bounds)
# =============================================================================

GPS_EXCELLENT_MAX_M = 3.0
GPS_GOOD_MAX_M = 5.0
GPS_FAIR_MAX_M = 10.0


__all__ = [
    "EARTH_RADIUS_M",
    "METERS_PER_DEGREE",
    "SQUARE_METERS_PER_HECTARE",
    "ALLOMETRIC_A",
    "ALLOMETRIC_B",
    "WOOD_DENSITY",
    "CARBON_FRACTION",
    "CO2_TO_C_RATIO",
    "MANGROVE_SEQUESTRATION_RATE",
    "MAX_TREE_DBH_CM",
    "MAX_TREE_HEIGHT_M",
    "GPS_EXCELLENT_MAX_M",
    "GPS_GOOD_MAX_M",
    "GPS_FAIR_MAX_M",
]
