# -*- coding: utf-8 -*-
"""
Biomass and Carbon Estimator - BC-MRV-001: Carbon Accounting

Turns tree measurements into above-ground biomass and CO2-equivalent
estimates with a mangrove-calibrated allometric power law.

KEY FORMULAS IMPLEMENTED:
- Basal area: BA = π * (DBH / 2)^2                        [cm2]
- Biomass:    AGB = a * (DBH_m^2 * H)^b * ρ              [kg]
              a = 0.251, b = 2.46, ρ = 0.6 g/cm3, DBH_m = DBH_cm / 100
- Carbon:     CO2e = AGB * 0.47 * 3.67                    [kg CO2e]
- Sequestration: area_ha * rate                           [t CO2 / year]

The per-tree functions do not validate their inputs: callers guarantee
dbh > 0 and height > 0 (``TreeMeasurement`` enforces this for records).

Example:
    >>> from bluecarbon.carbon_accounting.biomass import (
    ...     calculate_tree_biomass, calculate_carbon_from_biomass,
    ... )
    >>> biomass = calculate_tree_biomass(25.0, 12.0)
    >>> co2 = calculate_carbon_from_biomass(biomass)
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Iterable

from bluecarbon.carbon_accounting.constants import (
    ALLOMETRIC_A,
    ALLOMETRIC_B,
    CARBON_FRACTION,
    CO2_TO_C_RATIO,
    MANGROVE_SEQUESTRATION_RATE,
    WOOD_DENSITY,
)

if TYPE_CHECKING:
    from bluecarbon.carbon_accounting.models import TreeMeasurement


def calculate_basal_area(dbh: float) -> float:
    """Calculate basal area from diameter at breast height.

    Args:
        dbh: Diameter at breast height (cm).

    Returns:
        Basal area (cm2).
    """
    radius = dbh / 2
    return math.pi * radius ** 2


def calculate_tree_biomass(dbh: float, height: float) -> float:
    """Calculate above-ground tree biomass with the mangrove allometric model.

    Args:
        dbh: Diameter at breast height (cm).
        height: Tree height (m).

    Returns:
        Above-ground biomass (kg); ``math.inf`` when the power law
        overflows a float, ``math.nan`` for a negative height.
    """
    dbh_m = dbh / 100
    base = dbh_m * dbh_m * height
    # A negative base has no real power; float ** would return a complex.
    if base < 0:
        return math.nan
    try:
        return ALLOMETRIC_A * base ** ALLOMETRIC_B * WOOD_DENSITY
    except OverflowError:
        return math.inf


def calculate_carbon_from_biomass(biomass: float) -> float:
    """Convert dry biomass to CO2-equivalent.

    Args:
        biomass: Biomass (kg).

    Returns:
        Carbon content (kg CO2e).
    """
    return biomass * CARBON_FRACTION * CO2_TO_C_RATIO


def calculate_total_carbon(measurements: Iterable[TreeMeasurement]) -> float:
    """Sum CO2-equivalent over a set of tree measurements.

    Args:
        measurements: Tree measurements (anything with ``dbh`` and ``height``).

    Returns:
        Total carbon sequestration (kg CO2e); 0.0 for no measurements.
    """
    total = 0.0
    for measurement in measurements:
        biomass = calculate_tree_biomass(measurement.dbh, measurement.height)
        total += calculate_carbon_from_biomass(biomass)
    return total


def estimate_annual_sequestration(
    area_hectares: float,
    rate: float = MANGROVE_SEQUESTRATION_RATE,
) -> float:
    """Project yearly CO2 sequestration for a restored area.

    Args:
        area_hectares: Plot area (ha).
        rate: Sequestration rate (t CO2 / ha / year).

    Returns:
        Annual sequestration (t CO2 / year).
    """
    return area_hectares * rate


__all__ = [
    "calculate_basal_area",
    "calculate_tree_biomass",
    "calculate_carbon_from_biomass",
    "calculate_total_carbon",
    "estimate_annual_sequestration",
]
