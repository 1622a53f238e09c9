# -*- coding: utf-8 -*-
"""
Display Formatting - BC-MRV-001: Carbon Accounting

Unit conversion and human-readable strings for areas, carbon quantities
and distances shown to field users.

Rules:
    - area:     >= 10 000 m2 -> "x.xx ha",     else "x m²"
    - carbon:   >= 1 000 kg  -> "x.xx t CO₂",  else "x.xx kg CO₂"
    - distance: >= 1 000 m   -> "x.xx km",     else "x m"
    - unknown unit           -> str(value)

All rounding is ROUND_HALF_UP on the exact binary value of the float, so
1.005 (stored just below the tie) renders as "1.00".

Example:
    >>> from bluecarbon.carbon_accounting.formatting import format_number
    >>> format_number(25000, "area")
    '2.50 ha'
    >>> format_number(999.995, "carbon")
    '1000.00 kg CO₂'
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Any

from bluecarbon.carbon_accounting.constants import SQUARE_METERS_PER_HECTARE
from bluecarbon.carbon_accounting.models import UnitType

_AREA_HA_THRESHOLD = 10000.0
_CARBON_TONNE_THRESHOLD = 1000.0
_DISTANCE_KM_THRESHOLD = 1000.0


def _round_half_up(value: float, places: int) -> str:
    """Render ``value`` with ``places`` decimals, rounding half away from zero."""
    if not math.isfinite(value):
        return f"{value:.{places}f}"
    exact = Decimal(value)
    quantum = Decimal(1).scaleb(-places)
    with localcontext() as ctx:
        # Enough digits for the integer part plus the requested places.
        ctx.prec = max(ctx.prec, exact.adjusted() + places + 2)
        return str(exact.quantize(quantum, rounding=ROUND_HALF_UP))


def square_meters_to_hectares(square_meters: float) -> float:
    """Convert square metres to hectares."""
    return square_meters / SQUARE_METERS_PER_HECTARE


def format_number(value: float, unit: Any) -> str:
    """Format a quantity for display in its unit family.

    Args:
        value: Quantity in base units (m2, kg CO2e or m).
        unit: ``UnitType`` member or its string value.

    Returns:
        Display string; ``str(value)`` for an unrecognised unit.
    """
    try:
        unit_type = UnitType(unit)
    except ValueError:
        return str(value)

    if unit_type is UnitType.AREA:
        if value >= _AREA_HA_THRESHOLD:
            hectares = square_meters_to_hectares(value)
            return f"{_round_half_up(hectares, 2)} ha"
        return f"{_round_half_up(value, 0)} m²"

    if unit_type is UnitType.CARBON:
        if value >= _CARBON_TONNE_THRESHOLD:
            return f"{_round_half_up(value / 1000, 2)} t CO₂"
        return f"{_round_half_up(value, 2)} kg CO₂"

    if value >= _DISTANCE_KM_THRESHOLD:
        return f"{_round_half_up(value / 1000, 2)} km"
    return f"{_round_half_up(value, 0)} m"


__all__ = [
    "square_meters_to_hectares",
    "format_number",
]
