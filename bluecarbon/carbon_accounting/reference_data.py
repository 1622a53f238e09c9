# -*- coding: utf-8 -*-
"""
Reference Data - BC-MRV-001: Carbon Accounting

Static lookup tables for blue-carbon validation, built once at import:

- ECOSYSTEM_ZONES: named bounding boxes of known mangrove and seagrass
  regions along the Indian coast
- KNOWN_SPECIES: reference species per ecosystem
- CARBON_STOCK_RANGES: expected total carbon stock (tC/ha) per ecosystem

Zone and species lookups are advisory, so an unknown ecosystem simply has
no entries. The carbon-stock range lookup is mandatory and raises
``UnknownEcosystemError`` for an unknown ecosystem.

Example:
    >>> from bluecarbon.carbon_accounting.reference_data import find_zone
    >>> find_zone(22.26, 88.94, "mangrove").name
    'Sundarbans'
"""

from __future__ import annotations

import re
from types import MappingProxyType
from typing import Any, Mapping, Optional, Tuple

from bluecarbon.carbon_accounting.models import (
    CarbonStockRange,
    EcosystemType,
    EcosystemZone,
    GeoBounds,
    parse_ecosystem_type,
)
from bluecarbon.exceptions import UnknownEcosystemError


#: Binomial nomenclature: capitalised genus, space, lowercase epithet.
SCIENTIFIC_NAME_PATTERN = re.compile(r"[A-Z][a-z]+ [a-z]+")


# =============================================================================
# Ecosystem zones
# =============================================================================

ECOSYSTEM_ZONES: Mapping[EcosystemType, Tuple[EcosystemZone, ...]] = MappingProxyType({
    EcosystemType.MANGROVE: (
        EcosystemZone(
            name="Sundarbans",
            state="West Bengal",
            bounds=GeoBounds(north=22.5, south=21.5, east=89.5, west=88.0),
        ),
        EcosystemZone(
            name="Gulf of Kutch",
            state="Gujarat",
            bounds=GeoBounds(north=24.0, south=20.0, east=72.0, west=68.0),
        ),
        EcosystemZone(
            name="Konkan Coast",
            state="Maharashtra",
            bounds=GeoBounds(north=20.0, south=15.0, east=75.0, west=72.0),
        ),
    ),
    EcosystemType.SEAGRASS: (
        EcosystemZone(
            name="Kerala Backwaters",
            state="Kerala",
            bounds=GeoBounds(north=12.0, south=8.0, east=77.0, west=75.0),
        ),
        EcosystemZone(
            name="Palk Bay",
            state="Tamil Nadu",
            bounds=GeoBounds(north=13.0, south=8.0, east=80.0, west=77.0),
        ),
    ),
    EcosystemType.SALT_MARSH: (),
})


# =============================================================================
# Species reference lists
# =============================================================================

KNOWN_SPECIES: Mapping[EcosystemType, Tuple[str, ...]] = MappingProxyType({
    EcosystemType.MANGROVE: (
        "Rhizophora mucronata",
        "Avicennia marina",
        "Bruguiera gymnorrhiza",
        "Sonneratia alba",
        "Ceriops tagal",
        "Excoecaria agallocha",
    ),
    EcosystemType.SEAGRASS: (
        "Halophila ovalis",
        "Cymodocea serrulata",
        "Thalassia hemprichii",
        "Enhalus acoroides",
        "Syringodium isoetifolium",
    ),
    EcosystemType.SALT_MARSH: (
        "Salicornia brachiata",
        "Suaeda maritima",
        "Aeluropus lagopoides",
        "Sesuvium portulacastrum",
        "Arthrocnemum indicum",
    ),
})


# =============================================================================
# Carbon stock ranges
# =============================================================================

CARBON_STOCK_RANGES: Mapping[EcosystemType, CarbonStockRange] = MappingProxyType({
    EcosystemType.MANGROVE: CarbonStockRange(min_value=50.0, max_value=300.0),
    EcosystemType.SEAGRASS: CarbonStockRange(min_value=20.0, max_value=150.0),
    EcosystemType.SALT_MARSH: CarbonStockRange(min_value=30.0, max_value=200.0),
})


# =============================================================================
# Lookups
# =============================================================================


def get_ecosystem_zones(ecosystem_type: Any) -> Tuple[EcosystemZone, ...]:
    """Return the known zones for an ecosystem (empty if none or unknown)."""
    ecosystem = parse_ecosystem_type(ecosystem_type)
    if ecosystem is None:
        return ()
    return ECOSYSTEM_ZONES.get(ecosystem, ())


def get_known_species(ecosystem_type: Any) -> Tuple[str, ...]:
    """Return the reference species for an ecosystem (empty if unknown)."""
    ecosystem = parse_ecosystem_type(ecosystem_type)
    if ecosystem is None:
        return ()
    return KNOWN_SPECIES.get(ecosystem, ())


def get_carbon_stock_range(ecosystem_type: Any) -> CarbonStockRange:
    """Return the expected carbon stock range for an ecosystem.

    Args:
        ecosystem_type: EcosystemType member or string key.

    Returns:
        CarbonStockRange for the ecosystem.

    Raises:
        UnknownEcosystemError: If the ecosystem has no range entry.
    """
    ecosystem = parse_ecosystem_type(ecosystem_type)
    if ecosystem is None or ecosystem not in CARBON_STOCK_RANGES:
        raise UnknownEcosystemError(
            message=f"Unknown ecosystem type: {ecosystem_type}",
            ecosystem_type=str(ecosystem_type),
            known_types=[e.value for e in CARBON_STOCK_RANGES],
        )
    return CARBON_STOCK_RANGES[ecosystem]


def find_zone(
    latitude: float,
    longitude: float,
    ecosystem_type: Any,
) -> Optional[EcosystemZone]:
    """Return the first zone of the ecosystem containing the point, if any."""
    for zone in get_ecosystem_zones(ecosystem_type):
        if zone.bounds.contains(latitude, longitude):
            return zone
    return None


def is_binomial_name(scientific_name: str) -> bool:
    """Return True if the name has the ``Genus species`` form."""
    return SCIENTIFIC_NAME_PATTERN.fullmatch(scientific_name) is not None


__all__ = [
    "SCIENTIFIC_NAME_PATTERN",
    "ECOSYSTEM_ZONES",
    "KNOWN_SPECIES",
    "CARBON_STOCK_RANGES",
    "get_ecosystem_zones",
    "get_known_species",
    "get_carbon_stock_range",
    "find_zone",
    "is_binomial_name",
]
