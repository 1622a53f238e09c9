# -*- coding: utf-8 -*-
"""Pytest configuration and shared fixtures."""

from typing import Any, Dict

import pytest

from bluecarbon.carbon_accounting.config import (
    CarbonAccountingConfig,
    reset_config,
)
from bluecarbon.carbon_accounting.models import (
    CarbonPools,
    EcosystemRecord,
    Location,
    TreeMeasurement,
)
from bluecarbon.carbon_accounting.setup import reset_service


@pytest.fixture(autouse=True)
def _reset_singletons():
    """Start and end every test with fresh config and service singletons."""
    reset_config()
    reset_service()
    yield
    reset_config()
    reset_service()


@pytest.fixture
def config():
    """Default configuration, independent of the environment."""
    return CarbonAccountingConfig()


@pytest.fixture
def sundarbans_location():
    """A point inside the Sundarbans mangrove zone."""
    return Location(
        latitude=22.0,
        longitude=88.9,
        state="West Bengal",
        district="South 24 Parganas",
    )


@pytest.fixture
def valid_mangrove_record(sundarbans_location):
    """A mangrove record that passes every check without warnings."""
    return EcosystemRecord(
        record_id="REC-mangrove-001",
        ecosystem_type="mangrove",
        location=sundarbans_location,
        carbon_pools=CarbonPools(
            above_ground_biomass=80.0,
            below_ground_biomass=40.0,
            soil_organic_carbon=30.0,
        ),
        species="Rhizophora mucronata",
    )


@pytest.fixture
def invalid_seagrass_record():
    """A seagrass record with a negative pool and a malformed species name."""
    return EcosystemRecord(
        record_id="REC-seagrass-001",
        ecosystem_type="seagrass",
        location=Location(latitude=10.0, longitude=76.0, state="Kerala"),
        carbon_pools=CarbonPools(
            above_ground_biomass=-5.0,
            below_ground_biomass=10.0,
            soil_organic_carbon=40.0,
        ),
        species="halophila Ovalis",
    )


@pytest.fixture
def record_payload() -> Dict[str, Any]:
    """Raw JSON-style payload for a valid mangrove record."""
    return {
        "record_id": "REC-payload-001",
        "ecosystem_type": "mangrove",
        "location": {
            "latitude": 22.26,
            "longitude": 88.94,
            "state": "West Bengal",
            "district": "South 24 Parganas",
        },
        "carbon_pools": {
            "above_ground_biomass": 90.0,
            "below_ground_biomass": 45.0,
            "soil_organic_carbon": 60.0,
        },
        "species": "Avicennia marina",
    }


@pytest.fixture
def tree_measurements():
    """Three mangrove trees from one plot."""
    return [
        TreeMeasurement(dbh=25.0, height=12.0, species="Rhizophora mucronata"),
        TreeMeasurement(dbh=18.5, height=9.0, species="Avicennia marina"),
        TreeMeasurement(dbh=32.0, height=15.5, species="Sonneratia alba"),
    ]
