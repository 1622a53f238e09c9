# -*- coding: utf-8 -*-
"""Tests for the CarbonAccountingService facade."""

import logging

import pytest

from bluecarbon.carbon_accounting.biomass import (
    calculate_carbon_from_biomass,
    calculate_total_carbon,
    calculate_tree_biomass,
)
from bluecarbon.carbon_accounting.config import CarbonAccountingConfig, set_config
from bluecarbon.carbon_accounting.constants import METERS_PER_DEGREE
from bluecarbon.carbon_accounting.models import (
    Coordinate,
    GPSAccuracyLevel,
    TreeMeasurement,
    ValidationStatus,
)
from bluecarbon.carbon_accounting.setup import (
    CarbonAccountingService,
    get_service,
)
from bluecarbon.exceptions import ConfigurationError, InvalidRecordError


@pytest.fixture
def service(config):
    svc = CarbonAccountingService(config=config)
    svc.startup()
    yield svc
    svc.shutdown()


# ==============================================================================
# Construction
# ==============================================================================

class TestConstruction:

    def test_uses_global_config_by_default(self):
        custom = CarbonAccountingConfig(batch_max_size=3)
        set_config(custom)
        assert CarbonAccountingService().config is custom

    @pytest.mark.parametrize("overrides", [
        {"batch_max_size": 0},
        {"export_max_records": -1},
        {"sequestration_rate_t_co2_per_ha_year": -0.5},
        {"log_level": "CHATTY"},
    ])
    def test_rejects_bad_config(self, overrides):
        with pytest.raises(ConfigurationError):
            CarbonAccountingService(config=CarbonAccountingConfig(**overrides))

    def test_singleton(self):
        assert get_service() is get_service()


# ==============================================================================
# Estimation
# ==============================================================================

class TestEstimation:

    def test_estimate_tree(self, service):
        tree = TreeMeasurement(dbh=25.0, height=12.0, species="Avicennia marina")

        estimate = service.estimate_tree(tree)

        biomass = calculate_tree_biomass(25.0, 12.0)
        assert estimate.species == "Avicennia marina"
        assert estimate.biomass_kg == pytest.approx(biomass)
        assert estimate.co2_kg == pytest.approx(calculate_carbon_from_biomass(biomass))
        assert estimate.basal_area_cm2 == pytest.approx(tree.basal_area)

        valid, chain = service.get_provenance().verify_chain(
            "tree_estimate", estimate.estimate_id,
        )
        assert valid is True
        assert chain[0]["action"] == "estimate"
        assert chain[0]["data_hash"] == estimate.provenance_hash
        assert len(estimate.provenance_hash) == 64

    def test_estimate_plot_without_polygon(self, service, tree_measurements):
        estimate = service.estimate_plot_carbon(tree_measurements)

        total = calculate_total_carbon(tree_measurements)
        assert estimate.tree_count == 3
        assert estimate.total_co2_kg == pytest.approx(total)
        assert estimate.total_co2_tonnes == pytest.approx(total / 1000.0)
        assert estimate.area_m2 == 0.0
        assert estimate.annual_sequestration_t_co2 == 0.0
        assert len(estimate.provenance_hash) == 64

    def test_estimate_plot_with_polygon(self, service, tree_measurements):
        # 0.001 degree square
        polygon = [
            Coordinate(latitude=0.0, longitude=0.0),
            Coordinate(latitude=0.0, longitude=0.001),
            Coordinate(latitude=0.001, longitude=0.001),
            Coordinate(latitude=0.001, longitude=0.0),
        ]
        estimate = service.estimate_plot_carbon(tree_measurements, polygon)

        expected_m2 = (0.001 * METERS_PER_DEGREE) ** 2
        assert estimate.area_m2 == pytest.approx(expected_m2)
        assert estimate.area_hectares == pytest.approx(expected_m2 / 10000.0)
        assert estimate.annual_sequestration_t_co2 == pytest.approx(
            expected_m2 / 10000.0 * 3.14
        )

    def test_estimate_plot_uses_configured_rate(self, tree_measurements):
        service = CarbonAccountingService(
            config=CarbonAccountingConfig(sequestration_rate_t_co2_per_ha_year=10.0),
        )
        polygon = [
            Coordinate(latitude=0.0, longitude=0.0),
            Coordinate(latitude=0.0, longitude=0.01),
            Coordinate(latitude=0.01, longitude=0.0),
        ]
        estimate = service.estimate_plot_carbon(tree_measurements, polygon)
        assert estimate.annual_sequestration_t_co2 == pytest.approx(
            estimate.area_hectares * 10.0
        )

    def test_empty_plot(self, service):
        estimate = service.estimate_plot_carbon([])
        assert estimate.tree_count == 0
        assert estimate.total_co2_kg == 0.0

    def test_estimates_are_counted(self, service, tree_measurements):
        service.estimate_tree(tree_measurements[0])
        service.estimate_plot_carbon(tree_measurements)
        assert service.get_statistics().total_estimates == 2

    def test_plot_estimate_is_recorded_in_provenance(self, service, tree_measurements):
        estimate = service.estimate_plot_carbon(tree_measurements)

        valid, chain = service.get_provenance().verify_chain(
            "plot_estimate", estimate.estimate_id,
        )
        assert valid is True
        assert chain[0]["data_hash"] == estimate.provenance_hash

    def test_estimate_hash_comes_from_tracker(self, service, tree_measurements):
        estimate = service.estimate_plot_carbon(tree_measurements)

        unhashed = estimate.model_copy(update={"provenance_hash": ""})
        assert estimate.provenance_hash == service.get_provenance().build_hash(
            unhashed.model_dump(mode="json"),
        )

    def test_provenance_can_be_disabled(self, tree_measurements):
        service = CarbonAccountingService(
            config=CarbonAccountingConfig(enable_provenance=False),
        )
        service.estimate_tree(tree_measurements[0])
        estimate = service.estimate_plot_carbon(tree_measurements)

        assert estimate.provenance_hash == ""
        assert service.get_provenance().entry_count == 0


# ==============================================================================
# Validation
# ==============================================================================

class TestValidateRecord:

    def test_valid_record(self, service, valid_mangrove_record):
        validated = service.validate_record(valid_mangrove_record)

        assert validated.validation_status == ValidationStatus.VALID
        assert validated.record.record_id == "REC-mangrove-001"
        assert len(validated.provenance_hash) == 64
        assert service.get_record("REC-mangrove-001") is validated

    def test_invalid_record(self, service, invalid_seagrass_record):
        validated = service.validate_record(invalid_seagrass_record)

        assert validated.validation_status == ValidationStatus.INVALID
        assert len(validated.validation.errors) == 2

    def test_dict_payload_is_parsed(self, service, record_payload):
        validated = service.validate_record(record_payload)

        assert validated.record.record_id == "REC-payload-001"
        assert validated.validation_status == ValidationStatus.VALID

    def test_unparseable_payload_raises(self, service, record_payload):
        del record_payload["carbon_pools"]

        with pytest.raises(InvalidRecordError) as exc_info:
            service.validate_record(record_payload)

        assert any("carbon_pools" in e for e in exc_info.value.schema_errors)
        assert service.get_statistics().failed_records == 1

    def test_non_mapping_payload_raises(self, service):
        with pytest.raises(InvalidRecordError):
            service.validate_record(["not", "a", "record"])

    def test_statistics(self, service, valid_mangrove_record, invalid_seagrass_record):
        service.validate_record(valid_mangrove_record)
        service.validate_record(invalid_seagrass_record)

        stats = service.get_statistics()
        assert stats.total_validations == 2
        assert stats.valid_records == 1
        assert stats.invalid_records == 1
        assert stats.by_ecosystem == {
            "mangrove": {"valid": 1, "invalid": 0},
            "seagrass": {"valid": 0, "invalid": 1},
        }
        assert stats.last_validation is not None
        assert stats.avg_validation_time_ms >= 0.0

    def test_statistics_are_a_snapshot(self, service, valid_mangrove_record):
        snapshot = service.get_statistics()
        service.validate_record(valid_mangrove_record)
        assert snapshot.total_validations == 0

    def test_legacy_ecosystem_spelling_is_grouped(self, service, record_payload):
        record_payload["ecosystem_type"] = "saltMarsh"
        service.validate_record(record_payload)
        assert "salt_marsh" in service.get_statistics().by_ecosystem

    def test_unknown_ecosystems_share_one_bucket(self, service, record_payload):
        for index, ecosystem in enumerate(["coral", "kelp forest"]):
            payload = dict(record_payload, record_id=f"REC-unknown-{index}")
            payload["ecosystem_type"] = ecosystem
            service.validate_record(payload)

        by_ecosystem = service.get_statistics().by_ecosystem
        assert by_ecosystem == {"unknown": {"valid": 0, "invalid": 2}}

    def test_unknown_ecosystem_records_still_filter_by_raw_key(
        self, service, record_payload,
    ):
        for index, ecosystem in enumerate(["coral", "kelp forest"]):
            payload = dict(record_payload, record_id=f"REC-unknown-{index}")
            payload["ecosystem_type"] = ecosystem
            service.validate_record(payload)

        records = service.list_records(ecosystem_type="coral")
        assert [r.record.record_id for r in records] == ["REC-unknown-0"]


class TestValidateBatch:

    def test_mixed_batch(self, service, valid_mangrove_record, invalid_seagrass_record,
                         record_payload):
        broken = {"ecosystem_type": "mangrove"}

        result = service.validate_batch([
            valid_mangrove_record, broken, invalid_seagrass_record, record_payload,
        ])

        assert result["total"] == 4
        assert result["valid"] == 2
        assert result["invalid"] == 1
        assert result["failed"] == 1
        assert len(result["results"]) == 3
        assert result["errors"][0]["index"] == 1
        assert result["errors"][0]["error_code"] == "BC_DATA_INVALID_RECORD_ERROR"
        assert result["duration_seconds"] >= 0.0

    def test_batch_too_large(self, record_payload):
        service = CarbonAccountingService(
            config=CarbonAccountingConfig(batch_max_size=2),
        )
        with pytest.raises(ValueError):
            service.validate_batch([record_payload] * 3)


class TestGpsAccuracy:

    def test_pass_through(self, service):
        result = service.classify_gps_accuracy(4.0)
        assert result.level == GPSAccuracyLevel.GOOD


# ==============================================================================
# Record access and export
# ==============================================================================

class TestRecordAccess:

    @pytest.fixture
    def populated(self, service, valid_mangrove_record, invalid_seagrass_record):
        service.validate_record(valid_mangrove_record)
        service.validate_record(invalid_seagrass_record)
        return service

    def test_get_unknown_record(self, service):
        assert service.get_record("REC-missing") is None

    def test_list_all(self, populated):
        ids = [r.record.record_id for r in populated.list_records()]
        assert ids == ["REC-mangrove-001", "REC-seagrass-001"]

    def test_filter_by_ecosystem(self, populated):
        records = populated.list_records(ecosystem_type="seagrass")
        assert [r.record.record_id for r in records] == ["REC-seagrass-001"]

    def test_filter_by_status(self, populated):
        records = populated.list_records(status="valid")
        assert [r.record.record_id for r in records] == ["REC-mangrove-001"]

    def test_unknown_status_raises(self, populated):
        with pytest.raises(ValueError):
            populated.list_records(status="pending")

    def test_pagination(self, populated):
        records = populated.list_records(limit=1, offset=1)
        assert [r.record.record_id for r in records] == ["REC-seagrass-001"]

    def test_export_all(self, populated):
        lines = populated.export_csv().splitlines()
        assert len(lines) == 3

    def test_export_selected_skips_unknown(self, populated):
        lines = populated.export_csv(["REC-seagrass-001", "REC-missing"]).splitlines()
        assert len(lines) == 2
        assert lines[1].startswith('"REC-seagrass-001"')

    def test_export_is_capped(self, valid_mangrove_record, invalid_seagrass_record):
        service = CarbonAccountingService(
            config=CarbonAccountingConfig(export_max_records=1),
        )
        service.validate_record(valid_mangrove_record)
        service.validate_record(invalid_seagrass_record)

        assert len(service.export_csv().splitlines()) == 2


# ==============================================================================
# Lifecycle and health
# ==============================================================================

class TestLifecycle:

    def test_health_before_start(self, config):
        service = CarbonAccountingService(config=config)
        assert service.health_check()["status"] == "not_started"

    def test_health_after_start(self, service, valid_mangrove_record):
        service.validate_record(valid_mangrove_record)

        health = service.health_check()
        assert health["status"] == "healthy"
        assert health["records"] == 1
        assert health["provenance_entries"] == 1
        assert health["provenance_chain_valid"] is True

    def test_startup_applies_log_level(self):
        service = CarbonAccountingService(
            config=CarbonAccountingConfig(log_level="warning"),
        )
        service.startup()
        try:
            assert logging.getLogger("bluecarbon").level == logging.WARNING
        finally:
            service.shutdown()
            logging.getLogger("bluecarbon").setLevel(logging.NOTSET)

    def test_startup_and_shutdown_are_idempotent(self, config):
        service = CarbonAccountingService(config=config)
        service.startup()
        service.startup()
        service.shutdown()
        service.shutdown()
        assert service.health_check()["started"] is False

    def test_get_metrics(self, service, valid_mangrove_record):
        service.validate_record(valid_mangrove_record)

        metrics = service.get_metrics()
        assert metrics["total_validations"] == 1
        assert metrics["metrics_enabled"] is True
