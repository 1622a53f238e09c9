"""Tests for BlueCarbon Exception Hierarchy.

Test suite covering:
- Base exception functionality
- DataException hierarchy
- Rich error context
- Exception serialization
- Exception utilities
"""

import json
from datetime import datetime

import pytest

from bluecarbon.exceptions import (
    BlueCarbonException,
    ConfigurationError,
    DataException,
    InvalidRecordError,
    UnknownEcosystemError,
    format_exception_chain,
)


# ==============================================================================
# Base Exception Tests
# ==============================================================================

class TestBlueCarbonException:
    """Tests for base BlueCarbonException."""

    def test_create_basic_exception(self):
        """Can create basic exception with message."""
        exc = BlueCarbonException("Something went wrong")

        assert exc.message == "Something went wrong"
        assert exc.error_code == "BC_BLUE_CARBON_EXCEPTION"
        assert exc.context == {}
        assert isinstance(exc.timestamp, datetime)

    def test_explicit_error_code(self):
        exc = BlueCarbonException(
            message="Test error",
            error_code="BC_TEST_001",
            context={"key": "value", "count": 42},
        )

        assert exc.error_code == "BC_TEST_001"
        assert exc.context == {"key": "value", "count": 42}

    def test_exception_str_representation(self):
        """Exception string includes error code and message."""
        exc = BlueCarbonException(message="Test error", error_code="BC_TEST_001")
        assert str(exc) == "[BC_TEST_001] - Test error"

    def test_exception_to_dict(self):
        exc = BlueCarbonException(message="Test error", context={"key": "value"})

        exc_dict = exc.to_dict()

        assert exc_dict["error_type"] == "BlueCarbonException"
        assert exc_dict["message"] == "Test error"
        assert exc_dict["context"] == {"key": "value"}
        assert "timestamp" in exc_dict

    def test_exception_to_json(self):
        exc = BlueCarbonException(message="Test error", context={"key": "value"})

        parsed = json.loads(exc.to_json())

        assert parsed["message"] == "Test error"
        assert parsed["context"]["key"] == "value"

    def test_repr(self):
        exc = ConfigurationError(message="bad")
        assert repr(exc) == (
            "ConfigurationError(message='bad', "
            "error_code='BC_CONFIGURATION_ERROR')"
        )


# ==============================================================================
# Data Exception Tests
# ==============================================================================

class TestDataExceptions:
    """Tests for DataException hierarchy."""

    def test_unknown_ecosystem_error(self):
        exc = UnknownEcosystemError(
            message="Unknown ecosystem type: coral",
            ecosystem_type="coral",
            known_types=["mangrove", "seagrass", "salt_marsh"],
        )

        assert exc.error_code == "BC_DATA_UNKNOWN_ECOSYSTEM_ERROR"
        assert exc.ecosystem_type == "coral"
        assert exc.context["ecosystem_type"] == "coral"
        assert exc.context["known_types"] == ["mangrove", "seagrass", "salt_marsh"]

    def test_invalid_record_error_with_cause(self):
        cause = ValueError("missing field")
        exc = InvalidRecordError(
            message="Record is missing carbon_pools",
            schema_errors=["carbon_pools: Field required"],
            cause=cause,
        )

        assert exc.error_code == "BC_DATA_INVALID_RECORD_ERROR"
        assert exc.schema_errors == ["carbon_pools: Field required"]
        assert exc.context["cause"] == "missing field"
        assert exc.context["cause_type"] == "ValueError"

    def test_invalid_record_error_defaults(self):
        exc = InvalidRecordError(message="bad")
        assert exc.schema_errors == []
        assert exc.context == {}

    def test_inheritance_chain(self):
        exc = InvalidRecordError(message="bad")

        assert isinstance(exc, DataException)
        assert isinstance(exc, BlueCarbonException)
        assert isinstance(exc, Exception)

    def test_caught_as_base_exception(self):
        with pytest.raises(BlueCarbonException):
            raise UnknownEcosystemError(message="Unknown ecosystem type: coral")


# ==============================================================================
# Utility Tests
# ==============================================================================

class TestExceptionUtilities:
    """Tests for exception utility functions."""

    def test_format_exception_chain_single(self):
        exc = ConfigurationError(
            message="batch_max_size must be positive",
            context={"batch_max_size": 0},
        )

        formatted = format_exception_chain(exc)

        assert "BC_CONFIGURATION_ERROR" in formatted
        assert "batch_max_size" in formatted

    def test_format_exception_chain_with_cause(self):
        try:
            try:
                raise KeyError("carbon_pools")
            except KeyError as inner:
                raise InvalidRecordError(message="Record rejected") from inner
        except InvalidRecordError as exc:
            formatted = format_exception_chain(exc)

        lines = formatted.splitlines()
        assert "Record rejected" in lines[0]
        assert lines[-1].startswith("KeyError")
