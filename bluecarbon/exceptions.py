"""BlueCarbon Exception Hierarchy.

Exceptions here signal contract failures: a caller passed something the
library cannot work with at all. Malformed field data is *not* an exception;
validators report it inside a ``ValidationResult`` instead.

Exception Hierarchy:
    BlueCarbonException (base)
    ├── ConfigurationError
    └── DataException
        ├── UnknownEcosystemError
        └── InvalidRecordError

All exceptions include rich context:
- error_code: Unique error identifier
- context: Dictionary with error-specific details
- timestamp: When the error occurred

Example:
    >>> from bluecarbon.exceptions import UnknownEcosystemError
    >>> raise UnknownEcosystemError(
    ...     message="Unknown ecosystem type: coral",
    ...     ecosystem_type="coral",
    ...     known_types=["mangrove", "seagrass", "salt_marsh"],
    ... )

Author: BlueCarbon Platform Team
"""

import json
import re
from datetime import datetime
from typing import Any, Dict, List, Optional


# ==============================================================================
# Base Exception
# ==============================================================================

class BlueCarbonException(Exception):
    """Base exception for all BlueCarbon errors.

    Attributes:
        message: Human-readable error message
        error_code: Unique error identifier (e.g., "BC_DATA_UNKNOWN_ECOSYSTEM_ERROR")
        context: Dictionary with error-specific details
        timestamp: When the error occurred
    """

    ERROR_PREFIX = "BC"

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        """Initialize BlueCarbon exception with rich context.

        Args:
            message: Human-readable error message
            error_code: Unique error identifier (auto-generated if not provided)
            context: Dictionary with error-specific details
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self._generate_error_code()
        self.context = context or {}
        self.timestamp = datetime.now()

    def _generate_error_code(self) -> str:
        """Generate error code based on exception class.

        Returns:
            Error code like "BC_DATA_INVALID_RECORD_ERROR"
        """
        class_name = self.__class__.__name__
        # CamelCase -> SCREAMING_SNAKE_CASE
        error_type = re.sub(r'(?<!^)(?=[A-Z])', '_', class_name).upper()
        return f"{self.ERROR_PREFIX}_{error_type}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for serialization.

        Returns:
            Dictionary with all error details
        """
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
        }

    def to_json(self) -> str:
        """Convert exception to JSON string."""
        return json.dumps(self.to_dict(), indent=2, default=str)

    def __str__(self) -> str:
        return f"[{self.error_code}] - {self.message}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message='{self.message}', "
            f"error_code='{self.error_code}')"
        )


class ConfigurationError(BlueCarbonException):
    """Service configuration is invalid.

    Example:
        >>> raise ConfigurationError(
        ...     message="batch_max_size must be positive",
        ...     context={"batch_max_size": 0},
        ... )
    """
    pass


# ==============================================================================
# Data Exceptions
# ==============================================================================

class DataException(BlueCarbonException):
    """Base exception for data-related errors."""
    ERROR_PREFIX = "BC_DATA"


class UnknownEcosystemError(DataException):
    """An ecosystem key has no entry in a mandatory reference table.

    Raised by lookups that cannot produce a meaningful answer without a
    known ecosystem, such as the carbon-stock range table.
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        ecosystem_type: Optional[str] = None,
        known_types: Optional[List[str]] = None,
    ):
        """Initialize unknown ecosystem error.

        Args:
            message: Error message
            context: Error context
            ecosystem_type: The unrecognised ecosystem key
            known_types: Keys the table does recognise
        """
        context = context or {}
        if ecosystem_type is not None:
            context["ecosystem_type"] = ecosystem_type
        if known_types:
            context["known_types"] = known_types
        super().__init__(message, context=context)
        self.ecosystem_type = ecosystem_type


class InvalidRecordError(DataException):
    """A payload could not be parsed into an ecosystem record.

    Example:
        >>> raise InvalidRecordError(
        ...     message="Record is missing carbon_pools",
        ...     schema_errors=["carbon_pools: Field required"],
        ... )
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        schema_errors: Optional[List[str]] = None,
        cause: Optional[Exception] = None,
    ):
        """Initialize invalid record error.

        Args:
            message: Error message
            context: Error context
            schema_errors: Field-level parse errors
            cause: Original exception
        """
        context = context or {}
        if schema_errors:
            context["schema_errors"] = schema_errors
        if cause:
            context["cause"] = str(cause)
            context["cause_type"] = type(cause).__name__
        super().__init__(message, context=context)
        self.schema_errors = schema_errors or []


# ==============================================================================
# Exception Utilities
# ==============================================================================

def format_exception_chain(exc: Exception) -> str:
    """Format exception chain for logging/display.

    Args:
        exc: Exception to format

    Returns:
        Formatted string with full exception chain
    """
    lines = []
    current = exc

    while current is not None:
        if isinstance(current, BlueCarbonException):
            lines.append(str(current))
            lines.append(f"  Context: {current.context}")
        else:
            lines.append(f"{type(current).__name__}: {current}")

        current = getattr(current, "__cause__", None)

    return "\n".join(lines)


__all__ = [
    "BlueCarbonException",
    "ConfigurationError",
    "DataException",
    "UnknownEcosystemError",
    "InvalidRecordError",
    "format_exception_chain",
]
