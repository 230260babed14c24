"""Custom exception classes for window forward pricing errors.

This module defines the hierarchy of exceptions raised by the windowfx package.
All exceptions inherit from WindowFxError, which keeps a context dictionary
next to the message so that callers (and logs) can see which trade, currency
or calendar the failure relates to.

Structural validation of products is not part of this hierarchy: pydantic
validators raise ``ValueError`` and the model surfaces it as
``pydantic.ValidationError``.
"""

from typing import Any


class WindowFxError(Exception):
    """Base exception for all windowfx errors.

    Attributes:
        message: Human-readable error description
        context: Additional context information about the error
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description
            context: Optional dictionary with additional error context
                    (e.g., currency, calendar_id, scenario_index)
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        """Return string representation of the exception."""
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} (Context: {context_str})"
        return self.message


class ReferenceDataError(WindowFxError):
    """Exception raised when reference data cannot satisfy a lookup.

    This exception should be raised when:
    - A holiday calendar identifier is unknown
    - Holiday calendar data is malformed

    Example:
        >>> raise ReferenceDataError(
        ...     "Reference data not found for holiday calendar",
        ...     context={"calendar_id": "XXXX"}
        ... )
    """


class MarketDataError(WindowFxError):
    """Exception raised when a rates provider is missing required data.

    Missing market data is a hard failure: it is propagated to the caller
    and never replaced by a default value.

    Example:
        >>> raise MarketDataError(
        ...     "Unable to find discount curve",
        ...     context={"currency": "EUR"}
        ... )
    """


class ConventionError(WindowFxError):
    """Exception raised for unknown or unsupported market conventions.

    Example:
        >>> raise ConventionError(
        ...     "Unknown FX swap convention",
        ...     context={"name": "USD/XXX"}
        ... )
    """


class CalculationError(WindowFxError):
    """Exception raised when a failed scenario value is accessed.

    Example:
        >>> raise CalculationError(
        ...     "Scenario calculation failed",
        ...     context={"scenario_index": 3, "reason": "MISSING_DATA"}
        ... )
    """


class ConfigurationError(WindowFxError):
    """Exception raised for invalid package configuration.

    This exception should be raised when:
    - An environment variable holds a value that cannot be parsed
    - A configured resource file cannot be loaded

    Example:
        >>> raise ConfigurationError(
        ...     "Invalid worker count",
        ...     context={"WINDOWFX_MAX_WORKERS": "many"}
        ... )
    """
