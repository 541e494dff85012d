"""Standardized error messages for KrigSmith.

Provides a small exception hierarchy and consistent message formatting.
Recoverable numerical conditions (too few samples, singular kriging systems)
are not errors and never reach this module; only caller contract violations do.
"""

from typing import Any, Optional


class KrigSmithError(Exception):
    """Base exception for KrigSmith errors."""

    def __init__(
        self,
        message: str,
        suggestion: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        """Initialize KrigSmith error.

        Args:
            message: Primary error message.
            suggestion: Optional suggestion for fixing the error.
            details: Optional dictionary with additional error details.
        """
        super().__init__(message)
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        """Format error message with suggestion if available."""
        if self.suggestion:
            return f"{self.message}\n\nSuggestion: {self.suggestion}"
        return self.message


class DataValidationError(KrigSmithError, ValueError):
    """Error raised when input arrays or samples are malformed."""

    pass


class ParameterError(KrigSmithError, ValueError):
    """Error raised when parameters are invalid (e.g. a non-positive range)."""

    pass


def format_validation_error(
    message: str,
    expected: Optional[str] = None,
    received: Optional[str] = None,
) -> str:
    """Format a standardized validation error message.

    Args:
        message: Primary error message.
        expected: What was expected (optional).
        received: What was received (optional).

    Returns:
        Formatted error message string.
    """
    parts = [message]
    if expected and received:
        parts.append(f"Expected: {expected}, Received: {received}")
    elif expected:
        parts.append(f"Expected: {expected}")
    elif received:
        parts.append(f"Received: {received}")
    return "\n".join(parts)


def format_parameter_error(
    parameter_name: str,
    value: Any,
    constraint: Optional[str] = None,
) -> str:
    """Format a standardized parameter error message.

    Args:
        parameter_name: Name of the invalid parameter.
        value: Invalid value that was provided.
        constraint: Constraint that was violated (optional).

    Returns:
        Formatted error message string.
    """
    parts = [f"Invalid value for parameter '{parameter_name}': {value}"]
    if constraint:
        parts.append(f"Constraint: {constraint}")
    return "\n".join(parts)


def raise_validation_error(
    message: str,
    expected: Optional[str] = None,
    received: Optional[str] = None,
    suggestion: Optional[str] = None,
) -> None:
    """Raise a standardized validation error.

    Args:
        message: Primary error message.
        expected: What was expected (optional).
        received: What was received (optional).
        suggestion: How to fix the error (optional).

    Raises:
        DataValidationError: Always raises this exception.
    """
    error_msg = format_validation_error(message, expected, received)
    raise DataValidationError(error_msg, suggestion=suggestion)


def raise_parameter_error(
    parameter_name: str,
    value: Any,
    constraint: Optional[str] = None,
    suggestion: Optional[str] = None,
) -> None:
    """Raise a standardized parameter error.

    Args:
        parameter_name: Name of the invalid parameter.
        value: Invalid value that was provided.
        constraint: Constraint that was violated (optional).
        suggestion: How to fix the error (optional).

    Raises:
        ParameterError: Always raises this exception.
    """
    error_msg = format_parameter_error(parameter_name, value, constraint)
    raise ParameterError(
        error_msg, suggestion=suggestion, details={parameter_name: value}
    )
