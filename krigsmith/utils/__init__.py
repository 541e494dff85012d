"""Utility modules for KrigSmith."""

from krigsmith.utils.errors import (
    DataValidationError,
    KrigSmithError,
    ParameterError,
    format_parameter_error,
    format_validation_error,
    raise_parameter_error,
    raise_validation_error,
)

__all__ = [
    "KrigSmithError",
    "DataValidationError",
    "ParameterError",
    "format_validation_error",
    "format_parameter_error",
    "raise_validation_error",
    "raise_parameter_error",
]
