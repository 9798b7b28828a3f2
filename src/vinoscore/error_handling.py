"""
Standardized Error Handling for Vinoscore

Scoring never raises for absent or malformed field values; degraded inputs
are logged and replaced by a fallback. Exceptions are reserved for
configuration mistakes made by the caller.
"""

import logging
from typing import Any, TypeVar

from pydantic import ValidationError

logger = logging.getLogger(__name__)

# Type variable for generic functions
T = TypeVar('T')


class VinoScoreError(Exception):
    """Base exception for Vinoscore."""
    pass


class ConfigurationError(VinoScoreError):
    """Invalid scoring policy or vocabulary configuration."""
    pass


class DataValidationError(VinoScoreError):
    """Input could not be interpreted at all."""
    pass


def handle_validation_error(error: Exception, operation: str, fallback_value: T) -> T:
    """
    Standardized handling of raw input that fails model validation.

    Args:
        error: Exception that occurred
        operation: Description of operation
        fallback_value: Value to return on error

    Returns:
        fallback_value if the error is a validation failure, otherwise raises
    """
    if isinstance(error, ValidationError):
        logger.warning(
            f"Input validation failed during {operation} "
            f"({error.error_count()} errors), using fallback"
        )
        logger.debug(f"Validation details for {operation}: {error}")
        return fallback_value

    error_type = type(error).__name__
    logger.error(f"Unexpected error during {operation}: {error_type} - {error}")
    raise DataValidationError(f"Unexpected error during {operation}") from error


def coerce_model(raw: Any, model_cls: type, operation: str) -> Any:
    """
    Turn a raw signal (dict, model instance or None) into ``model_cls``.

    Invalid dicts degrade to an empty model so scoring can still proceed.
    """
    if isinstance(raw, model_cls):
        return raw
    if raw is None:
        return model_cls()
    try:
        return model_cls.model_validate(raw)
    except ValidationError as e:
        return handle_validation_error(e, operation, model_cls())


__all__ = [
    'VinoScoreError',
    'ConfigurationError',
    'DataValidationError',
    'handle_validation_error',
    'coerce_model',
]
