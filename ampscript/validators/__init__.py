"""Validator-driven detection of missing scripts."""

from .findings import (
    MANDATORY_TAG_MISSING,
    MISSING_EXTENSION_CODES,
    ValidationResult,
    parse_validator_output,
    requirements_from_findings,
)
from .runner import AmpValidator, ValidatorUnavailableError

__all__ = [
    "AmpValidator",
    "MANDATORY_TAG_MISSING",
    "MISSING_EXTENSION_CODES",
    "ValidationResult",
    "ValidatorUnavailableError",
    "parse_validator_output",
    "requirements_from_findings",
]
