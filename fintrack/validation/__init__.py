"""Record entry validation package."""

from fintrack.validation.validator import RecordValidationError, RecordValidator

__all__ = ["RecordValidationError", "RecordValidator"]
