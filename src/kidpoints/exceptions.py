"""Custom exception hierarchy for the kidpoints package."""

from __future__ import annotations


class KidPointsError(Exception):
    """Base class for all kidpoints specific errors."""


class ValidationError(KidPointsError):
    """Raised when a request field is missing or cannot be coerced."""


class LedgerShapeError(ValidationError):
    """Raised when an operation targets a day stored in the other history shape."""


class StorageError(KidPointsError):
    """Raised when the ledger document cannot be read, parsed or written."""


class NotFoundError(KidPointsError):
    """Raised when a requested date has no history record."""
