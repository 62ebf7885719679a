"""kidpoints package for tracking a child's earned and spent points by day."""

from .exceptions import (
    KidPointsError,
    LedgerShapeError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from .models import HistoryEntry, HistoryEntryType, Ledger
from .ops import StructuredLogger
from .service import PointsService
from .storage import JsonFileLedgerStore, LedgerStore, MemoryLedgerStore

__all__ = [
    "HistoryEntry",
    "HistoryEntryType",
    "JsonFileLedgerStore",
    "KidPointsError",
    "Ledger",
    "LedgerShapeError",
    "LedgerStore",
    "MemoryLedgerStore",
    "NotFoundError",
    "PointsService",
    "StorageError",
    "StructuredLogger",
    "ValidationError",
]
