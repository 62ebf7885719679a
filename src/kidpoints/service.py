"""Points store service coordinating the ledger read-modify-write cycle."""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

from .exceptions import NotFoundError, ValidationError
from .models import DayRecord, HistoryEntry, HistoryEntryType, Ledger
from .ops import StructuredLogger
from .storage import LedgerStore


def coerce_points(value: Any, *, field_name: str = "points") -> int:
    """Convert ``value`` to an integer point amount."""

    if isinstance(value, bool) or value is None:
        raise ValidationError(f"{field_name} must be an integer.")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not value.is_integer():
            raise ValidationError(f"{field_name} must be a whole number, got {value}.")
        return int(value)
    try:
        return int(str(value).strip())
    except ValueError:
        raise ValidationError(f"{field_name} must be an integer, got {value!r}.") from None


def _require_text(value: Any, field_name: str) -> str:
    if value is None:
        raise ValidationError(f"{field_name} is required.")
    text = str(value).strip()
    if not text:
        raise ValidationError(f"{field_name} cannot be empty.")
    return text


class PointsService:
    """Read and mutate the ledger one whole document at a time.

    Each mutating call loads the ledger, applies one change and saves the
    whole document back.  Calls are serialized by a process-local lock so two
    requests served by the same process cannot lose each other's update.
    Separate processes sharing one store are not coordinated.
    """

    __slots__ = ("_store", "_logger", "_lock")

    def __init__(self, store: LedgerStore, *, logger: Optional[StructuredLogger] = None) -> None:
        self._store = store
        self._logger = logger or StructuredLogger()
        self._lock = threading.Lock()

    @property
    def store(self) -> LedgerStore:
        return self._store

    @property
    def logger(self) -> StructuredLogger:
        return self._logger

    @contextmanager
    def _mutation(self) -> Iterator[Ledger]:
        with self._lock:
            ledger = self._store.load()
            yield ledger
            self._store.save(ledger)

    def _snapshot(self) -> Ledger:
        with self._lock:
            return self._store.load()

    # ------------------------------------------------------------------
    # Totals and per-task points
    # ------------------------------------------------------------------
    def get_points(self) -> Dict[str, Any]:
        ledger = self._snapshot()
        return {"totalPoints": ledger.total_points, "history": ledger.history_document()}

    def record_points(self, date: str, task_id: str, points: Any) -> int:
        """Store ``points`` for ``task_id`` on ``date`` and add them to the total.

        The per-task value is overwritten on every call while the total keeps
        accumulating, so recording the same task twice counts it twice in the
        total but only once in the day's snapshot.
        """

        day = _require_text(date, "date")
        task = _require_text(task_id, "taskId")
        amount = coerce_points(points)
        with self._mutation() as ledger:
            ledger.task_points(day)[task] = amount
            ledger.total_points += amount
            total = ledger.total_points
        self._logger.log("points.recorded", date=day, task_id=task, points=amount, total=total)
        return total

    def settle_day(self, date: str, used_points: Any) -> int:
        """Fold the unused part of ``date``'s points into the running total.

        Settling is not recorded anywhere; settling the same day again applies
        the remainder a second time.
        """

        day = _require_text(date, "date")
        used = coerce_points(used_points, field_name="usedPoints")
        with self._mutation() as ledger:
            earned = ledger.day_total(day)
            remain = earned - used
            ledger.total_points += remain
            total = ledger.total_points
        self._logger.log("day.settled", date=day, earned=earned, used=used, remain=remain, total=total)
        return total

    # ------------------------------------------------------------------
    # Child profile
    # ------------------------------------------------------------------
    def get_child_name(self) -> str:
        return self._snapshot().child_name or ""

    def set_child_name(self, name: Any) -> None:
        child_name = "" if name is None else str(name)
        with self._mutation() as ledger:
            ledger.child_name = child_name
        self._logger.log("child_name.updated", child_name=child_name)

    # ------------------------------------------------------------------
    # Itemised history
    # ------------------------------------------------------------------
    def get_history(self) -> Dict[str, Any]:
        return self._snapshot().history_document()

    def get_day(self, date: str) -> Any:
        day = _require_text(date, "date")
        history = self.get_history()
        if day not in history:
            raise NotFoundError(f"No history recorded for {day}.")
        return history[day]

    def add_history_entry(self, date: str, task: str, type: HistoryEntryType | str, points: Any) -> Dict[str, Any]:
        """Record a task, deduction or redemption against ``date``.

        Redemptions always append.  Tasks and deductions toggle: a second
        request for the same ``(task, type)`` removes the first matching entry.
        """

        day = _require_text(date, "date")
        name = _require_text(task, "task")
        entry_type = HistoryEntryType.parse(type)
        amount = coerce_points(points)
        with self._mutation() as ledger:
            entries = ledger.entries(day)
            match = None
            if entry_type is not HistoryEntryType.REDEEM:
                match = next((index for index, entry in enumerate(entries) if entry.matches(name, entry_type)), None)
            if match is not None:
                removed: Optional[HistoryEntry] = entries.pop(match)
            else:
                removed = None
                entries.append(HistoryEntry(task=name, type=entry_type, points=amount))
            history = ledger.history_document()
        if removed is not None:
            self._logger.log("history.removed", date=day, task=name, type=entry_type.value, points=removed.points)
        else:
            self._logger.log("history.added", date=day, task=name, type=entry_type.value, points=amount)
        return history

    def clear_day(self, date: str) -> bool:
        """Remove every record for ``date``; returns whether anything was removed."""

        day = _require_text(date, "date")
        with self._lock:
            ledger = self._store.load()
            record: Optional[DayRecord] = ledger.history.pop(day, None)
            if record is None:
                return False
            self._store.save(ledger)
        self._logger.log("day.cleared", date=day)
        return True


__all__ = ["PointsService", "coerce_points"]
