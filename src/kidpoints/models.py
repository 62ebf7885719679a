"""Domain models used by the kidpoints package."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Union

from .exceptions import LedgerShapeError, StorageError, ValidationError


def stored_points(value: Any, where: str) -> int:
    """Return a persisted point amount, rejecting anything that is not a whole number."""

    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise StorageError(f"Stored {where} must be a number, got {value!r}.")
    if isinstance(value, float):
        if not value.is_integer():
            raise StorageError(f"Stored {where} must be a whole number, got {value!r}.")
        return int(value)
    return value


class HistoryEntryType(str, Enum):
    """Kinds of line items recorded in a list-shaped history day."""

    TASK = "task"
    DEDUCT = "deduct"
    REDEEM = "redeem"

    @classmethod
    def parse(cls, value: "HistoryEntryType | str") -> "HistoryEntryType":
        try:
            return cls(value)
        except ValueError:
            allowed = ", ".join(member.value for member in cls)
            raise ValidationError(f"Unknown history entry type {value!r}; expected one of {allowed}.") from None


@dataclass(slots=True)
class HistoryEntry:
    """A single task, deduction or redemption recorded against a day."""

    task: str
    type: HistoryEntryType
    points: int

    def matches(self, task: str, entry_type: HistoryEntryType) -> bool:
        return self.task == task and self.type is entry_type

    def to_dict(self) -> Dict[str, Any]:
        return {"task": self.task, "type": self.type.value, "points": self.points}

    @classmethod
    def from_dict(cls, payload: Any) -> "HistoryEntry":
        if not isinstance(payload, Mapping):
            raise StorageError(f"History entry must be an object, got {type(payload).__name__}.")
        try:
            entry_type = HistoryEntryType(payload.get("type"))
        except ValueError:
            raise StorageError(f"History entry has unknown type {payload.get('type')!r}.") from None
        points = stored_points(payload.get("points", 0), f"points of history entry {payload.get('task')!r}")
        return cls(task=str(payload.get("task", "")), type=entry_type, points=points)


TaskPoints = Dict[str, int]
DayRecord = Union[TaskPoints, List[HistoryEntry]]


@dataclass(slots=True)
class Ledger:
    """The single persisted document: running total, child name and history.

    Each ``history`` key holds one of two shapes.  Days written by the points
    endpoints map task ids to point values; days written by the history
    endpoints are ordered lists of :class:`HistoryEntry`.  A day keeps the
    shape it was created with, and the accessors below refuse to reinterpret
    it as the other one.
    """

    total_points: int = 0
    child_name: str = ""
    history: Dict[str, DayRecord] = field(default_factory=dict)

    @classmethod
    def from_document(cls, document: Any) -> "Ledger":
        """Build a ledger from the decoded JSON document."""

        if not isinstance(document, Mapping):
            raise StorageError("Ledger document must be a JSON object.")
        raw_history = document.get("history")
        if raw_history is None:
            raw_history = {}
        if not isinstance(raw_history, Mapping):
            raise StorageError("Ledger history must be a JSON object keyed by date.")
        history: Dict[str, DayRecord] = {}
        for day, record in raw_history.items():
            if isinstance(record, Mapping):
                history[str(day)] = {
                    str(task_id): stored_points(value, f"history[{day!r}][{task_id!r}]")
                    for task_id, value in record.items()
                }
            elif isinstance(record, list):
                history[str(day)] = [HistoryEntry.from_dict(item) for item in record]
            else:
                raise StorageError(f"History for {day!r} must be an object or an array.")
        return cls(
            total_points=stored_points(document.get("totalPoints", 0), "totalPoints"),
            child_name=document.get("childName") or "",
            history=history,
        )

    def to_document(self) -> Dict[str, Any]:
        return {
            "totalPoints": self.total_points,
            "childName": self.child_name,
            "history": self.history_document(),
        }

    def history_document(self) -> Dict[str, Any]:
        document: Dict[str, Any] = {}
        for day, record in self.history.items():
            if isinstance(record, list):
                document[day] = [entry.to_dict() for entry in record]
            else:
                document[day] = dict(record)
        return document

    def task_points(self, day: str) -> TaskPoints:
        """Return the task-id to points mapping for ``day``, creating it when absent."""

        record = self.history.setdefault(day, {})
        if isinstance(record, list):
            raise LedgerShapeError(f"History for {day} holds itemised entries, not task points.")
        return record

    def entries(self, day: str) -> List[HistoryEntry]:
        """Return the itemised entries for ``day``, creating the list when absent."""

        record = self.history.setdefault(day, [])
        if not isinstance(record, list):
            raise LedgerShapeError(f"History for {day} holds task points, not itemised entries.")
        return record

    def day_total(self, day: str) -> int:
        record = self.history.get(day)
        if record is None:
            return 0
        if isinstance(record, list):
            raise LedgerShapeError(f"History for {day} holds itemised entries and cannot be settled.")
        return sum(record.values())


__all__ = ["DayRecord", "HistoryEntry", "HistoryEntryType", "Ledger", "TaskPoints", "stored_points"]
