import pytest

from kidpoints.exceptions import LedgerShapeError, StorageError, ValidationError
from kidpoints.models import HistoryEntry, HistoryEntryType, Ledger


def test_empty_document_defaults() -> None:
    ledger = Ledger.from_document({})

    assert ledger.total_points == 0
    assert ledger.child_name == ""
    assert ledger.history == {}
    assert ledger.to_document() == {"totalPoints": 0, "childName": "", "history": {}}


def test_document_keeps_both_history_shapes() -> None:
    document = {
        "totalPoints": 12,
        "childName": "Ava",
        "history": {
            "2024-01-01": {"brush-teeth": 5, "homework": 3},
            "2024-01-02": [{"task": "Movie", "type": "redeem", "points": 4}],
        },
    }

    ledger = Ledger.from_document(document)

    assert ledger.history["2024-01-01"] == {"brush-teeth": 5, "homework": 3}
    assert ledger.history["2024-01-02"] == [HistoryEntry("Movie", HistoryEntryType.REDEEM, 4)]
    assert ledger.to_document() == document


@pytest.mark.parametrize(
    "document",
    [
        [],
        {"history": []},
        {"history": {"2024-01-01": 5}},
        {"history": {"2024-01-01": [{"task": "A", "type": "bonus", "points": 1}]}},
        {"history": {"2024-01-01": ["not an entry"]}},
        {"history": {"2024-01-01": {"a": None}}},
        {"history": {"2024-01-01": {"a": "5"}}},
        {"history": {"2024-01-01": {"a": 2.5}}},
        {"history": {"2024-01-01": [{"task": "A", "type": "task", "points": None}]}},
        {"totalPoints": "12"},
        {"totalPoints": True},
    ],
)
def test_malformed_documents_raise_storage_error(document) -> None:
    with pytest.raises(StorageError):
        Ledger.from_document(document)


def test_day_shape_accessors_refuse_the_other_shape() -> None:
    ledger = Ledger(history={"points-day": {"a": 1}, "entries-day": []})

    with pytest.raises(LedgerShapeError):
        ledger.entries("points-day")
    with pytest.raises(LedgerShapeError):
        ledger.task_points("entries-day")
    with pytest.raises(LedgerShapeError):
        ledger.day_total("entries-day")


def test_day_total_treats_absent_day_as_empty() -> None:
    ledger = Ledger(history={"2024-01-01": {"a": 2, "b": -1}})

    assert ledger.day_total("2024-01-01") == 1
    assert ledger.day_total("2024-01-05") == 0
    assert "2024-01-05" not in ledger.history


def test_entry_type_parse_rejects_unknown_values() -> None:
    assert HistoryEntryType.parse("deduct") is HistoryEntryType.DEDUCT
    with pytest.raises(ValidationError):
        HistoryEntryType.parse("bonus")


def test_integral_float_points_are_normalised() -> None:
    ledger = Ledger.from_document({"totalPoints": 4.0, "history": {"2024-01-01": {"a": 4.0}}})

    assert ledger.total_points == 4
    assert ledger.history["2024-01-01"] == {"a": 4}
    assert isinstance(ledger.history["2024-01-01"]["a"], int)
