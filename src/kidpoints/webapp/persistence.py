"""SQLModel-backed ledger storage for the kidpoints web service."""
from __future__ import annotations

import json
from datetime import datetime
from typing import Any

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Field, Session, SQLModel, create_engine

from ..exceptions import StorageError
from ..models import Ledger


class LedgerRecord(SQLModel, table=True):
    key: str = Field(primary_key=True)
    document: str
    updated_at: datetime = Field(default_factory=datetime.utcnow)


def make_engine(path: str) -> Engine:
    return create_engine(
        f"sqlite:///{path}",
        echo=False,
        connect_args={"check_same_thread": False},
    )


class SqlLedgerStore:
    """Keep the ledger document as a JSON text row keyed by ``key``."""

    def __init__(self, engine: Engine, *, key: str = "default") -> None:
        self.engine = engine
        self.key = key
        try:
            SQLModel.metadata.create_all(engine, tables=[LedgerRecord.__table__])
        except SQLAlchemyError as exc:
            raise StorageError(f"Unable to prepare ledger table: {exc}") from exc

    def load(self) -> Ledger:
        try:
            with Session(self.engine) as session:
                record = session.get(LedgerRecord, self.key)
                raw = record.document if record is not None else None
        except SQLAlchemyError as exc:
            raise StorageError(f"Unable to read ledger {self.key!r}: {exc}") from exc
        if raw is None:
            return Ledger()
        try:
            document: Any = json.loads(raw)
        except ValueError as exc:
            raise StorageError(f"Ledger {self.key!r} is not valid JSON: {exc}") from exc
        return Ledger.from_document(document)

    def save(self, ledger: Ledger) -> None:
        payload = json.dumps(ledger.to_document(), ensure_ascii=False)
        try:
            with Session(self.engine) as session:
                record = session.get(LedgerRecord, self.key)
                if record is None:
                    record = LedgerRecord(key=self.key, document=payload)
                else:
                    record.document = payload
                    record.updated_at = datetime.utcnow()
                session.add(record)
                session.commit()
        except SQLAlchemyError as exc:
            raise StorageError(f"Unable to write ledger {self.key!r}: {exc}") from exc


__all__ = ["LedgerRecord", "SqlLedgerStore", "make_engine"]
