"""Storage backends holding the single ledger document."""

from __future__ import annotations

import copy
import json
import os
import threading
from pathlib import Path
from typing import Any, Dict, Optional, Protocol

from .exceptions import StorageError
from .models import Ledger


class LedgerStore(Protocol):
    """Capability for loading and saving the whole ledger."""

    def load(self) -> Ledger:
        ...

    def save(self, ledger: Ledger) -> None:
        ...


class JsonFileLedgerStore:
    """Keep the ledger as one pretty-printed JSON document on local disk."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def load(self) -> Ledger:
        if not self.path.exists():
            return Ledger()
        try:
            with self.path.open("r", encoding="utf-8") as handle:
                document = json.load(handle)
        except OSError as exc:
            raise StorageError(f"Unable to read ledger file {self.path}: {exc}") from exc
        except ValueError as exc:
            raise StorageError(f"Ledger file {self.path} is not valid JSON: {exc}") from exc
        return Ledger.from_document(document)

    def save(self, ledger: Ledger) -> None:
        payload = json.dumps(ledger.to_document(), ensure_ascii=False, indent=2)
        temp_path = self.path.with_name(f".{self.path.name}.{os.getpid()}.{threading.get_ident()}.tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with temp_path.open("w", encoding="utf-8") as handle:
                handle.write(payload)
            os.replace(temp_path, self.path)
        except OSError as exc:
            temp_path.unlink(missing_ok=True)
            raise StorageError(f"Unable to write ledger file {self.path}: {exc}") from exc

    def __repr__(self) -> str:
        return f"JsonFileLedgerStore({str(self.path)!r})"


class MemoryLedgerStore:
    """Ledger store backed by an in-memory document, mainly for tests."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None) -> None:
        self._document: Dict[str, Any] = copy.deepcopy(initial) if initial else Ledger().to_document()
        self.saves = 0

    @property
    def document(self) -> Dict[str, Any]:
        return copy.deepcopy(self._document)

    def load(self) -> Ledger:
        return Ledger.from_document(copy.deepcopy(self._document))

    def save(self, ledger: Ledger) -> None:
        self._document = ledger.to_document()
        self.saves += 1


__all__ = ["JsonFileLedgerStore", "LedgerStore", "MemoryLedgerStore"]
