"""Operational utilities for kidpoints."""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path


class StructuredLogger:
    """Write JSON lines log entries for later inspection."""

    def __init__(self, *, path: Path | None = None, max_entries: int = 500) -> None:
        self.path = path
        self.max_entries = max_entries
        self._entries: list[dict] = []

    def log(self, event_type: str, **fields: object) -> dict:
        entry = {"timestamp": datetime.utcnow().isoformat(), "event": event_type, **fields}
        self._entries.append(entry)
        if len(self._entries) > self.max_entries:
            del self._entries[: -self.max_entries]
        if self.path:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("a", encoding="utf-8") as handle:
                handle.write(json.dumps(entry, ensure_ascii=False, default=str) + "\n")
        return entry

    def tail(self, limit: int = 50) -> tuple[dict, ...]:
        return tuple(self._entries[-limit:])


__all__ = ["StructuredLogger"]
