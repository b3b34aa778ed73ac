from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from threading import Lock
from typing import Protocol
from uuid import UUID, uuid4


@dataclass
class HistoryEntry:
    id: UUID
    created_at: datetime
    data: dict


class HistoryRepository(Protocol):
    def append(self, data: dict) -> HistoryEntry: ...

    def list(self) -> list[HistoryEntry]: ...

    def get(self, entry_id: UUID) -> HistoryEntry | None: ...


class InMemoryHistoryRepository:
    """Newest-first evaluation history holding at most ``limit`` entries."""

    def __init__(self, limit: int = 5) -> None:
        self.limit = limit
        self._items: list[HistoryEntry] = []
        self._lock = Lock()

    def _utcnow(self) -> datetime:
        return datetime.now(timezone.utc)

    def append(self, data: dict) -> HistoryEntry:
        with self._lock:
            entry = HistoryEntry(id=uuid4(), created_at=self._utcnow(), data=data)
            self._items.insert(0, entry)
            del self._items[self.limit :]
            return entry

    def list(self) -> list[HistoryEntry]:
        with self._lock:
            return list(self._items)

    def get(self, entry_id: UUID) -> HistoryEntry | None:
        with self._lock:
            return next((item for item in self._items if item.id == entry_id), None)
