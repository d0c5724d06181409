"""
Record store for the Todo MCP server
In-memory keyed container shared by every session of one server process
"""
import itertools
import threading
from typing import Dict, List, Optional

from ..models.record import (
    TIMESTAMP_RESOLUTION,
    Record,
    RecordCreate,
    RecordUpdate,
    new_record_id,
    utcnow,
)


class RecordStore:
    """
    Keyed CRUD container for todo records.

    A single re-entrant lock serialises every read and write, so only one
    mutation is in flight at a time regardless of which thread or session
    issued it.
    """

    def __init__(self):
        self._records: Dict[str, Record] = {}
        # Insertion sequence, used to order records created in the same instant
        self._sequence: Dict[str, int] = {}
        self._counter = itertools.count()
        self._lock = threading.RLock()

    def create(self, data: RecordCreate) -> Record:
        """
        Store a new record.

        Args:
            data: Validated creation data

        Returns:
            The stored record, with creation and modification time equal
        """
        now = utcnow()
        record = Record(
            title=data.title,
            description=data.description,
            completed=data.completed,
            created_at=now,
            updated_at=now,
        )
        with self._lock:
            while record.id in self._records:
                record.id = new_record_id()
            self._records[record.id] = record
            self._sequence[record.id] = next(self._counter)
            return record.model_copy()

    def get_all(self) -> List[Record]:
        """All records, most recently created first."""
        with self._lock:
            records = sorted(
                self._records.values(),
                key=lambda r: (r.created_at, self._sequence[r.id]),
                reverse=True,
            )
            return [r.model_copy() for r in records]

    def get_by_id(self, record_id: str) -> Optional[Record]:
        with self._lock:
            record = self._records.get(record_id)
            return record.model_copy() if record else None

    def update(self, record_id: str, data: RecordUpdate) -> Optional[Record]:
        """
        Apply the supplied fields of a partial update.

        The modification time is refreshed on every successful call, even when
        no field changes, and always moves forward by at least one wire
        timestamp step. The id is never touched.

        Returns:
            The updated record, or None if no record has that id
        """
        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        with self._lock:
            record = self._records.get(record_id)
            if record is None:
                return None

            updated = record.model_copy()
            for name, value in changes.items():
                setattr(updated, name, value)
            updated.updated_at = max(utcnow(), record.updated_at + TIMESTAMP_RESOLUTION)
            self._records[record_id] = updated
            return updated.model_copy()

    def delete(self, record_id: str) -> bool:
        with self._lock:
            if record_id not in self._records:
                return False
            del self._records[record_id]
            del self._sequence[record_id]
            return True

    def count(self) -> int:
        with self._lock:
            return len(self._records)

    def clear(self) -> None:
        with self._lock:
            self._records.clear()
            self._sequence.clear()

    def __len__(self) -> int:
        return self.count()
