"""
In-memory persistence collaborator.

Stores opaque records keyed by integer id. Authorization never looks inside
a record; this adapter only exists so the secured operations have something
real to call.
"""

import itertools
import threading
from typing import Any, Dict, List

from shared.errors import NotFoundError
from shared.logging import get_logger

Record = Dict[str, Any]


class InMemoryRepository:
    """Thread-safe CRUD store for one resource type."""

    def __init__(self, resource_type: str):
        self.resource_type = resource_type
        self.logger = get_logger(f"authz.repository.{resource_type}")
        self._records: Dict[int, Record] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def create(self, record: Record) -> Record:
        with self._lock:
            record_id = next(self._ids)
            stored = dict(record, id=record_id)
            self._records[record_id] = stored
        self.logger.info("Record created", record_id=record_id)
        return dict(stored)

    def read(self, record_id: int) -> Record:
        with self._lock:
            if record_id not in self._records:
                raise NotFoundError(f"No {self.resource_type} with id {record_id}")
            return dict(self._records[record_id])

    def update(self, record_id: int, record: Record) -> Record:
        with self._lock:
            if record_id not in self._records:
                raise NotFoundError(f"No {self.resource_type} with id {record_id}")
            stored = dict(record, id=record_id)
            self._records[record_id] = stored
        self.logger.info("Record updated", record_id=record_id)
        return dict(stored)

    def delete(self, record_id: int) -> None:
        with self._lock:
            if self._records.pop(record_id, None) is None:
                raise NotFoundError(f"No {self.resource_type} with id {record_id}")
        self.logger.info("Record deleted", record_id=record_id)

    def list(self) -> List[Record]:
        with self._lock:
            return [dict(record) for _, record in sorted(self._records.items())]
