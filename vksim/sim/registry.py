# vksim/sim/registry.py
from __future__ import annotations

import threading
from typing import Any, Callable, Dict, List, Optional

from ..model.entities import WorkloadRecord
from ..types import WorkloadId


Visitor = Callable[[WorkloadId, WorkloadRecord], bool]


class WorkloadRegistry:
    """
    Thread-safe map of workload id -> WorkloadRecord.

    Every single operation is atomic. There are no multi-key transactions:
    for_each walks a copy of the entries taken at call time, so stores and
    deletes racing with a traversal may or may not be seen by it. Callers
    that combine a traversal with a store (admission does) can therefore act
    on a stale view.

    Records are frozen dataclasses, handing them out does not leak mutable
    state.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._records: Dict[WorkloadId, WorkloadRecord] = {}

    def load(self, key: WorkloadId) -> Optional[WorkloadRecord]:
        with self._lock:
            return self._records.get(key)

    def store(self, key: WorkloadId, record: WorkloadRecord) -> None:
        with self._lock:
            self._records[key] = record

    def update(
        self,
        key: WorkloadId,
        change: Callable[[WorkloadRecord], WorkloadRecord],
    ) -> Optional[WorkloadRecord]:
        """Atomically replaces an existing record; None if `key` is absent."""
        with self._lock:
            record = self._records.get(key)
            if record is None:
                return None
            updated = change(record)
            self._records[key] = updated
            return updated

    def delete(self, key: WorkloadId) -> None:
        with self._lock:
            self._records.pop(key, None)

    def for_each(self, visit: Visitor) -> None:
        """Calls visit(key, record) per entry until it returns False."""
        with self._lock:
            items = list(self._records.items())
        for key, record in items:
            if not visit(key, record):
                break

    def list_payloads(self) -> List[Any]:
        with self._lock:
            return [r.payload for r in self._records.values()]

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
