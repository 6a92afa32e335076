# vksim/sim/aggregator.py
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from ..model.resource import ResourceVector, ZERO
from .admission import compute_node_usage
from .registry import WorkloadRegistry

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class UsageSnapshot:
    usage: ResourceVector
    running: int
    at: Optional[datetime]


EMPTY_SNAPSHOT = UsageSnapshot(usage=ZERO, running=0, at=None)


class UsageAggregator:
    """
    Periodically recomputes the node's aggregate usage into a cached snapshot.

    Read path for node-status reporting only. Admission and workload phases
    always go to the registry, never to this cache.
    """

    def __init__(
        self,
        registry: WorkloadRegistry,
        clock: Callable[[], datetime],
        interval_sec: float = 1.0,
    ) -> None:
        self.registry = registry
        self.clock = clock
        self.interval_sec = interval_sec

        self._lock = threading.Lock()
        self._snapshot = EMPTY_SNAPSHOT
        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()

    # -------- lifecycle --------

    def start(self) -> None:
        if self._thread and self._thread.is_alive():
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._loop, name="UsageAggregator", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._stop_event.set()
        if self._thread:
            self._thread.join(timeout=2.0)
            self._thread = None

    def __enter__(self) -> UsageAggregator:
        self.start()
        return self

    def __exit__(self, *exc) -> None:
        self.stop()

    # -------- work --------

    def refresh(self) -> UsageSnapshot:
        now = self.clock()
        usage = compute_node_usage(self.registry, now)
        snap = UsageSnapshot(usage=usage.usage, running=usage.running, at=now)
        with self._lock:
            self._snapshot = snap
        return snap

    @property
    def snapshot(self) -> UsageSnapshot:
        with self._lock:
            return self._snapshot

    def _loop(self) -> None:
        while not self._stop_event.is_set():
            try:
                self.refresh()
            except Exception as e:
                # keep the gauge alive; the next tick retries
                log.error(f"Usage aggregation failed: {e}")
            self._stop_event.wait(self.interval_sec)
