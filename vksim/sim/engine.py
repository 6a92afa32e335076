# vksim/sim/engine.py
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, List, Optional, Sequence

from ..model.entities import NodeCapacity, WorkloadRecord
from ..model.errors import InvalidKey, NotFound
from ..spec.parser import RawSpec, parse_sim_spec
from ..types import WorkloadId
from .admission import NodeUsage, compute_node_usage, decide
from .registry import WorkloadRegistry
from .status import WorkloadStatus, build_status

log = logging.getLogger(__name__)

Clock = Callable[[], datetime]
ContainerNames = Callable[[Any], Sequence[str]]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(moment: datetime) -> datetime:
    # naive timestamps are taken as UTC
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def build_key(namespace: str, name: str) -> WorkloadId:
    if not namespace:
        raise InvalidKey("pod namespace not found")
    if not name:
        raise InvalidKey("pod name not found")
    return WorkloadId(f"{namespace}-{name}")


class SimEngine:
    """
    Admission and accounting for one simulated node.

    Payloads are opaque here; `container_names` tells the status engine which
    containers a payload declares.
    """

    def __init__(
        self,
        capacity: NodeCapacity,
        registry: Optional[WorkloadRegistry] = None,
        clock: Clock = utc_now,
        container_names: Optional[ContainerNames] = None,
    ) -> None:
        self._capacity = capacity
        self.registry = registry if registry is not None else WorkloadRegistry()
        self.clock = clock
        self._container_names = container_names or (lambda _payload: ())

    def resolve_time(self, now: Optional[datetime] = None) -> datetime:
        """`now` (or the clock when None) as an aware UTC timestamp."""
        return as_utc(now if now is not None else self.clock())

    # --- capacity ---
    def set_capacity(self, capacity: NodeCapacity) -> None:
        self._capacity = capacity

    def get_capacity(self) -> NodeCapacity:
        return self._capacity

    # --- workloads ---
    def create_workload(
        self,
        key: WorkloadId,
        payload: Any,
        raw_profile: Optional[RawSpec],
        now: Optional[datetime] = None,
    ) -> WorkloadRecord:
        """
        Parse the profile, run admission once, store the record.

        A rejected workload is stored too; rejection is an outcome, not an
        error. Parse errors propagate and leave the registry untouched.
        """
        plan = parse_sim_spec(raw_profile)
        now = self.resolve_time(now)

        decision = decide(self.registry, self._capacity, plan.initial_demand(), now)
        record = WorkloadRecord(
            id=key,
            payload=payload,
            start_time=now,
            admission=decision.admission,
            plan=plan,
        )
        self.registry.store(key, record)

        if decision.accepted:
            peak = plan.peak()
            log.info(
                f"Accepted {key}: {len(plan)} phase(s), {plan.total_seconds}s, "
                f"peak cpu={peak.milli_cpu}m mem={peak.memory_bytes}B gpu={peak.gpu}; "
                f"{len(self.registry)} workload(s) on node"
            )
        else:
            log.warning(f"Rejected {key}: {decision.describe()}")
        return record

    def update_workload(self, key: WorkloadId, payload: Any) -> WorkloadRecord:
        # TODO: decide whether a changed resource demand should re-run admission
        updated = self.registry.update(key, lambda record: record.with_payload(payload))
        if updated is None:
            raise NotFound(key)
        return updated

    def delete_workload(self, key: WorkloadId) -> None:
        self.registry.delete(key)

    def get_record(self, key: WorkloadId) -> Optional[WorkloadRecord]:
        return self.registry.load(key)

    def get_workload(self, key: WorkloadId) -> Optional[Any]:
        record = self.registry.load(key)
        return record.payload if record is not None else None

    def get_status(self, key: WorkloadId, now: Optional[datetime] = None) -> Optional[WorkloadStatus]:
        record = self.registry.load(key)
        if record is None:
            return None
        return build_status(record, self.resolve_time(now), self._container_names(record.payload))

    def list_workloads(self) -> List[Any]:
        return self.registry.list_payloads()

    def current_usage(self, now: Optional[datetime] = None) -> NodeUsage:
        return compute_node_usage(self.registry, self.resolve_time(now))
