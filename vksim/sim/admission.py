# vksim/sim/admission.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import List

from ..model.entities import Admission, NodeCapacity, WorkloadRecord
from ..model.resource import ResourceVector, ZERO
from ..types import WorkloadId
from .registry import WorkloadRegistry

log = logging.getLogger(__name__)


@dataclass
class NodeUsage:
    """Instantaneous usage of the node, summed over running workloads."""
    usage: ResourceVector = ZERO
    running: int = 0


@dataclass(frozen=True)
class AdmissionDecision:
    admission: Admission
    projected: ResourceVector
    running: int
    # which limits the projected usage exceeds: "cpu", "memory", "gpu", "pods"
    violations: List[str] = field(default_factory=list)

    @property
    def accepted(self) -> bool:
        return self.admission is Admission.ACCEPTED

    def describe(self) -> str:
        if self.accepted:
            return "fits node capacity"
        return "exceeds node capacity: " + ", ".join(self.violations)


def compute_node_usage(registry: WorkloadRegistry, now: datetime) -> NodeUsage:
    """
    Sum of what every accepted, still running workload uses right now.

    Each workload is indexed by its own elapsed time, so a workload in a
    heavy phase counts with that phase's demand, not with its peak.
    """
    acc = NodeUsage()

    def visit(_key: WorkloadId, record: WorkloadRecord) -> bool:
        if not record.is_running(now):
            return True
        acc.usage = acc.usage + record.usage_at(now)
        acc.running += 1
        return True

    registry.for_each(visit)
    return acc


def check_capacity(
    current: NodeUsage,
    candidate: ResourceVector,
    capacity: NodeCapacity,
) -> AdmissionDecision:
    """Projected usage vs capacity. Exactly-at-capacity fits."""
    projected = current.usage + candidate
    violations = projected.exceeded_limits(
        capacity.milli_cpu, capacity.memory_bytes, capacity.gpu
    )
    if current.running + 1 > capacity.max_pods:
        violations.append("pods")

    return AdmissionDecision(
        admission=Admission.REJECTED_OVER_CAPACITY if violations else Admission.ACCEPTED,
        projected=projected,
        running=current.running,
        violations=violations,
    )


def decide(
    registry: WorkloadRegistry,
    capacity: NodeCapacity,
    candidate: ResourceVector,
    now: datetime,
) -> AdmissionDecision:
    """
    One-shot admission of a new workload whose phase-0 demand is `candidate`.

    Reads the registry but does not write it; the caller stores the record
    with the outcome. Nothing serialises decide() with that store, so two
    concurrent creations may both be accepted on the same free capacity.
    """
    current = compute_node_usage(registry, now)
    decision = check_capacity(current, candidate, capacity)
    log.debug(
        f"Admission: running={current.running} "
        f"projected cpu={decision.projected.milli_cpu}m mem={decision.projected.memory_bytes}B "
        f"gpu={decision.projected.gpu} -> {decision.admission.value}"
    )
    return decision
