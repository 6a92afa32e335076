# vksim/model/entities.py
from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from .profile import PhasePlan
from .resource import ResourceVector
from ..types import WorkloadId, CpuMillis, Bytes, GpuCount


class Admission(str, Enum):
    ACCEPTED = "Accepted"
    REJECTED_OVER_CAPACITY = "RejectedOverCapacity"


@dataclass(frozen=True)
class NodeCapacity:
    """
    Static resource ceiling of the simulated node.

    gpu=None: the config declares no GPU limit, GPU demand is not checked.
    """
    milli_cpu: CpuMillis
    memory_bytes: Bytes
    max_pods: int
    gpu: Optional[GpuCount] = None


@dataclass(frozen=True)
class WorkloadRecord:
    """
    Everything the simulator knows about one submitted workload.

    `admission` is decided once when the record is created; updates only
    swap `payload`.
    """
    id: WorkloadId
    payload: Any
    start_time: datetime
    admission: Admission
    plan: PhasePlan

    @property
    def accepted(self) -> bool:
        return self.admission is Admission.ACCEPTED

    def elapsed_seconds(self, now: datetime) -> int:
        return int((now - self.start_time).total_seconds())

    def is_running(self, now: datetime) -> bool:
        return self.accepted and not self.plan.is_terminated(self.elapsed_seconds(now))

    def usage_at(self, now: datetime) -> ResourceVector:
        return self.plan.usage_at(self.elapsed_seconds(now))

    def with_payload(self, payload: Any) -> WorkloadRecord:
        return replace(self, payload=payload)
