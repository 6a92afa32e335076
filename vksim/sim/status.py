# vksim/sim/status.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import List, Optional, Sequence, Union

from ..model.entities import WorkloadRecord
from ..model.resource import ResourceVector


REJECTED_REASON = "OverCapacity"
REJECTED_MESSAGE = "Pod was rejected: its resource demand exceeds the remaining node capacity"


# ---------------------------------------------------------------------------
# Lifecycle phase (one of three variants)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Rejected:
    reason: str = REJECTED_REASON
    message: str = REJECTED_MESSAGE
    name: str = field(default="Rejected", init=False)


@dataclass(frozen=True)
class Running:
    started_at: datetime
    usage: ResourceVector
    name: str = field(default="Running", init=False)


@dataclass(frozen=True)
class Succeeded:
    started_at: datetime
    finished_at: datetime
    name: str = field(default="Succeeded", init=False)


LifecyclePhase = Union[Rejected, Running, Succeeded]


def derive_phase(record: WorkloadRecord, now: datetime) -> LifecyclePhase:
    """
    Phase of a workload at `now`.

    Pure function of the record and the clock: nothing ever flips a record
    from Running to Succeeded, each query recomputes it.
    """
    if not record.accepted:
        return Rejected()

    elapsed = record.elapsed_seconds(now)
    if record.plan.is_terminated(elapsed):
        return Succeeded(
            started_at=record.start_time,
            finished_at=record.start_time + timedelta(seconds=record.plan.total_seconds),
        )
    return Running(started_at=record.start_time, usage=record.plan.usage_at(elapsed))


# ---------------------------------------------------------------------------
# Container states / conditions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ContainerState:
    name: str
    started_at: datetime
    # set once the container has terminated
    finished_at: Optional[datetime] = None
    exit_code: Optional[int] = None

    @property
    def terminated(self) -> bool:
        return self.finished_at is not None


@dataclass(frozen=True)
class Condition:
    type: str
    status: bool = True


SYNTHETIC_CONDITIONS = ("Initialized", "Ready", "PodScheduled")


def container_states(phase: LifecyclePhase, names: Sequence[str]) -> List[ContainerState]:
    if isinstance(phase, Succeeded):
        return [
            ContainerState(name=n, started_at=phase.started_at, finished_at=phase.finished_at, exit_code=0)
            for n in names
        ]
    if isinstance(phase, Running):
        return [ContainerState(name=n, started_at=phase.started_at) for n in names]
    return []


def pod_conditions(phase: LifecyclePhase) -> List[Condition]:
    # static, not derived from the simulation
    if isinstance(phase, Rejected):
        return []
    return [Condition(type=t) for t in SYNTHETIC_CONDITIONS]


@dataclass(frozen=True)
class WorkloadStatus:
    phase: LifecyclePhase
    containers: List[ContainerState]
    conditions: List[Condition]


def build_status(record: WorkloadRecord, now: datetime, container_names: Sequence[str] = ()) -> WorkloadStatus:
    phase = derive_phase(record, now)
    return WorkloadStatus(
        phase=phase,
        containers=container_states(phase, container_names),
        conditions=pod_conditions(phase),
    )
