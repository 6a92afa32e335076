# vksim/model/profile.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Tuple

from .resource import ResourceVector, ZERO
from ..types import CpuMillis, Bytes, GpuCount


@dataclass(frozen=True)
class PhaseSpec:
    """One phase of a workload: `seconds` of constant resource demand."""
    seconds: int
    demand: ResourceVector


@dataclass(frozen=True)
class PhasePlan:
    """
    Time-phased resource profile of a workload.

    Phases follow each other without gaps starting at elapsed time 0:
    phase i covers [sum(seconds[:i]), sum(seconds[:i + 1])).
    An empty plan describes a workload that has already finished.
    """
    phases: Tuple[PhaseSpec, ...] = ()

    @classmethod
    def of(cls, phases: Iterable[PhaseSpec]) -> PhasePlan:
        return cls(tuple(phases))

    @property
    def total_seconds(self) -> int:
        return sum(p.seconds for p in self.phases)

    def usage_at(self, elapsed_seconds: int) -> ResourceVector:
        offset = 0
        for phase in self.phases:
            if elapsed_seconds < offset + phase.seconds:
                return phase.demand
            offset += phase.seconds
        return ZERO

    def is_terminated(self, elapsed_seconds: int) -> bool:
        return elapsed_seconds >= self.total_seconds

    def initial_demand(self) -> ResourceVector:
        """Demand at the moment the workload starts."""
        return self.usage_at(0)

    def peak(self) -> ResourceVector:
        """Component-wise max over all phases (reporting only)."""
        if not self.phases:
            return ZERO
        return ResourceVector(
            milli_cpu=CpuMillis(max(p.demand.milli_cpu for p in self.phases)),
            memory_bytes=Bytes(max(p.demand.memory_bytes for p in self.phases)),
            gpu=GpuCount(max(p.demand.gpu for p in self.phases)),
        )

    def __len__(self) -> int:
        return len(self.phases)
