# vksim/model/resource.py
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from ..types import CpuMillis, Bytes, GpuCount


@dataclass(frozen=True)
class ResourceVector:
    """
    Resource amount of a workload (or a sum of workloads).

    Same units as the rest of the simulator:
      - CPU: milliCPU
      - RAM: bytes
      - GPU: whole devices
    """
    milli_cpu: CpuMillis = CpuMillis(0)
    memory_bytes: Bytes = Bytes(0)
    gpu: GpuCount = GpuCount(0)

    def __add__(self, other: ResourceVector) -> ResourceVector:
        return ResourceVector(
            milli_cpu=CpuMillis(self.milli_cpu + other.milli_cpu),
            memory_bytes=Bytes(self.memory_bytes + other.memory_bytes),
            gpu=GpuCount(self.gpu + other.gpu),
        )

    def __sub__(self, other: ResourceVector) -> ResourceVector:
        return ResourceVector(
            milli_cpu=CpuMillis(self.milli_cpu - other.milli_cpu),
            memory_bytes=Bytes(self.memory_bytes - other.memory_bytes),
            gpu=GpuCount(self.gpu - other.gpu),
        )

    def exceeded_limits(
        self,
        milli_cpu: int,
        memory_bytes: int,
        gpu: Optional[int] = None,
    ) -> List[str]:
        """
        Names of the limits this vector is strictly above.

        gpu=None means "no GPU limit", GPU demand is then never reported.
        """
        over: List[str] = []
        if self.milli_cpu > milli_cpu:
            over.append("cpu")
        if self.memory_bytes > memory_bytes:
            over.append("memory")
        if gpu is not None and self.gpu > gpu:
            over.append("gpu")
        return over


ZERO = ResourceVector()
