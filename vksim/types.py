# vksim/types.py
from __future__ import annotations

from typing import NewType


# Ids / names
WorkloadId = NewType("WorkloadId", str)  # "{namespace}-{name}"
Namespace = NewType("Namespace", str)
NodeName = NewType("NodeName", str)

# Resources
CpuMillis = NewType("CpuMillis", int)  # milliCPU
Bytes = NewType("Bytes", int)          # bytes
GpuCount = NewType("GpuCount", int)    # whole devices, no fractions

# Extended resource name used for GPUs in pod specs and resource lists
GPU_RESOURCE = "nvidia.com/gpu"
