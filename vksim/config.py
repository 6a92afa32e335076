# vksim/config.py
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, Optional, Union

from pydantic import ValidationError

from .model.entities import NodeCapacity
from .model.errors import ConfigError, InvalidQuantity
from .spec.parser import format_cpu, format_memory, parse_resource_quantity, to_milli, to_units
from .spec.schema import NodeConfig
from .types import CpuMillis, Bytes, GpuCount, GPU_RESOURCE

log = logging.getLogger(__name__)

# Provider configuration defaults
DEFAULT_CPU_CAPACITY = "20"
DEFAULT_MEMORY_CAPACITY = "100Gi"
DEFAULT_POD_CAPACITY = "20"


def default_node_config() -> NodeConfig:
    return NodeConfig(cpu=DEFAULT_CPU_CAPACITY, memory=DEFAULT_MEMORY_CAPACITY, pods=DEFAULT_POD_CAPACITY)


def _with_defaults(cfg: NodeConfig) -> NodeConfig:
    return cfg.model_copy(update={
        "cpu": cfg.cpu or DEFAULT_CPU_CAPACITY,
        "memory": cfg.memory or DEFAULT_MEMORY_CAPACITY,
        "pods": cfg.pods or DEFAULT_POD_CAPACITY,
    })


def load_node_config(path: Optional[Union[str, Path]], node_name: str) -> NodeConfig:
    """
    Reads the provider config file.

    Expected format (one section per virtual node):
    {
      "vk-sim-1": {"cpu": "8", "memory": "32Gi", "pods": "20", "nvidia.com/gpu": "2"},
      ...
    }

    No file, or no section for `node_name`: defaults. Empty fields in a
    section: defaults for those fields. GPU has no default (no GPU limit).
    """
    if path is None or not Path(path).exists():
        log.info(f"No provider config at {path}, using defaults")
        cfg = default_node_config()
    else:
        try:
            data = json.loads(Path(path).read_text("utf-8"))
        except (OSError, ValueError) as e:
            raise ConfigError(f"Cannot read provider config {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Provider config {path} must map node names to sections")

        section = data.get(node_name)
        if section is None:
            log.info(f"No section for node {node_name!r} in {path}, using defaults")
            cfg = default_node_config()
        else:
            try:
                cfg = _with_defaults(NodeConfig.model_validate(section))
            except ValidationError as e:
                raise ConfigError(f"Invalid section {node_name!r} in {path}: {e}") from e

    # fail at startup, not on the first admission
    capacity_from_config(cfg)
    return cfg


def capacity_from_config(cfg: NodeConfig) -> NodeCapacity:
    try:
        cpu = parse_resource_quantity("cpu", cfg.cpu)
        memory = parse_resource_quantity("memory", cfg.memory)
        pods = parse_resource_quantity("pods", cfg.pods)
        gpu = parse_resource_quantity("gpu", cfg.gpu) if cfg.gpu else None
    except InvalidQuantity as e:
        raise ConfigError(str(e)) from e

    return NodeCapacity(
        milli_cpu=CpuMillis(to_milli(cpu)),
        memory_bytes=Bytes(to_units(memory)),
        max_pods=to_units(pods),
        gpu=GpuCount(to_units(gpu)) if gpu is not None else None,
    )


def resource_list(capacity: NodeCapacity) -> Dict[str, str]:
    """Capacity as a Kubernetes resource list (node status)."""
    result = {
        "cpu": format_cpu(capacity.milli_cpu),
        "memory": format_memory(capacity.memory_bytes),
        "pods": str(capacity.max_pods),
    }
    if capacity.gpu is not None:
        result[GPU_RESOURCE] = str(capacity.gpu)
    return result
