# vksim/spec/schema.py
from __future__ import annotations

from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field, StrictInt, TypeAdapter, field_validator

from ..types import GPU_RESOURCE


def number_to_str(v: Any) -> Any:
    # `cpu: 2` is as common in hand-written specs as `cpu: "2"`
    if isinstance(v, (int, float)) and not isinstance(v, bool):
        return str(v)
    return v


class SimSpecPhase(BaseModel):
    """One entry of the simSpec annotation, before quantity parsing."""
    model_config = ConfigDict(populate_by_name=True)

    # int32 on the wire
    seconds: StrictInt = Field(gt=0, le=2**31 - 1)
    # absent quantities stay "" and fail quantity parsing
    cpu: str = ""
    memory: str = ""
    gpu: StrictInt = Field(default=0, ge=0, alias=GPU_RESOURCE)

    @field_validator("cpu", "memory", mode="before")
    @classmethod
    def coerce_quantity(cls, v: Any) -> Any:
        return number_to_str(v)


SIM_SPEC_ADAPTER: TypeAdapter[List[SimSpecPhase]] = TypeAdapter(List[SimSpecPhase])


class NodeConfig(BaseModel):
    """
    Per-node section of the provider config file.

    Empty / missing fields fall back to the defaults in vksim.config.
    """
    model_config = ConfigDict(populate_by_name=True)

    cpu: str = ""
    memory: str = ""
    pods: str = ""
    gpu: str = Field(default="", alias=GPU_RESOURCE)

    @field_validator("cpu", "memory", "pods", "gpu", mode="before")
    @classmethod
    def coerce_quantity(cls, v: Any) -> Any:
        return number_to_str(v)
