# vksim/model/errors.py
from __future__ import annotations


class SimError(Exception):
    """Base class for everything the simulator raises to its callers."""


class MissingSpec(SimError):
    """The workload carries no simSpec description at all."""

    def __init__(self, message: str = "simSpec not defined") -> None:
        super().__init__(message)


class MalformedSpec(SimError):
    """The simSpec description cannot be decoded into a list of phases."""


class InvalidQuantity(SimError):
    """
    A cpu/memory string is not a resource quantity.

    field: which field was rejected ("cpu", "memory", "pods", ...)
    value: the raw string as supplied
    """

    def __init__(self, field: str, value: object) -> None:
        self.field = field
        self.value = value
        super().__init__(f"Invalid {field} value {value!r}")


class NotFound(SimError):
    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Pod {key} does not exist")


class InvalidKey(SimError):
    """Namespace or name is empty, so no workload id can be built."""


class ConfigError(SimError):
    """The provider configuration file is unreadable or invalid."""
