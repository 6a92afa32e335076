import pytest

from vksim.model.profile import PhasePlan, PhaseSpec
from vksim.model.resource import ResourceVector, ZERO


LOW = ResourceVector(milli_cpu=100, memory_bytes=2**20)
HIGH = ResourceVector(milli_cpu=900, memory_bytes=2**30, gpu=1)
MID = ResourceVector(milli_cpu=400, memory_bytes=2**25)


@pytest.fixture
def plan() -> PhasePlan:
    # [0, 10) LOW, [10, 15) HIGH, [15, 45) MID
    return PhasePlan.of([PhaseSpec(10, LOW), PhaseSpec(5, HIGH), PhaseSpec(30, MID)])


def test_total_seconds(plan: PhasePlan):
    assert plan.total_seconds == 45
    assert len(plan) == 3


@pytest.mark.parametrize(
    "elapsed, expected",
    [(0, LOW), (9, LOW), (10, HIGH), (14, HIGH), (15, MID), (44, MID)],
)
def test_usage_follows_phase_windows(plan: PhasePlan, elapsed, expected):
    assert plan.usage_at(elapsed) == expected
    assert not plan.is_terminated(elapsed)


@pytest.mark.parametrize("elapsed", [45, 46, 10_000])
def test_usage_is_zero_once_terminated(plan: PhasePlan, elapsed):
    assert plan.usage_at(elapsed) == ZERO
    assert plan.is_terminated(elapsed)


def test_initial_demand_is_first_phase(plan: PhasePlan):
    assert plan.initial_demand() == LOW


def test_empty_plan_is_terminated_immediately():
    empty = PhasePlan()
    assert empty.total_seconds == 0
    assert empty.is_terminated(0)
    assert empty.usage_at(0) == ZERO
    assert empty.initial_demand() == ZERO
