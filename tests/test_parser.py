import json

import pytest

from vksim.model.errors import InvalidQuantity, MalformedSpec, MissingSpec
from vksim.model.resource import ResourceVector
from vksim.spec.parser import parse_cpu, parse_memory, parse_sim_spec


def test_single_phase():
    plan = parse_sim_spec('[{"seconds": 10, "cpu": "500m", "memory": "1Gi"}]')

    assert len(plan) == 1
    assert plan.phases[0].seconds == 10
    assert plan.phases[0].demand == ResourceVector(milli_cpu=500, memory_bytes=2**30, gpu=0)


def test_multiple_phases_keep_order_and_gpu():
    raw = json.dumps([
        {"seconds": 5, "cpu": "2", "memory": "512Mi", "nvidia.com/gpu": 1},
        {"seconds": 20, "cpu": "1.5", "memory": "128974848", "nvidia.com/gpu": 2},
    ])
    plan = parse_sim_spec(raw)

    assert [p.seconds for p in plan.phases] == [5, 20]
    assert plan.phases[0].demand == ResourceVector(2000, 512 * 2**20, 1)
    assert plan.phases[1].demand == ResourceVector(1500, 128974848, 2)
    assert plan.total_seconds == 25


def test_accepts_decoded_list_and_numeric_quantities():
    plan = parse_sim_spec([{"seconds": 1, "cpu": 2, "memory": 1024}])
    assert plan.phases[0].demand == ResourceVector(2000, 1024, 0)


@pytest.mark.parametrize(
    "raw, field",
    [
        ('[{"seconds": 3, "memory": "1Gi"}]', "cpu"),
        ('[{"seconds": 3, "cpu": "1"}]', "memory"),
    ],
)
def test_missing_cpu_or_memory_is_invalid(raw, field):
    with pytest.raises(InvalidQuantity) as exc_info:
        parse_sim_spec(raw)

    assert exc_info.value.field == field
    assert exc_info.value.value == ""


def test_empty_list_is_an_empty_plan():
    plan = parse_sim_spec("[]")
    assert len(plan) == 0
    assert plan.total_seconds == 0


def test_missing_spec():
    with pytest.raises(MissingSpec):
        parse_sim_spec(None)


@pytest.mark.parametrize(
    "raw",
    [
        "not json",
        '{"seconds": 10}',
        '[{"seconds": "ten", "cpu": "1", "memory": "1Gi"}]',
        '[{"cpu": "1", "memory": "1Gi"}]',
        '[{"seconds": 0, "cpu": "1", "memory": "1Gi"}]',
        '[{"seconds": 2147483648, "cpu": "1", "memory": "1Gi"}]',
        '[{"seconds": 5, "cpu": "1", "memory": "1Gi", "nvidia.com/gpu": -1}]',
        "null",
    ],
)
def test_malformed_spec(raw):
    with pytest.raises(MalformedSpec):
        parse_sim_spec(raw)


def test_invalid_cpu_names_field_and_value():
    with pytest.raises(InvalidQuantity) as exc_info:
        parse_sim_spec('[{"seconds": 10, "cpu": "notaquantity", "memory": "1Gi"}]')

    assert exc_info.value.field == "cpu"
    assert exc_info.value.value == "notaquantity"
    assert "notaquantity" in str(exc_info.value)


def test_invalid_memory_anywhere_fails_whole_plan():
    raw = json.dumps([
        {"seconds": 10, "cpu": "1", "memory": "1Gi"},
        {"seconds": 10, "cpu": "1", "memory": "lots"},
    ])
    with pytest.raises(InvalidQuantity) as exc_info:
        parse_sim_spec(raw)

    assert exc_info.value.field == "memory"
    assert exc_info.value.value == "lots"


@pytest.mark.parametrize("raw", ["", "-1", "Infinity", "NaN", "1Qi"])
def test_rejects_non_quantities(raw):
    with pytest.raises(InvalidQuantity):
        parse_cpu(raw)


def test_quantities_round_up():
    assert parse_cpu("0.0001") == 1
    assert parse_cpu("250m") == 250
    assert parse_memory("1.5Gi") == 1610612736
    assert parse_memory("1k") == 1000


def test_longest_int32_phase():
    plan = parse_sim_spec([{"seconds": 2**31 - 1, "cpu": "1", "memory": "1Gi"}])
    assert plan.total_seconds == 2**31 - 1
