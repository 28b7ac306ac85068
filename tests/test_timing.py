from __future__ import annotations

from datetime import timedelta

import pytest

from runtimes.timing import compute_estimated_run_time, compute_fire_time, minutes_per_entrant

from .conftest import at


def test_first_entrant_runs_at_start_time(nine_am) -> None:
    assert compute_estimated_run_time(nine_am, 12, 1) == at(9, 0)


def test_fifth_entrant_at_twelve_per_hour(nine_am) -> None:
    assert compute_estimated_run_time(nine_am, 12, 5) == at(9, 20)


def test_fire_time_sixty_minutes_before_run() -> None:
    assert compute_fire_time(at(9, 20), 60) == at(8, 20)


def test_halving_throughput_doubles_spacing(nine_am) -> None:
    assert compute_estimated_run_time(nine_am, 6, 5) == at(9, 40)


@pytest.mark.parametrize("rate", [0, -12, float("nan")])
def test_non_positive_throughput_gives_none(nine_am, rate) -> None:
    assert compute_estimated_run_time(nine_am, rate, 5) is None


@pytest.mark.parametrize("ordinal", [0, -1])
def test_non_positive_ordinal_gives_none(nine_am, ordinal) -> None:
    assert compute_estimated_run_time(nine_am, 12, ordinal) is None


def test_missing_inputs_give_none(nine_am) -> None:
    assert compute_estimated_run_time(None, 12, 5) is None
    assert compute_estimated_run_time(nine_am, None, 5) is None
    assert compute_estimated_run_time(nine_am, 12, None) is None


def test_fractional_spacing_is_not_floored(nine_am) -> None:
    # 7 per hour -> 8.571428... minutes apart
    run_time = compute_estimated_run_time(nine_am, 7, 8)
    assert run_time == nine_am + timedelta(minutes=60)
    run_time = compute_estimated_run_time(nine_am, 7, 2)
    assert run_time == nine_am + timedelta(minutes=60 / 7)
    assert run_time.second == 34


def test_high_ordinals_do_not_accumulate_rounding(nine_am) -> None:
    # 45 per hour: 1.333... minutes, the 91st entrant goes exactly 2 hours in
    assert compute_estimated_run_time(nine_am, 45, 91) == at(11, 0)


def test_run_time_is_deterministic(nine_am) -> None:
    for rate, ordinal in [(12, 5), (7, 13), (45.5, 101)]:
        first = compute_estimated_run_time(nine_am, rate, ordinal)
        assert compute_estimated_run_time(nine_am, rate, ordinal) == first


def test_run_times_are_monotonic_in_ordinal(nine_am) -> None:
    times = [compute_estimated_run_time(nine_am, 7.5, n) for n in range(1, 60)]
    assert times == sorted(times)


def test_fire_time_missing_run_time() -> None:
    assert compute_fire_time(None, 30) is None


def test_fire_time_negative_offset_fires_after_run() -> None:
    assert compute_fire_time(at(9, 20), -15) == at(9, 35)


def test_fire_time_round_trip() -> None:
    run_time = at(9, 20, 34)
    for offset in [0, 15, 90, 240, -30]:
        assert compute_fire_time(compute_fire_time(run_time, offset), -offset) == run_time


def test_minutes_per_entrant() -> None:
    assert minutes_per_entrant(12) == 5
    assert minutes_per_entrant(8) == 7.5


@pytest.mark.parametrize("rate, position", [(12, 99999999999), (1e-9, 2)])
def test_run_time_past_datetime_range_gives_none(nine_am, rate, position) -> None:
    assert compute_estimated_run_time(nine_am, rate, position) is None


@pytest.mark.parametrize("offset", [10**12, -(10**12)])
def test_fire_time_past_datetime_range_gives_none(offset) -> None:
    assert compute_fire_time(at(9), offset) is None
