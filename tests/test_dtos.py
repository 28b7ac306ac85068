from __future__ import annotations

from datetime import date, datetime, timezone

import pytest
from pydantic import ValidationError

from runtimes.dtos import EntrantSnapshot, ParametersSnapshot, ScheduleSnapshot, parse_event_date, parse_start_time


@pytest.mark.parametrize("value", ["2025-06-07", "07.06.2025", "2025-06-07T10:00:00", date(2025, 6, 7)])
def test_parse_event_date_formats(value) -> None:
    assert parse_event_date(value) == date(2025, 6, 7)


def test_parse_event_date_empty() -> None:
    assert parse_event_date("") is None
    assert parse_event_date(None) is None


def test_parse_event_date_invalid() -> None:
    with pytest.raises(ValueError):
        parse_event_date("June 7th")


def test_numeric_form_values_are_coerced() -> None:
    assert EntrantSnapshot(id="e1", ordinal_position=5).ordinal_position == "5"
    assert ParametersSnapshot(throughput_per_hour=12).throughput_per_hour == "12"


def test_snapshot_is_frozen() -> None:
    snapshot = ScheduleSnapshot(id="s1", created_at=datetime(2025, 6, 1), updated_at=datetime(2025, 6, 1))
    with pytest.raises(ValidationError):
        snapshot.name = "changed"


def test_snapshot_json_round_trip_with_nulls() -> None:
    snapshot = ScheduleSnapshot(
        id="s1",
        event_date="07.06.2025",
        entrants=(EntrantSnapshot(id="e1", name="Dash"),),
        created_at=datetime(2025, 6, 1, 8),
        updated_at=datetime(2025, 6, 1, 8),
    )

    restored = ScheduleSnapshot.model_validate_json(snapshot.model_dump_json())

    assert restored == snapshot
    assert restored.parameters.start_time is None
    assert restored.entrants[0].name == "Dash"


def test_parameters_accept_clock_time() -> None:
    params = ParametersSnapshot.model_validate({"start_time": "09:00", "throughput_per_hour": "12"})

    assert params.start_time == datetime.combine(date.today(), datetime.min.time()).replace(hour=9)


def test_clock_time_is_placed_on_event_date() -> None:
    snapshot = ScheduleSnapshot.model_validate({
        "id": "s1",
        "event_date": "2025-06-07",
        "parameters": {"start_time": "09:00", "throughput_per_hour": "12"},
        "created_at": "2025-06-01T08:00:00",
        "updated_at": "2025-06-01T08:00:00",
    })

    assert snapshot.parameters.start_time == datetime(2025, 6, 7, 9, 0)


def test_offset_aware_start_time_becomes_local_naive() -> None:
    expected = datetime(2099, 6, 7, 7, tzinfo=timezone.utc).astimezone().replace(tzinfo=None)

    params = ParametersSnapshot.model_validate({"start_time": "2099-06-07T09:00+02:00"})

    assert params.start_time == expected
    assert parse_start_time(datetime(2099, 6, 7, 7, tzinfo=timezone.utc)) == expected


def test_invalid_start_time_is_rejected() -> None:
    with pytest.raises(ValidationError):
        ParametersSnapshot.model_validate({"start_time": "nine"})
