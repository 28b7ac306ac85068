from __future__ import annotations

from datetime import date, datetime

import pytest

from runtimes.aggregate import ScheduleAggregate
from runtimes.models import ScheduleParameters


EVENT_DAY = date(2025, 6, 7)


def at(hour: int, minute: int = 0, second: int = 0) -> datetime:
    return datetime.combine(EVENT_DAY, datetime.min.time()).replace(
        hour=hour, minute=minute, second=second
    )


@pytest.fixture
def nine_am() -> datetime:
    return at(9)


@pytest.fixture
def aggregate(nine_am: datetime) -> ScheduleAggregate:
    """Event starting 09:00 at 12 entrants per hour (5 minutes apart)."""
    return ScheduleAggregate(
        name="Saturday Barrels",
        event_date=EVENT_DAY,
        parameters=ScheduleParameters(start_time=nine_am, throughput_per_hour="12"),
    )


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    monkeypatch.setenv("RUNREADY_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("RUNREADY_NOTIFICATIONS", "true")
    monkeypatch.setenv("RUNREADY_CLOCK", "24h")
    return tmp_path
