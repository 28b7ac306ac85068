from __future__ import annotations

from datetime import datetime, timezone

import pytest

from runtimes.aggregate import ScheduleAggregate
from runready_admin.notifications import (
    AlertKey,
    InMemoryAlertBackend,
    JsonAlertBackend,
    NotificationScheduler,
)
from runready_admin.storage import CorruptStoreError

from .conftest import at


@pytest.fixture
def backend() -> InMemoryAlertBackend:
    return InMemoryAlertBackend()


@pytest.fixture
def scheduler(backend) -> NotificationScheduler:
    return NotificationScheduler(backend)


def _populate(aggregate: ScheduleAggregate) -> tuple[str, str, str]:
    dash = aggregate.add_entrant(name="Dash", ordinal_position=5)  # 09:20
    early = aggregate.add_reminder(dash.id, label="Lasix", offset_minutes=240)  # 05:20
    late = aggregate.add_reminder(dash.id, label="Warm-up", offset_minutes=30)  # 08:50
    aggregate.add_entrant(name="No draw")
    return dash.id, early.id, late.id


def test_only_future_reminders_are_registered(scheduler, backend, aggregate) -> None:
    dash_id, early_id, late_id = _populate(aggregate)
    snapshot = aggregate.to_snapshot()

    count = scheduler.schedule(snapshot, now=at(7))

    assert count == 1
    (alert,) = backend.pending()
    assert alert.key == AlertKey(snapshot.id, dash_id, late_id)
    assert alert.fires_at == at(8, 50)
    assert alert.title == "Dash - Warm-up"
    assert alert.body == "Time for Warm-up. Dash runs at 9:20 AM."


def test_fire_time_equal_to_now_is_not_registered(scheduler, aggregate) -> None:
    _populate(aggregate)

    assert scheduler.schedule(aggregate.to_snapshot(), now=at(8, 50)) == 0


def test_rescheduling_replaces_previous_alerts(scheduler, backend, aggregate) -> None:
    dash_id, _, late_id = _populate(aggregate)
    scheduler.schedule(aggregate.to_snapshot(), now=at(4))
    assert len(backend.pending()) == 2

    aggregate.remove_reminder(dash_id, late_id)
    scheduler.schedule(aggregate.to_snapshot(), now=at(4))

    assert [a.title for a in backend.pending()] == ["Dash - Lasix"]


def test_disabled_notifications_register_nothing(scheduler, backend, aggregate) -> None:
    _populate(aggregate)
    scheduler.schedule(aggregate.to_snapshot(), now=at(4))

    aggregate.set_notifications_enabled(False)
    count = scheduler.schedule(aggregate.to_snapshot(), now=at(4))

    assert count == 0
    assert backend.pending() == []


def test_cancel_is_idempotent(scheduler, aggregate) -> None:
    _populate(aggregate)
    scheduler.schedule(aggregate.to_snapshot(), now=at(4))

    assert scheduler.cancel(aggregate.event_id) == 2
    assert scheduler.cancel(aggregate.event_id) == 0
    assert scheduler.cancel("never-scheduled") == 0


def test_cancel_leaves_other_events_alone(scheduler, backend, aggregate, nine_am) -> None:
    _populate(aggregate)
    other = ScheduleAggregate(name="Other")
    other.update_parameters(start_time=nine_am, throughput_per_hour="12")
    entrant = other.add_entrant(ordinal_position=1)
    other.add_reminder(entrant.id, label="Tack")

    scheduler.schedule(aggregate.to_snapshot(), now=at(4))
    scheduler.schedule(other.to_snapshot(), now=at(4))
    scheduler.cancel(aggregate.event_id)

    assert [a.event_id for a in backend.pending()] == [other.event_id]


def test_pending_for_sorts_by_fire_time(scheduler, aggregate) -> None:
    _populate(aggregate)
    scheduler.schedule(aggregate.to_snapshot(), now=at(4))

    alerts = scheduler.pending_for(aggregate.event_id)

    assert [a.fires_at for a in alerts] == [at(5, 20), at(8, 50)]


def test_json_backend_persists_alerts(tmp_path, aggregate) -> None:
    _populate(aggregate)
    path = tmp_path / "alerts.json"
    NotificationScheduler(JsonAlertBackend(path)).schedule(aggregate.to_snapshot(), now=at(4))

    reloaded = NotificationScheduler(JsonAlertBackend(path))

    assert len(reloaded.pending_for(aggregate.event_id)) == 2
    assert reloaded.cancel(aggregate.event_id) == 2
    assert JsonAlertBackend(path).pending() == []


def test_twenty_four_hour_body(backend, aggregate) -> None:
    _populate(aggregate)
    NotificationScheduler(backend, twenty_four_hour=True).schedule(aggregate.to_snapshot(), now=at(8))

    (alert,) = backend.pending()
    assert alert.body == "Time for Warm-up. Dash runs at 09:20."


def test_offset_aware_start_time_schedules_against_local_clock(scheduler, backend, aggregate) -> None:
    _populate(aggregate)
    aggregate.update_parameters(start_time=datetime(2099, 6, 7, 9, tzinfo=timezone.utc))

    assert scheduler.schedule(aggregate.to_snapshot(), now=datetime.now()) == 2
    assert all(a.fires_at.tzinfo is None for a in backend.pending())


def test_json_backend_refuses_to_overwrite_corrupt_file(tmp_path, aggregate) -> None:
    _populate(aggregate)
    path = tmp_path / "alerts.json"
    path.write_text("[{\"event_id\": ")

    with pytest.raises(CorruptStoreError):
        NotificationScheduler(JsonAlertBackend(path)).schedule(aggregate.to_snapshot(), now=at(4))

    assert path.read_text() == "[{\"event_id\": "
    assert JsonAlertBackend(path).pending() == []
