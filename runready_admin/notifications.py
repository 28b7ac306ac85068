"""
Local alert scheduling for reminders.

Alerts are one-shot and keyed by (event, entrant, reminder). Scheduling an
event always replaces whatever was registered for it before.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import NamedTuple, Protocol

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError

from runtimes.dtos import ScheduleSnapshot
from runtimes.models import entrant_display_name
from runready_reports.formatting import format_time

from .storage import CorruptStoreError

# Set up logging
logger = logging.getLogger(__name__)


class AlertKey(NamedTuple):
    event_id: str
    entrant_id: str
    reminder_id: str


class ScheduledAlert(BaseModel):
    """A one-shot alert for a single reminder."""

    model_config = ConfigDict(frozen=True)

    event_id: str
    entrant_id: str
    reminder_id: str
    title: str
    body: str
    fires_at: datetime

    @property
    def key(self) -> AlertKey:
        return AlertKey(self.event_id, self.entrant_id, self.reminder_id)


class AlertBackend(Protocol):
    """Where alerts are actually registered."""

    def register(self, alert: ScheduledAlert) -> None: ...

    def cancel(self, key: AlertKey) -> None: ...

    def pending(self) -> list[ScheduledAlert]: ...


class InMemoryAlertBackend:
    """Alerts held in process memory."""

    def __init__(self):
        self.alerts: dict[AlertKey, ScheduledAlert] = {}

    def register(self, alert: ScheduledAlert) -> None:
        self.alerts[alert.key] = alert

    def cancel(self, key: AlertKey) -> None:
        self.alerts.pop(key, None)

    def pending(self) -> list[ScheduledAlert]:
        return list(self.alerts.values())


class JsonAlertBackend:
    """Alerts persisted to a local JSON file."""

    _adapter = TypeAdapter(list[ScheduledAlert])

    def __init__(self, path: Path):
        self.path = Path(path)

    def register(self, alert: ScheduledAlert) -> None:
        alerts = {a.key: a for a in self._load_for_write()}
        alerts[alert.key] = alert
        self._write(list(alerts.values()))

    def cancel(self, key: AlertKey) -> None:
        alerts = self._load_for_write()
        remaining = [a for a in alerts if a.key != key]
        if len(remaining) != len(alerts):
            self._write(remaining)

    def pending(self) -> list[ScheduledAlert]:
        if not self.path.exists():
            return []
        try:
            return self._adapter.validate_json(self.path.read_bytes())
        except (OSError, ValidationError) as e:
            logger.error(f"Error loading alerts from {self.path}: {e}")
            return []

    def _load_for_write(self) -> list[ScheduledAlert]:
        if not self.path.exists():
            return []
        try:
            return self._adapter.validate_json(self.path.read_bytes())
        except (OSError, ValidationError) as e:
            raise CorruptStoreError(self.path, e) from e

    def _write(self, alerts: list[ScheduledAlert]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_bytes(self._adapter.dump_json(alerts, indent=2))


class NotificationScheduler:
    """Registers and cancels alerts for saved schedules."""

    def __init__(self, backend: AlertBackend, twenty_four_hour: bool = False):
        self.backend = backend
        self.twenty_four_hour = twenty_four_hour

    def schedule(self, snapshot: ScheduleSnapshot, now: datetime | None = None) -> int:
        """
        Replace the event's alerts with one per upcoming reminder.

        Args:
            snapshot: Schedule with derived fire times
            now: Reference time; only reminders firing strictly after it are
                registered (defaults to the host's local clock)

        Returns:
            Number of alerts registered
        """
        self.cancel(snapshot.id)

        if not snapshot.notifications_enabled:
            logger.info(f"Notifications disabled for schedule: {snapshot.id}")
            return 0

        now = now or datetime.now()
        scheduled_count = 0

        for entrant, reminder in snapshot.iter_reminders():
            if reminder.fires_at is None or reminder.fires_at <= now:
                continue

            name = entrant_display_name(entrant.name, entrant.ordinal_position)
            run_time = format_time(entrant.estimated_run_time, self.twenty_four_hour)
            alert = ScheduledAlert(
                event_id=snapshot.id,
                entrant_id=entrant.id,
                reminder_id=reminder.id,
                title=f"{name} - {reminder.label}",
                body=f"Time for {reminder.label}. {name} runs at {run_time}.",
                fires_at=reminder.fires_at,
            )
            self.backend.register(alert)
            scheduled_count += 1
            logger.debug(f"Scheduled alert for {alert.title} at {alert.fires_at}")

        logger.info(f"Scheduled {scheduled_count} alerts for schedule {snapshot.id}")
        return scheduled_count

    def cancel(self, event_id: str) -> int:
        """Cancel every alert registered for an event. Returns how many."""
        keys = [a.key for a in self.backend.pending() if a.event_id == event_id]
        for key in keys:
            self.backend.cancel(key)
        logger.info(f"Cancelled {len(keys)} alerts for schedule {event_id}")
        return len(keys)

    def pending_for(self, event_id: str) -> list[ScheduledAlert]:
        """Registered alerts of one event, earliest first."""
        alerts = [a for a in self.backend.pending() if a.event_id == event_id]
        return sorted(alerts, key=lambda a: a.fires_at)
