"""
Pydantic DTOs for persisting and handing off schedules.

Snapshots are the immutable, JSON-serialisable view of a schedule consumed
by storage and alert scheduling. Timestamps serialise as ISO-8601 strings
and missing values as explicit nulls.
"""

from datetime import date, datetime

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .models import (
    DEFAULT_REMINDER_OFFSET,
    Entrant,
    Reminder,
    ScheduleParameters,
    new_id,
    to_local_naive,
)


def parse_event_date(v: str | date | None) -> date | None:
    """Parse an event date from YYYY-MM-DD, DD.MM.YYYY or ISO datetime."""
    if v is None or v == "":
        return None
    if isinstance(v, datetime):
        return v.date()
    if isinstance(v, date):
        return v
    if isinstance(v, str):
        try:
            return datetime.strptime(v.strip(), '%Y-%m-%d').date()
        except ValueError:
            try:
                return datetime.strptime(v.strip(), '%d.%m.%Y').date()
            except ValueError:
                return datetime.fromisoformat(v.strip()).date()
    raise ValueError(f"Invalid date format: {v}")


def parse_start_time(v: str | datetime | None, on_date: date | None = None) -> datetime | None:
    """
    Parse a start time from HH:MM or an ISO timestamp.

    HH:MM is placed on on_date (today if not given). Offset-aware values are
    converted to naive host-local time.
    """
    if v is None:
        return None
    if isinstance(v, datetime):
        return to_local_naive(v)
    if isinstance(v, str):
        if not v.strip():
            return None
        try:
            clock = datetime.strptime(v.strip(), '%H:%M').time()
            return datetime.combine(on_date or date.today(), clock)
        except ValueError:
            return to_local_naive(datetime.fromisoformat(v.strip()))
    raise ValueError(f"Invalid time format: {v}")


class ReminderSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Reminder identifier, stable across edits")
    label: str = Field(default="", description="Task description (e.g., 'Lasix')")
    offset_minutes: int = Field(
        default=DEFAULT_REMINDER_OFFSET,
        description="Minutes before the run time the reminder fires",
    )
    fires_at: datetime | None = Field(default=None, description="Derived fire time")

    @classmethod
    def from_model(cls, reminder: Reminder) -> 'ReminderSnapshot':
        return cls(
            id=reminder.id,
            label=reminder.label,
            offset_minutes=reminder.offset_minutes,
            fires_at=reminder.fires_at,
        )

    def to_model(self) -> Reminder:
        return Reminder(
            id=self.id,
            label=self.label,
            offset_minutes=self.offset_minutes,
            fires_at=self.fires_at,
        )


class EntrantSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Entrant identifier, stable across edits")
    name: str = Field(default="", description="Entrant name")
    ordinal_position: str = Field(default="", description="Draw position as entered")
    estimated_run_time: datetime | None = Field(default=None, description="Derived run time")
    reminders: tuple[ReminderSnapshot, ...] = ()

    @field_validator('ordinal_position', mode='before')
    @classmethod
    def coerce_ordinal(cls, v: str | int | None) -> str:
        """Accept numeric draw positions written by hand."""
        if v is None:
            return ""
        return str(v).strip()

    @classmethod
    def from_model(cls, entrant: Entrant) -> 'EntrantSnapshot':
        return cls(
            id=entrant.id,
            name=entrant.name,
            ordinal_position=entrant.ordinal_position,
            estimated_run_time=entrant.estimated_run_time,
            reminders=tuple(ReminderSnapshot.from_model(r) for r in entrant.reminders),
        )

    def to_model(self) -> Entrant:
        return Entrant(
            id=self.id,
            name=self.name,
            ordinal_position=self.ordinal_position,
            estimated_run_time=self.estimated_run_time,
            reminders=tuple(r.to_model() for r in self.reminders),
        )


class ParametersSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    start_time: datetime | None = Field(default=None, description="Run time of the first entrant")
    throughput_per_hour: str = Field(default="", description="Entrants per hour as entered")

    @field_validator('throughput_per_hour', mode='before')
    @classmethod
    def coerce_throughput(cls, v: str | int | float | None) -> str:
        if v is None:
            return ""
        return str(v).strip()

    @field_validator('start_time', mode='before')
    @classmethod
    def parse_time(cls, v: str | datetime | None) -> datetime | None:
        return parse_start_time(v)

    @classmethod
    def from_model(cls, parameters: ScheduleParameters) -> 'ParametersSnapshot':
        return cls(
            start_time=parameters.start_time,
            throughput_per_hour=parameters.throughput_per_hour,
        )

    def to_model(self) -> ScheduleParameters:
        return ScheduleParameters(
            start_time=self.start_time,
            throughput_per_hour=self.throughput_per_hour,
        )


class ScheduleSnapshot(BaseModel):
    """
    A saved event: parameters, entrants and their reminders.

    Entrant and reminder order is significant and preserved.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Opaque event identifier")
    name: str = Field(default="", description="Event name")
    event_date: date | None = Field(default=None, description="Day of the event")
    parameters: ParametersSnapshot = Field(default_factory=ParametersSnapshot)
    entrants: tuple[EntrantSnapshot, ...] = ()
    notifications_enabled: bool = True
    created_at: datetime
    updated_at: datetime

    @model_validator(mode='before')
    @classmethod
    def place_start_on_event_date(cls, data: Any) -> Any:
        """Put a bare HH:MM start time on the event date rather than today."""
        if not isinstance(data, dict):
            return data
        parameters = data.get('parameters')
        if not isinstance(parameters, dict) or not isinstance(parameters.get('start_time'), str):
            return data
        try:
            on_date = parse_event_date(data.get('event_date'))
        except ValueError:
            return data
        start_time = parse_start_time(parameters['start_time'], on_date)
        return {**data, 'parameters': {**parameters, 'start_time': start_time}}

    @field_validator('event_date', mode='before')
    @classmethod
    def parse_date(cls, v: str | date | None) -> date | None:
        return parse_event_date(v)

    def iter_reminders(self):
        """Yield (entrant, reminder) pairs in display order."""
        for entrant in self.entrants:
            for reminder in entrant.reminders:
                yield entrant, reminder


class ReminderTemplate(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    label: str
    offset_minutes: int = DEFAULT_REMINDER_OFFSET


class EntrantTemplate(BaseModel):
    """Reusable set of reminders for an entrant that competes regularly."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    name: str
    reminder_templates: tuple[ReminderTemplate, ...] = ()
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)
