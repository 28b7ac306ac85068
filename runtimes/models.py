"""Data model for run-time scheduling.

Entrants, reminders and schedule parameters are immutable; every edit
produces a new object so that entrants untouched by an edit stay the
exact same object.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime
from uuid import uuid4


# Offset assigned to a freshly added reminder
DEFAULT_REMINDER_OFFSET = 60

# Preset reminder offsets offered when editing a reminder (label, minutes)
OFFSET_OPTIONS: list[tuple[str, int]] = [
    ("15 min", 15),
    ("30 min", 30),
    ("45 min", 45),
    ("1 hr", 60),
    ("1.5 hrs", 90),
    ("2 hrs", 120),
    ("2.5 hrs", 150),
    ("3 hrs", 180),
    ("4 hrs", 240),
]


def new_id() -> str:
    """Generate an opaque identifier for events, entrants and reminders."""
    return uuid4().hex


def to_local_naive(value: datetime | None) -> datetime | None:
    """Convert an offset-aware timestamp to naive host-local time."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def entrant_display_name(name: str, ordinal_position: str) -> str:
    """Entrant name, falling back to the draw position."""
    if name:
        return name
    if ordinal_position:
        return f"Entrant #{ordinal_position}"
    return "Unnamed entrant"


def normalize_form_value(value: str | int | float | None) -> str:
    """Normalise a form value to the string that gets stored."""
    if value is None:
        return ""
    return str(value).strip()


def parse_throughput(value: str | int | float | None) -> float | None:
    """
    Parse an entrants-per-hour value.

    Returns None for blank, non-numeric or non-finite input. Zero and
    negative values are returned as-is; the calculator rejects them.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        rate = float(str(value).strip())
    except ValueError:
        return None
    if not math.isfinite(rate):
        return None
    return rate


def parse_ordinal(value: str | int | float | None) -> int | None:
    """
    Parse an ordinal (draw) position.

    Accepts integers and integral floats ("5", 5, 5.0). Anything else,
    including "5.5" and "", parses to None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        number = float(str(value).strip())
    except ValueError:
        return None
    if not math.isfinite(number) or not number.is_integer():
        return None
    return int(number)


@dataclass(frozen=True)
class ScheduleParameters:
    """Global throughput parameters of one event."""

    start_time: datetime | None = None
    throughput_per_hour: str = ""  # Raw form value, e.g. "12" or "7.5"

    @property
    def rate(self) -> float | None:
        return parse_throughput(self.throughput_per_hour)

    def is_valid(self) -> bool:
        """Check whether run times can be derived from these parameters."""
        rate = self.rate
        return self.start_time is not None and rate is not None and rate > 0


@dataclass(frozen=True)
class Reminder:
    """A task to be flagged a number of minutes before an entrant runs."""

    id: str = field(default_factory=new_id)
    label: str = ""
    offset_minutes: int = DEFAULT_REMINDER_OFFSET
    fires_at: datetime | None = None  # Derived


@dataclass(frozen=True)
class Entrant:
    """A participant with a position in the run order."""

    id: str = field(default_factory=new_id)
    name: str = ""
    ordinal_position: str = ""  # Raw form value, parsed on recalculation
    estimated_run_time: datetime | None = None  # Derived
    reminders: tuple[Reminder, ...] = ()

    @property
    def ordinal(self) -> int | None:
        return parse_ordinal(self.ordinal_position)

    @property
    def display_name(self) -> str:
        return entrant_display_name(self.name, self.ordinal_position)

    def get_reminder(self, reminder_id: str) -> Reminder:
        for reminder in self.reminders:
            if reminder.id == reminder_id:
                return reminder
        raise KeyError(f"Unknown reminder id: '{reminder_id}' on entrant '{self.id}'")


# Fields a user may edit directly; everything else is identity or derived
ENTRANT_EDITABLE_FIELDS: frozenset[str] = frozenset({"name", "ordinal_position"})
REMINDER_EDITABLE_FIELDS: frozenset[str] = frozenset({"label", "offset_minutes"})
PARAMETER_EDITABLE_FIELDS: frozenset[str] = frozenset({"start_time", "throughput_per_hour"})
