"""Run-time and reminder scheduling engine."""
from .models import (
    DEFAULT_REMINDER_OFFSET,
    OFFSET_OPTIONS,
    Entrant,
    Reminder,
    ScheduleParameters,
    parse_ordinal,
    parse_throughput,
)
from .timing import compute_estimated_run_time, compute_fire_time
from .recalculation import RecalculationController, Trigger
from .dtos import (
    EntrantSnapshot,
    EntrantTemplate,
    ParametersSnapshot,
    ReminderSnapshot,
    ReminderTemplate,
    ScheduleSnapshot,
)
from .aggregate import ScheduleAggregate

__all__ = [
    "DEFAULT_REMINDER_OFFSET",
    "OFFSET_OPTIONS",
    "Entrant",
    "EntrantSnapshot",
    "EntrantTemplate",
    "ParametersSnapshot",
    "RecalculationController",
    "Reminder",
    "ReminderSnapshot",
    "ReminderTemplate",
    "ScheduleAggregate",
    "ScheduleParameters",
    "ScheduleSnapshot",
    "Trigger",
    "compute_estimated_run_time",
    "compute_fire_time",
    "parse_ordinal",
    "parse_throughput",
]
