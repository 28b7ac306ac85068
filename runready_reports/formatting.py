"""Display formatting for run times, offsets and event dates."""

from datetime import date, datetime

# Shown wherever a run or fire time cannot be derived yet
TIME_PLACEHOLDER = "--:--"


def format_time(value: datetime | None, twenty_four_hour: bool = False) -> str:
    """Format a timestamp as '9:20 AM' (or '09:20'), truncated to the minute."""
    if value is None:
        return TIME_PLACEHOLDER
    if twenty_four_hour:
        return f"{value.hour:02d}:{value.minute:02d}"
    ampm = "PM" if value.hour >= 12 else "AM"
    display_hours = value.hour % 12 or 12
    return f"{display_hours}:{value.minute:02d} {ampm}"


def format_offset_label(offset_minutes: int) -> str:
    """
    Human-readable reminder offset.

    Examples:
        30 -> "30 min", 60 -> "1 hr", 90 -> "1.5 hrs", 120 -> "2 hrs"
    """
    if offset_minutes < 60:
        return f"{offset_minutes} min"
    hours = offset_minutes / 60
    if hours == 1:
        return "1 hr"
    return f"{hours:g} hrs"


def format_event_date(value: date | None) -> str:
    """Format an event date as 'Monday, June 2, 2025'."""
    if value is None:
        return ""
    return f"{value:%A}, {value:%B} {value.day}, {value.year}"
