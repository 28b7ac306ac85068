"""
Schedule summary formatting.

Produces the plain-text summary of a saved schedule that gets printed or
shared: event details followed by every entrant's run time and reminders.
"""

from runtimes.dtos import ScheduleSnapshot
from runtimes.models import entrant_display_name

from .formatting import format_event_date, format_offset_label, format_time


def format_schedule_summary(snapshot: ScheduleSnapshot, twenty_four_hour: bool = False) -> str:
    """Format a schedule as plain text."""
    lines: list[str] = [snapshot.name or "Untitled event"]
    event_date = format_event_date(snapshot.event_date)
    if event_date:
        lines.append(event_date)
    lines.append("")

    lines.append("EVENT DETAILS")
    lines.append(f"Start Time: {format_time(snapshot.parameters.start_time, twenty_four_hour)}")
    lines.append(f"Entrants Per Hour: {snapshot.parameters.throughput_per_hour or '-'}")
    lines.append("")

    lines.append("ENTRANTS & RUN TIMES")
    lines.append("=" * 40)
    lines.append("")

    if not snapshot.entrants:
        lines.append("No entrants")
        lines.append("")

    for entrant in snapshot.entrants:
        name = entrant_display_name(entrant.name, entrant.ordinal_position)
        lines.append(f"{name} (Draw #{entrant.ordinal_position or '-'})")
        lines.append(
            f"Estimated Run Time: {format_time(entrant.estimated_run_time, twenty_four_hour)}"
        )

        if entrant.reminders:
            lines.append("")
            lines.append("Pre-Run Reminders:")
            for reminder in entrant.reminders:
                lines.append(
                    f"  • {reminder.label} - {format_offset_label(reminder.offset_minutes)} before "
                    f"({format_time(reminder.fires_at, twenty_four_hour)})"
                )

        lines.append("")
        lines.append("-" * 40)
        lines.append("")

    lines.append("Generated by RunReady")
    return "\n".join(lines)


def print_schedule_summary(snapshot: ScheduleSnapshot, twenty_four_hour: bool = False) -> None:
    """Print a formatted schedule summary."""
    print(f"\n📅 {snapshot.name or snapshot.id}")
    print(format_schedule_summary(snapshot, twenty_four_hour))
