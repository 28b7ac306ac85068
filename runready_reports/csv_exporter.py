"""CSV run-sheet export for saved schedules.

One row per reminder, plus one row for each entrant without reminders, so
the sheet can be sorted by fire time in a spreadsheet.
"""

import csv
from datetime import datetime
from pathlib import Path

from runtimes.dtos import ScheduleSnapshot
from runtimes.models import entrant_display_name

CSV_COLUMNS = [
    "entrant",
    "draw",
    "run_time",
    "reminder",
    "offset_minutes",
    "fires_at",
]


def _format_timestamp(value: datetime | None) -> str:
    return value.strftime('%Y-%m-%d %H:%M') if value else ""


def schedule_to_rows(snapshot: ScheduleSnapshot) -> list[dict[str, str]]:
    """Flatten a schedule into CSV rows in display order."""
    rows: list[dict[str, str]] = []
    for entrant in snapshot.entrants:
        base = {
            "entrant": entrant_display_name(entrant.name, entrant.ordinal_position),
            "draw": entrant.ordinal_position,
            "run_time": _format_timestamp(entrant.estimated_run_time),
        }
        if not entrant.reminders:
            rows.append({**base, "reminder": "", "offset_minutes": "", "fires_at": ""})
            continue
        for reminder in entrant.reminders:
            rows.append({
                **base,
                "reminder": reminder.label,
                "offset_minutes": str(reminder.offset_minutes),
                "fires_at": _format_timestamp(reminder.fires_at),
            })
    return rows


def export_schedule_csv(snapshot: ScheduleSnapshot, output_path: str | Path) -> int:
    """
    Write a schedule's run sheet to CSV.

    Args:
        snapshot: The schedule to export
        output_path: Path for the output CSV file

    Returns:
        Number of rows written (excluding the header)
    """
    rows = schedule_to_rows(snapshot)
    with open(output_path, 'w', newline='', encoding='utf-8') as f:
        writer = csv.DictWriter(f, fieldnames=CSV_COLUMNS)
        writer.writeheader()
        writer.writerows(rows)
    return len(rows)
