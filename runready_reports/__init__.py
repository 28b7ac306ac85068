"""Display formatting and printable reports for RunReady schedules."""
from .formatting import TIME_PLACEHOLDER, format_event_date, format_offset_label, format_time
from .schedule_printer import format_schedule_summary, print_schedule_summary
from .csv_exporter import export_schedule_csv, schedule_to_rows

__all__ = [
    "TIME_PLACEHOLDER",
    "export_schedule_csv",
    "format_event_date",
    "format_offset_label",
    "format_schedule_summary",
    "format_time",
    "print_schedule_summary",
    "schedule_to_rows",
]
