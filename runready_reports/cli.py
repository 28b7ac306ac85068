"""Command-line interface for RunReady reports."""

from pathlib import Path
from typing import Annotated, Optional

import typer

from runready_admin.config import RunReadyConfig
from runready_admin.storage import ScheduleStore

from .csv_exporter import export_schedule_csv
from .schedule_printer import format_schedule_summary, print_schedule_summary

# Create the typer app for reports commands
app = typer.Typer(
    name="reports",
    help="Generate printable summaries and run sheets",
    no_args_is_help=True,
)


def _load_snapshot(event_id: str):
    config = RunReadyConfig.from_env()
    snapshot = ScheduleStore(config.schedules_path).get(event_id)
    if snapshot is None:
        print(f"Error: Schedule not found: {event_id}")
        raise typer.Exit(1)
    return config, snapshot


@app.command("summary")
def summary(
    event_id: Annotated[str, typer.Argument(help="Schedule id")],
    output: Annotated[Optional[str], typer.Option("--output", "-o", help="Write the summary to a text file instead of stdout")] = None,
) -> None:
    """Plain-text summary of a schedule for sharing."""
    config, snapshot = _load_snapshot(event_id)

    if output:
        text = format_schedule_summary(snapshot, twenty_four_hour=config.twenty_four_hour)
        try:
            Path(output).write_text(text + "\n", encoding="utf-8")
        except OSError as e:
            print(f"Error: {e}")
            raise typer.Exit(1)
        print(f"Summary written to {output}")
    else:
        print_schedule_summary(snapshot, twenty_four_hour=config.twenty_four_hour)


@app.command("csv")
def run_sheet_csv(
    event_id: Annotated[str, typer.Argument(help="Schedule id")],
    output: Annotated[Optional[str], typer.Option("--output", "-o", help="Output CSV filename")] = None,
) -> None:
    """Export the run sheet (run and reminder times) as CSV."""
    _, snapshot = _load_snapshot(event_id)
    output_file = output or f"run_sheet_{snapshot.id}.csv"

    try:
        count = export_schedule_csv(snapshot, output_file)
    except OSError as e:
        print(f"Error: {e}")
        raise typer.Exit(1)

    print(f"✅ Run sheet exported to: {output_file}")
    print(f"   {count} rows written")


if __name__ == "__main__":
    app()
