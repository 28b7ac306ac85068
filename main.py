"""RunReady command line: schedule editing and report commands under one entry point."""

import typer

from runready_admin.cli import app as admin_app
from runready_reports.cli import app as reports_app

app = typer.Typer(
    name="runready",
    help="Estimated run times and pre-run reminders for timed events",
    no_args_is_help=True,
)

# admin edits and saves schedules; reports only reads them
app.add_typer(admin_app, name="admin", help="Schedule editing commands")
app.add_typer(reports_app, name="reports", help="Generate summaries and run sheets")


def main():
    """Console script entry point (`runready`)."""
    app()


if __name__ == "__main__":
    main()
