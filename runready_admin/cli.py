"""Command-line interface for editing RunReady schedules."""

import logging
from datetime import date, datetime
from typing import Annotated, Optional

import typer

from runtimes.aggregate import ScheduleAggregate
from runtimes.dtos import (
    EntrantTemplate,
    ReminderTemplate,
    ScheduleSnapshot,
    parse_event_date,
    parse_start_time,
)
from runtimes.models import DEFAULT_REMINDER_OFFSET, OFFSET_OPTIONS, entrant_display_name
from runready_reports.formatting import format_event_date, format_offset_label, format_time

from .config import RunReadyConfig
from .notifications import JsonAlertBackend, NotificationScheduler
from .storage import CorruptStoreError, ScheduleStore, TemplateStore

# Presets offered when choosing a reminder offset
OFFSET_HELP = "Minutes before the run time (presets: " + ", ".join(
    f"{minutes} = {label}" for label, minutes in OFFSET_OPTIONS
) + ")"

# Create the typer app for admin commands
app = typer.Typer(
    name="admin",
    help="Create and edit event schedules, reminders and alerts",
    no_args_is_help=True,
)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


@app.callback()
def admin(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable verbose/debug logging")] = False,
) -> None:
    setup_logging(verbose=verbose)


def _fail(message: str) -> typer.Exit:
    print(f"❌ Error: {message}")
    return typer.Exit(1)


def _parse_date(value: str) -> date:
    try:
        parsed = parse_event_date(value)
    except ValueError:
        raise _fail(f"Invalid date format: {value}. Use YYYY-MM-DD")
    if parsed is None:
        raise _fail("Date cannot be empty")
    return parsed


def _parse_start_time(value: str, event_date: date | None) -> datetime | None:
    """Parse HH:MM on the event date (today if unset), or a full ISO timestamp."""
    try:
        return parse_start_time(value, event_date)
    except ValueError:
        raise _fail(f"Invalid start time: {value}. Use HH:MM")


def _load(store: ScheduleStore, event_id: str) -> ScheduleAggregate:
    snapshot = store.get(event_id)
    if snapshot is None:
        raise _fail(f"Schedule not found: {event_id}")
    return ScheduleAggregate.from_snapshot(snapshot)


def _save(config: RunReadyConfig, store: ScheduleStore, aggregate: ScheduleAggregate) -> ScheduleSnapshot:
    """Persist the aggregate and bring its alerts in line with it."""
    snapshot = aggregate.to_snapshot()
    scheduler = _scheduler(config)
    try:
        store.save(snapshot)
        if snapshot.notifications_enabled:
            count = scheduler.schedule(snapshot)
            print(f"🔔 {count} upcoming reminder alert(s) scheduled")
        else:
            scheduler.cancel(snapshot.id)
    except CorruptStoreError as e:
        raise _fail(str(e))
    return snapshot


def _scheduler(config: RunReadyConfig) -> NotificationScheduler:
    return NotificationScheduler(
        JsonAlertBackend(config.alerts_path),
        twenty_four_hour=config.twenty_four_hour,
    )


def _print_schedule(snapshot: ScheduleSnapshot, config: RunReadyConfig) -> None:
    clock = config.twenty_four_hour
    print(f"📅 {snapshot.name or 'Untitled event'} [{snapshot.id}]")
    if snapshot.event_date:
        print(f"   {format_event_date(snapshot.event_date)}")
    print(f"   Start: {format_time(snapshot.parameters.start_time, clock)}")
    print(f"   Entrants per hour: {snapshot.parameters.throughput_per_hour or '-'}")
    print(f"   Notifications: {'on' if snapshot.notifications_enabled else 'off'}")
    for entrant in snapshot.entrants:
        name = entrant_display_name(entrant.name, entrant.ordinal_position)
        print()
        print(
            f"   🐎 {name} (draw {entrant.ordinal_position or '-'}) "
            f"@ {format_time(entrant.estimated_run_time, clock)}  [{entrant.id}]"
        )
        for reminder in entrant.reminders:
            print(
                f"      ⏰ {reminder.label or '(no label)'}: "
                f"{format_offset_label(reminder.offset_minutes)} before "
                f"-> {format_time(reminder.fires_at, clock)}  [{reminder.id}]"
            )


@app.command("new")
def new_schedule(
    name: Annotated[str, typer.Argument(help="Event name")],
    event_date: Annotated[Optional[str], typer.Option("--date", "-d", help="Event date (YYYY-MM-DD)")] = None,
    start: Annotated[Optional[str], typer.Option("--start", "-s", help="Start time of the first entrant (HH:MM or ISO timestamp)")] = None,
    rate: Annotated[Optional[str], typer.Option("--rate", "-r", help="Entrants per hour")] = None,
    notifications: Annotated[Optional[bool], typer.Option("--notifications/--no-notifications", help="Schedule reminder alerts")] = None,
) -> None:
    """Create a new event schedule."""
    if not name.strip():
        raise _fail("Please enter a name for this schedule")
    config = RunReadyConfig.from_env()
    store = ScheduleStore(config.schedules_path)

    parsed_date = _parse_date(event_date) if event_date else None
    aggregate = ScheduleAggregate(
        name=name.strip(),
        event_date=parsed_date,
        notifications_enabled=config.notifications_enabled if notifications is None else notifications,
    )
    patch: dict[str, object] = {}
    if start is not None:
        patch["start_time"] = _parse_start_time(start, parsed_date)
    if rate is not None:
        patch["throughput_per_hour"] = rate
    if patch:
        aggregate.update_parameters(**patch)

    snapshot = _save(config, store, aggregate)
    print(f"✅ Schedule created: {snapshot.id}")


@app.command("list")
def list_schedules() -> None:
    """List saved schedules."""
    config = RunReadyConfig.from_env()
    schedules = ScheduleStore(config.schedules_path).all()
    if not schedules:
        print("No saved schedules")
        return
    for snapshot in schedules:
        when = format_event_date(snapshot.event_date) or "no date"
        print(f"{snapshot.id}  {snapshot.name or 'Untitled event'}  ({when}, {len(snapshot.entrants)} entrants)")


@app.command("show")
def show_schedule(
    event_id: Annotated[str, typer.Argument(help="Schedule id")],
) -> None:
    """Show a schedule with derived run and reminder times."""
    config = RunReadyConfig.from_env()
    snapshot = ScheduleStore(config.schedules_path).get(event_id)
    if snapshot is None:
        raise _fail(f"Schedule not found: {event_id}")
    _print_schedule(snapshot, config)


@app.command("set-params")
def set_params(
    event_id: Annotated[str, typer.Argument(help="Schedule id")],
    name: Annotated[Optional[str], typer.Option("--name", "-n", help="Event name")] = None,
    event_date: Annotated[Optional[str], typer.Option("--date", "-d", help="Event date (YYYY-MM-DD)")] = None,
    start: Annotated[Optional[str], typer.Option("--start", "-s", help="Start time (HH:MM); empty to clear")] = None,
    rate: Annotated[Optional[str], typer.Option("--rate", "-r", help="Entrants per hour")] = None,
) -> None:
    """Change the event name, date, start time or throughput."""
    config = RunReadyConfig.from_env()
    store = ScheduleStore(config.schedules_path)
    aggregate = _load(store, event_id)

    if name is not None:
        aggregate.rename(name)

    patch: dict[str, object] = {}
    if event_date is not None:
        aggregate.set_event_date(_parse_date(event_date))
        # Keep the clock time, move the start onto the new day
        current = aggregate.parameters.start_time
        if current is not None and start is None:
            patch["start_time"] = datetime.combine(aggregate.event_date, current.time())
    if start is not None:
        patch["start_time"] = _parse_start_time(start, aggregate.event_date)
    if rate is not None:
        patch["throughput_per_hour"] = rate
    if patch:
        aggregate.update_parameters(**patch)

    snapshot = _save(config, store, aggregate)
    _print_schedule(snapshot, config)


@app.command("add-entrant")
def add_entrant(
    event_id: Annotated[str, typer.Argument(help="Schedule id")],
    name: Annotated[str, typer.Option("--name", "-n", help="Entrant name")] = "",
    draw: Annotated[Optional[str], typer.Option("--draw", help="Draw (run order) position")] = None,
    template_id: Annotated[Optional[str], typer.Option("--template", "-t", help="Entrant template whose reminders to add")] = None,
) -> None:
    """Add an entrant, optionally with reminders from a template."""
    config = RunReadyConfig.from_env()
    store = ScheduleStore(config.schedules_path)
    aggregate = _load(store, event_id)

    template = None
    if template_id:
        template = TemplateStore(config.templates_path).get(template_id)
        if template is None:
            raise _fail(f"Template not found: {template_id}")

    entrant = aggregate.add_entrant(name=name.strip() or (template.name if template else ""), ordinal_position=draw)
    if template:
        aggregate.apply_template(entrant.id, template)
    entrant = aggregate.get_entrant(entrant.id)

    _save(config, store, aggregate)
    print(f"✅ Entrant added: {entrant.id} @ {format_time(entrant.estimated_run_time, config.twenty_four_hour)}")


@app.command("update-entrant")
def update_entrant(
    event_id: Annotated[str, typer.Argument(help="Schedule id")],
    entrant_id: Annotated[str, typer.Argument(help="Entrant id")],
    name: Annotated[Optional[str], typer.Option("--name", "-n", help="Entrant name")] = None,
    draw: Annotated[Optional[str], typer.Option("--draw", help="Draw (run order) position")] = None,
) -> None:
    """Rename an entrant or change its draw position."""
    config = RunReadyConfig.from_env()
    store = ScheduleStore(config.schedules_path)
    aggregate = _load(store, event_id)

    patch: dict[str, object] = {}
    if name is not None:
        patch["name"] = name.strip()
    if draw is not None:
        patch["ordinal_position"] = draw
    try:
        entrant = aggregate.update_entrant(entrant_id, **patch)
    except KeyError as e:
        raise _fail(str(e))

    _save(config, store, aggregate)
    print(f"✅ {entrant.display_name} @ {format_time(entrant.estimated_run_time, config.twenty_four_hour)}")


@app.command("remove-entrant")
def remove_entrant(
    event_id: Annotated[str, typer.Argument(help="Schedule id")],
    entrant_id: Annotated[str, typer.Argument(help="Entrant id")],
) -> None:
    """Remove an entrant. Other draw positions are left as they are."""
    config = RunReadyConfig.from_env()
    store = ScheduleStore(config.schedules_path)
    aggregate = _load(store, event_id)
    try:
        aggregate.remove_entrant(entrant_id)
    except KeyError as e:
        raise _fail(str(e))
    _save(config, store, aggregate)
    print(f"✅ Entrant removed: {entrant_id}")


@app.command("add-reminder")
def add_reminder(
    event_id: Annotated[str, typer.Argument(help="Schedule id")],
    entrant_id: Annotated[str, typer.Argument(help="Entrant id")],
    label: Annotated[str, typer.Option("--label", "-l", help="What to do (e.g., 'Warm-up')")] = "",
    offset: Annotated[int, typer.Option("--offset", "-o", help=OFFSET_HELP)] = DEFAULT_REMINDER_OFFSET,
) -> None:
    """Add a reminder to an entrant."""
    config = RunReadyConfig.from_env()
    store = ScheduleStore(config.schedules_path)
    aggregate = _load(store, event_id)
    try:
        reminder = aggregate.add_reminder(entrant_id, label=label.strip(), offset_minutes=offset)
    except KeyError as e:
        raise _fail(str(e))
    _save(config, store, aggregate)
    print(f"✅ Reminder added: {reminder.id} fires at {format_time(reminder.fires_at, config.twenty_four_hour)}")


@app.command("update-reminder")
def update_reminder(
    event_id: Annotated[str, typer.Argument(help="Schedule id")],
    entrant_id: Annotated[str, typer.Argument(help="Entrant id")],
    reminder_id: Annotated[str, typer.Argument(help="Reminder id")],
    label: Annotated[Optional[str], typer.Option("--label", "-l", help="What to do")] = None,
    offset: Annotated[Optional[int], typer.Option("--offset", "-o", help=OFFSET_HELP)] = None,
) -> None:
    """Change a reminder's label or offset."""
    config = RunReadyConfig.from_env()
    store = ScheduleStore(config.schedules_path)
    aggregate = _load(store, event_id)

    patch: dict[str, object] = {}
    if label is not None:
        patch["label"] = label.strip()
    if offset is not None:
        patch["offset_minutes"] = offset
    try:
        reminder = aggregate.update_reminder(entrant_id, reminder_id, **patch)
    except KeyError as e:
        raise _fail(str(e))
    _save(config, store, aggregate)
    print(f"✅ Reminder fires at {format_time(reminder.fires_at, config.twenty_four_hour)}")


@app.command("remove-reminder")
def remove_reminder(
    event_id: Annotated[str, typer.Argument(help="Schedule id")],
    entrant_id: Annotated[str, typer.Argument(help="Entrant id")],
    reminder_id: Annotated[str, typer.Argument(help="Reminder id")],
) -> None:
    """Remove a reminder from an entrant."""
    config = RunReadyConfig.from_env()
    store = ScheduleStore(config.schedules_path)
    aggregate = _load(store, event_id)
    try:
        aggregate.remove_reminder(entrant_id, reminder_id)
    except KeyError as e:
        raise _fail(str(e))
    _save(config, store, aggregate)
    print(f"✅ Reminder removed: {reminder_id}")


@app.command("notifications")
def set_notifications(
    event_id: Annotated[str, typer.Argument(help="Schedule id")],
    enabled: Annotated[bool, typer.Option("--on/--off", help="Enable or disable reminder alerts")] = True,
) -> None:
    """Turn reminder alerts on or off for a schedule."""
    config = RunReadyConfig.from_env()
    store = ScheduleStore(config.schedules_path)
    aggregate = _load(store, event_id)
    aggregate.set_notifications_enabled(enabled)
    _save(config, store, aggregate)
    print(f"✅ Notifications {'enabled' if enabled else 'disabled'}")


@app.command("alerts")
def list_alerts(
    event_id: Annotated[str, typer.Argument(help="Schedule id")],
) -> None:
    """List alerts currently scheduled for a schedule."""
    config = RunReadyConfig.from_env()
    alerts = _scheduler(config).pending_for(event_id)
    if not alerts:
        print("No scheduled alerts")
        return
    for alert in alerts:
        print(f"{alert.fires_at:%Y-%m-%d %H:%M}  {alert.title}")


@app.command("cancel-alerts")
def cancel_alerts(
    event_id: Annotated[str, typer.Argument(help="Schedule id")],
) -> None:
    """Cancel all alerts scheduled for a schedule."""
    config = RunReadyConfig.from_env()
    count = _scheduler(config).cancel(event_id)
    print(f"✅ Cancelled {count} alert(s)")


@app.command("delete")
def delete_schedule(
    event_id: Annotated[str, typer.Argument(help="Schedule id")],
) -> None:
    """Delete a schedule and cancel its alerts."""
    config = RunReadyConfig.from_env()
    store = ScheduleStore(config.schedules_path)
    try:
        deleted = store.delete(event_id)
    except CorruptStoreError as e:
        raise _fail(str(e))
    if not deleted:
        raise _fail(f"Schedule not found: {event_id}")
    _scheduler(config).cancel(event_id)
    print(f"✅ Schedule deleted: {event_id}")


def _parse_reminder_template(value: str) -> ReminderTemplate:
    """Parse 'Label=minutes' (minutes default to one hour)."""
    label, sep, minutes = value.rpartition("=")
    if not sep:
        return ReminderTemplate(label=value.strip())
    try:
        offset = int(minutes)
    except ValueError:
        raise _fail(f"Invalid reminder offset in '{value}'. Expected LABEL=MINUTES")
    return ReminderTemplate(label=label.strip(), offset_minutes=offset)


@app.command("template-save")
def save_template(
    name: Annotated[str, typer.Argument(help="Entrant name for the template")],
    reminders: Annotated[Optional[list[str]], typer.Option("--reminder", "-r", help="Reminder as LABEL=MINUTES (repeatable)")] = None,
    template_id: Annotated[Optional[str], typer.Option("--id", help="Replace an existing template")] = None,
) -> None:
    """Save a reusable set of reminders for an entrant."""
    config = RunReadyConfig.from_env()
    store = TemplateStore(config.templates_path)

    reminder_templates = tuple(_parse_reminder_template(r) for r in reminders or [])
    existing = store.get(template_id) if template_id else None
    if template_id and existing is None:
        raise _fail(f"Template not found: {template_id}")

    if existing:
        template = existing.model_copy(update={
            "name": name.strip(),
            "reminder_templates": reminder_templates,
            "updated_at": datetime.now(),
        })
    else:
        template = EntrantTemplate(name=name.strip(), reminder_templates=reminder_templates)
    try:
        store.save(template)
    except CorruptStoreError as e:
        raise _fail(str(e))
    print(f"✅ Template saved: {template.id}")


@app.command("template-list")
def list_templates() -> None:
    """List saved entrant templates."""
    config = RunReadyConfig.from_env()
    templates = TemplateStore(config.templates_path).all()
    if not templates:
        print("No saved templates")
        return
    for template in templates:
        reminders = ", ".join(
            f"{r.label} ({format_offset_label(r.offset_minutes)})" for r in template.reminder_templates
        )
        print(f"{template.id}  {template.name}: {reminders or 'no reminders'}")


@app.command("template-delete")
def delete_template(
    template_id: Annotated[str, typer.Argument(help="Template id")],
) -> None:
    """Delete an entrant template."""
    config = RunReadyConfig.from_env()
    if not TemplateStore(config.templates_path).delete(template_id):
        raise _fail(f"Template not found: {template_id}")
    print(f"✅ Template deleted: {template_id}")


if __name__ == "__main__":
    app()
