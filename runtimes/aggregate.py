"""
In-memory state of one event being edited.

Every mutation re-derives the affected run and fire times before it
returns, so readers never see stale derived values.
"""

from dataclasses import replace
from datetime import date, datetime
from typing import Any

from .dtos import (
    EntrantSnapshot,
    EntrantTemplate,
    ParametersSnapshot,
    ScheduleSnapshot,
)
from .models import (
    DEFAULT_REMINDER_OFFSET,
    ENTRANT_EDITABLE_FIELDS,
    PARAMETER_EDITABLE_FIELDS,
    REMINDER_EDITABLE_FIELDS,
    Entrant,
    Reminder,
    ScheduleParameters,
    new_id,
    normalize_form_value,
    to_local_naive,
)
from .recalculation import RecalculationController, Trigger


def _check_patch(patch: dict[str, Any], allowed: frozenset[str], kind: str) -> None:
    illegal = set(patch) - allowed
    if illegal:
        raise ValueError(
            f"Cannot edit {kind} field(s): {', '.join(sorted(illegal))}. "
            f"Editable fields: {', '.join(sorted(allowed))}"
        )


class ScheduleAggregate:
    """Parameters and entrants of one event, kept consistent on every edit."""

    def __init__(
        self,
        event_id: str | None = None,
        name: str = "",
        event_date: date | None = None,
        parameters: ScheduleParameters | None = None,
        entrants: tuple[Entrant, ...] = (),
        notifications_enabled: bool = True,
        created_at: datetime | None = None,
        updated_at: datetime | None = None,
        controller: RecalculationController | None = None,
    ):
        now = datetime.now()
        self.event_id = event_id or new_id()
        self.name = name
        self.event_date = event_date
        self.notifications_enabled = notifications_enabled
        self.created_at = created_at or now
        self.updated_at = updated_at or now
        self.controller = controller or RecalculationController()
        parameters = parameters or ScheduleParameters()
        self._parameters = replace(parameters, start_time=to_local_naive(parameters.start_time))
        self._entrants = tuple(entrants)
        # Derived fields passed in are not trusted
        self._entrants = self.controller.derive_all(self._parameters, self._entrants)

    @property
    def parameters(self) -> ScheduleParameters:
        return self._parameters

    @property
    def entrants(self) -> tuple[Entrant, ...]:
        return self._entrants

    def get_entrant(self, entrant_id: str) -> Entrant:
        for entrant in self._entrants:
            if entrant.id == entrant_id:
                return entrant
        raise KeyError(f"Unknown entrant id: '{entrant_id}'")

    def _touch(self) -> None:
        self.updated_at = datetime.now()

    # Parameters

    def update_parameters(self, **patch: Any) -> ScheduleParameters:
        """
        Patch start_time and/or throughput_per_hour.

        Any actual change re-derives every entrant.
        """
        _check_patch(patch, PARAMETER_EDITABLE_FIELDS, "parameter")
        if "throughput_per_hour" in patch:
            patch["throughput_per_hour"] = normalize_form_value(patch["throughput_per_hour"])
        if "start_time" in patch:
            patch["start_time"] = to_local_naive(patch["start_time"])

        old = self._parameters
        new = replace(old, **patch)
        self._parameters = new

        trigger = None
        if new.start_time != old.start_time:
            trigger = Trigger.START_TIME_CHANGED
        elif new.throughput_per_hour != old.throughput_per_hour:
            trigger = Trigger.THROUGHPUT_CHANGED
        if trigger is not None:
            self._entrants = self.controller.recalculate(trigger, new, self._entrants)
        self._touch()
        return new

    # Entrants

    def add_entrant(self, name: str = "", ordinal_position: str | int | None = None) -> Entrant:
        """Append an entrant; fields may be left empty and filled in later."""
        entrant = Entrant(name=name, ordinal_position=normalize_form_value(ordinal_position))
        self._entrants = self.controller.recalculate(
            Trigger.ENTRANT_ADDED,
            self._parameters,
            self._entrants + (entrant,),
            entrant_id=entrant.id,
        )
        self._touch()
        return self.get_entrant(entrant.id)

    def update_entrant(self, entrant_id: str, **patch: Any) -> Entrant:
        """Patch name and/or ordinal_position of an entrant."""
        _check_patch(patch, ENTRANT_EDITABLE_FIELDS, "entrant")
        if "ordinal_position" in patch:
            patch["ordinal_position"] = normalize_form_value(patch["ordinal_position"])

        old = self.get_entrant(entrant_id)
        new = replace(old, **patch)
        self._entrants = tuple(new if e is old else e for e in self._entrants)
        if new.ordinal_position != old.ordinal_position:
            self._entrants = self.controller.recalculate(
                Trigger.ORDINAL_CHANGED, self._parameters, self._entrants, entrant_id=entrant_id
            )
        self._touch()
        return self.get_entrant(entrant_id)

    def remove_entrant(self, entrant_id: str) -> None:
        """Remove an entrant. Remaining positions are not renumbered."""
        entrant = self.get_entrant(entrant_id)
        self._entrants = tuple(e for e in self._entrants if e is not entrant)
        self._touch()

    # Reminders

    def add_reminder(
        self,
        entrant_id: str,
        label: str = "",
        offset_minutes: int = DEFAULT_REMINDER_OFFSET,
    ) -> Reminder:
        reminder = Reminder(label=label, offset_minutes=offset_minutes)
        self._append_reminders(entrant_id, (reminder,))
        return self.get_entrant(entrant_id).get_reminder(reminder.id)

    def apply_template(self, entrant_id: str, template: EntrantTemplate) -> tuple[Reminder, ...]:
        """Add one reminder per reminder template to an entrant."""
        reminders = tuple(
            Reminder(label=t.label, offset_minutes=t.offset_minutes)
            for t in template.reminder_templates
        )
        self._append_reminders(entrant_id, reminders)
        entrant = self.get_entrant(entrant_id)
        return tuple(entrant.get_reminder(r.id) for r in reminders)

    def _append_reminders(self, entrant_id: str, reminders: tuple[Reminder, ...]) -> None:
        old = self.get_entrant(entrant_id)
        new = replace(old, reminders=old.reminders + reminders)
        self._entrants = tuple(new if e is old else e for e in self._entrants)
        self._entrants = self.controller.recalculate(
            Trigger.REMINDER_ADDED, self._parameters, self._entrants, entrant_id=entrant_id
        )
        self._touch()

    def update_reminder(self, entrant_id: str, reminder_id: str, **patch: Any) -> Reminder:
        """Patch label and/or offset_minutes of a reminder."""
        _check_patch(patch, REMINDER_EDITABLE_FIELDS, "reminder")
        entrant = self.get_entrant(entrant_id)
        old = entrant.get_reminder(reminder_id)
        new = replace(old, **patch)
        updated = replace(
            entrant,
            reminders=tuple(new if r is old else r for r in entrant.reminders),
        )
        self._entrants = tuple(updated if e is entrant else e for e in self._entrants)
        if new.offset_minutes != old.offset_minutes:
            self._entrants = self.controller.recalculate(
                Trigger.OFFSET_CHANGED,
                self._parameters,
                self._entrants,
                entrant_id=entrant_id,
                reminder_id=reminder_id,
            )
        self._touch()
        return self.get_entrant(entrant_id).get_reminder(reminder_id)

    def remove_reminder(self, entrant_id: str, reminder_id: str) -> None:
        entrant = self.get_entrant(entrant_id)
        reminder = entrant.get_reminder(reminder_id)
        updated = replace(
            entrant,
            reminders=tuple(r for r in entrant.reminders if r is not reminder),
        )
        self._entrants = tuple(updated if e is entrant else e for e in self._entrants)
        self._touch()

    # Event metadata

    def rename(self, name: str) -> None:
        self.name = name.strip()
        self._touch()

    def set_event_date(self, event_date: date | None) -> None:
        self.event_date = event_date
        self._touch()

    def set_notifications_enabled(self, enabled: bool) -> None:
        self.notifications_enabled = enabled
        self._touch()

    # Snapshots

    def to_snapshot(self) -> ScheduleSnapshot:
        """Immutable view handed to storage and alert scheduling."""
        return ScheduleSnapshot(
            id=self.event_id,
            name=self.name,
            event_date=self.event_date,
            parameters=ParametersSnapshot.from_model(self._parameters),
            entrants=tuple(EntrantSnapshot.from_model(e) for e in self._entrants),
            notifications_enabled=self.notifications_enabled,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )

    @classmethod
    def from_snapshot(
        cls,
        snapshot: ScheduleSnapshot,
        controller: RecalculationController | None = None,
    ) -> 'ScheduleAggregate':
        """Rebuild an aggregate from a snapshot, re-deriving all derived fields."""
        return cls(
            event_id=snapshot.id,
            name=snapshot.name,
            event_date=snapshot.event_date,
            parameters=snapshot.parameters.to_model(),
            entrants=tuple(e.to_model() for e in snapshot.entrants),
            notifications_enabled=snapshot.notifications_enabled,
            created_at=snapshot.created_at,
            updated_at=snapshot.updated_at,
            controller=controller,
        )
