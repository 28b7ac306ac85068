"""
Change propagation for derived run and fire times.

Each trigger maps to a fixed recomputation scope:

- start time / throughput changed: every entrant and all their reminders
- ordinal changed, entrant added: that entrant and its reminders
- reminder added: that entrant's reminders
- offset changed: that one reminder

Entrants outside the scope are returned as the very same objects.
"""

import logging
from dataclasses import replace
from enum import Enum

from .models import Entrant, Reminder, ScheduleParameters
from .timing import compute_estimated_run_time, compute_fire_time

logger = logging.getLogger(__name__)


class Trigger(Enum):
    """Input changes that make derived fields stale."""

    START_TIME_CHANGED = "start_time_changed"
    THROUGHPUT_CHANGED = "throughput_changed"
    ORDINAL_CHANGED = "ordinal_changed"
    OFFSET_CHANGED = "offset_changed"
    ENTRANT_ADDED = "entrant_added"
    REMINDER_ADDED = "reminder_added"


PARAMETER_TRIGGERS: frozenset[Trigger] = frozenset({
    Trigger.START_TIME_CHANGED,
    Trigger.THROUGHPUT_CHANGED,
})


class RecalculationController:
    """Decides which entrants and reminders to re-derive for a trigger."""

    def recalculate(
        self,
        trigger: Trigger,
        parameters: ScheduleParameters,
        entrants: tuple[Entrant, ...],
        entrant_id: str | None = None,
        reminder_id: str | None = None,
    ) -> tuple[Entrant, ...]:
        """
        Recompute derived fields affected by a trigger.

        Args:
            trigger: What changed
            parameters: Current schedule parameters
            entrants: Current entrants, in display order
            entrant_id: Affected entrant (required for entrant/reminder triggers)
            reminder_id: Affected reminder (required for OFFSET_CHANGED)

        Returns:
            New entrant tuple in the same order

        Raises:
            KeyError: If entrant_id or reminder_id is unknown
            ValueError: If a required id is missing
        """
        if trigger in PARAMETER_TRIGGERS:
            logger.debug(f"{trigger.value}: recomputing all {len(entrants)} entrants")
            return self.derive_all(parameters, entrants)

        if entrant_id is None:
            raise ValueError(f"{trigger.value} requires an entrant id")
        index = _index_of(entrants, entrant_id)
        entrant = entrants[index]

        if trigger in (Trigger.ORDINAL_CHANGED, Trigger.ENTRANT_ADDED):
            logger.debug(f"{trigger.value}: recomputing entrant {entrant_id}")
            updated = self.derive_entrant(parameters, entrant)
        elif trigger == Trigger.REMINDER_ADDED:
            logger.debug(f"{trigger.value}: recomputing reminders of entrant {entrant_id}")
            updated = replace(entrant, reminders=_derive_reminders(entrant))
        else:
            if reminder_id is None:
                raise ValueError(f"{trigger.value} requires a reminder id")
            reminder = entrant.get_reminder(reminder_id)
            logger.debug(f"{trigger.value}: recomputing reminder {reminder_id}")
            reminders = tuple(
                _derive_reminder(entrant, r) if r is reminder else r
                for r in entrant.reminders
            )
            updated = replace(entrant, reminders=reminders)

        return entrants[:index] + (updated,) + entrants[index + 1:]

    def derive_all(
        self,
        parameters: ScheduleParameters,
        entrants: tuple[Entrant, ...],
    ) -> tuple[Entrant, ...]:
        return tuple(self.derive_entrant(parameters, entrant) for entrant in entrants)

    def derive_entrant(self, parameters: ScheduleParameters, entrant: Entrant) -> Entrant:
        """Re-derive one entrant's run time and all its reminders' fire times."""
        run_time = compute_estimated_run_time(
            parameters.start_time,
            parameters.rate,
            entrant.ordinal,
        )
        updated = replace(entrant, estimated_run_time=run_time)
        return replace(updated, reminders=_derive_reminders(updated))


def _derive_reminder(entrant: Entrant, reminder: Reminder) -> Reminder:
    return replace(
        reminder,
        fires_at=compute_fire_time(entrant.estimated_run_time, reminder.offset_minutes),
    )


def _derive_reminders(entrant: Entrant) -> tuple[Reminder, ...]:
    return tuple(_derive_reminder(entrant, r) for r in entrant.reminders)


def _index_of(entrants: tuple[Entrant, ...], entrant_id: str) -> int:
    for i, entrant in enumerate(entrants):
        if entrant.id == entrant_id:
            return i
    raise KeyError(f"Unknown entrant id: '{entrant_id}'")
