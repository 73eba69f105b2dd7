"""
Trigger Lifecycle Service

Keeps exactly one active time-based trigger per PM schedule, with interval
columns matching the schedule's canonical frequency.
"""

from datetime import datetime, timedelta

from pm_engine.core.observability import get_logger
from pm_engine.domain.shared.exceptions import TriggerNotFoundError
from pm_engine.models.maintenance import PMSchedule, PMTrigger

from ..repositories.trigger_repository import TriggerRepository
from ..value_objects.enums import Frequency, TriggerType
from ..value_objects.recurrence import (
    IntervalFields,
    apply_interval,
    interval_for,
    utc_now,
)

logger = get_logger(__name__)


def fields_for(frequency: Frequency | None) -> IntervalFields:
    """Interval fields a trigger carries for the given frequency."""
    return interval_for(frequency)


class TriggerLifecycleService:
    """
    Creates, reconciles and fires PM triggers.

    Triggers are rewritten in place when a schedule's frequency changes so
    their identity survives the edit.
    """

    def __init__(self, trigger_repository: TriggerRepository) -> None:
        self._triggers = trigger_repository

    def create_for_schedule(self, schedule: PMSchedule) -> PMTrigger:
        """
        Create the active time-based trigger of a newly created schedule.

        Args:
            schedule: Flushed schedule (its id must be set)

        Returns:
            The created trigger
        """
        trigger = PMTrigger(
            pm_schedule_id=schedule.id,
            type=TriggerType.TIME_BASED,
            is_active=True,
            next_due=schedule.next_due,
        )
        trigger.set_interval(fields_for(schedule.frequency))
        trigger = self._triggers.add(trigger)

        logger.info(
            "pm_trigger_created",
            trigger_id=trigger.id,
            schedule_id=schedule.id,
            frequency=schedule.frequency.value,
        )
        return trigger

    def reconcile(
        self,
        schedule: PMSchedule,
        frequency_changed: bool,
        next_due_changed: bool = False,
    ) -> PMTrigger:
        """
        Bring the schedule's trigger in line with the schedule.

        A frequency change rewrites the interval columns of the existing
        trigger, clears last_triggered and syncs next_due. An explicit due
        date change only syncs next_due. Schedules created before triggers
        existed get one here.
        """
        trigger = self._triggers.get_active_for_schedule(schedule.id)
        if trigger is None:
            logger.warning("pm_trigger_missing", schedule_id=schedule.id)
            return self.create_for_schedule(schedule)

        if frequency_changed:
            trigger.set_interval(fields_for(schedule.frequency))
            trigger.last_triggered = None
            trigger.next_due = schedule.next_due
            logger.info(
                "pm_trigger_rewritten",
                trigger_id=trigger.id,
                schedule_id=schedule.id,
                frequency=schedule.frequency.value,
            )
        elif next_due_changed:
            trigger.next_due = schedule.next_due
        else:
            return trigger

        return self._triggers.save(trigger)

    def mark_fired(self, trigger_id: int, fired_at: datetime | None = None) -> PMTrigger:
        """
        Record that a trigger fired and advance its next due date.

        Args:
            trigger_id: Trigger to mark
            fired_at: Firing time, defaults to now (UTC)

        Raises:
            TriggerNotFoundError: If the trigger does not exist
        """
        trigger = self._triggers.get_by_id(trigger_id)
        if trigger is None:
            raise TriggerNotFoundError(trigger_id)

        fired_at = fired_at or utc_now()
        trigger.last_triggered = fired_at
        trigger.next_due = apply_interval(trigger.interval, fired_at)
        trigger = self._triggers.save(trigger)

        logger.info(
            "pm_trigger_fired",
            trigger_id=trigger.id,
            schedule_id=trigger.pm_schedule_id,
            next_due=trigger.next_due.isoformat(),
        )
        return trigger

    def due_triggers(self, as_of: datetime | None = None) -> list[PMTrigger]:
        """Active triggers due at or before as_of (defaults to now)."""
        return self._triggers.list_due(as_of or utc_now())

    def upcoming_triggers(
        self, window: timedelta, as_of: datetime | None = None
    ) -> list[PMTrigger]:
        """Active triggers due within window after as_of (defaults to now)."""
        start = as_of or utc_now()
        return self._triggers.list_upcoming(start, start + window)
