"""Tests for the trigger lifecycle service."""

from datetime import datetime, timedelta

import pytest

from pm_engine.domain.maintenance.services import TriggerLifecycleService, fields_for
from pm_engine.domain.maintenance.value_objects import (
    Frequency,
    IntervalFields,
    TriggerType,
)
from pm_engine.domain.shared.exceptions import TriggerNotFoundError
from pm_engine.models.maintenance import PMSchedule

from .fakes import InMemoryTriggerRepository

DUE = datetime(2025, 3, 10, 8, 0)


def _schedule(frequency: Frequency = Frequency.WEEKLY, schedule_id: int = 1):
    return PMSchedule(
        id=schedule_id,
        title="Lube Pump",
        frequency=frequency,
        next_due=DUE,
        asset_id=7,
    )


@pytest.fixture
def repository():
    return InMemoryTriggerRepository()


@pytest.fixture
def lifecycle(repository):
    return TriggerLifecycleService(repository)


@pytest.mark.parametrize(
    "frequency, expected",
    [
        (Frequency.DAILY, IntervalFields(days=1)),
        (Frequency.WEEKLY, IntervalFields(weeks=1)),
        (Frequency.MONTHLY, IntervalFields(months=1)),
        (Frequency.QUARTERLY, IntervalFields(months=3)),
        (Frequency.YEARLY, IntervalFields(months=12)),
        (None, IntervalFields(months=1)),
    ],
)
def test_fields_for(frequency, expected):
    assert fields_for(frequency) == expected


class TestCreate:
    @pytest.mark.parametrize("frequency", list(Frequency))
    def test_creates_single_active_time_based_trigger(
        self, lifecycle, repository, frequency
    ):
        schedule = _schedule(frequency)

        trigger = lifecycle.create_for_schedule(schedule)

        assert repository.list_for_schedule(schedule.id) == [trigger]
        assert trigger.type == TriggerType.TIME_BASED
        assert trigger.is_active is True
        assert trigger.interval == fields_for(frequency)
        assert trigger.next_due == DUE
        assert trigger.last_triggered is None


class TestReconcile:
    def test_frequency_change_rewrites_in_place(self, lifecycle, repository):
        schedule = _schedule(Frequency.WEEKLY)
        original = lifecycle.create_for_schedule(schedule)
        original.last_triggered = DUE - timedelta(days=7)

        schedule.frequency = Frequency.MONTHLY
        schedule.next_due = DUE + timedelta(days=30)
        reconciled = lifecycle.reconcile(schedule, frequency_changed=True)

        assert reconciled.id == original.id
        assert repository.list_for_schedule(schedule.id) == [reconciled]
        assert reconciled.interval_months == 1
        assert reconciled.interval_weeks is None
        assert reconciled.interval_days is None
        assert reconciled.last_triggered is None
        assert reconciled.next_due == schedule.next_due

    def test_unchanged_frequency_keeps_trigger_state(self, lifecycle):
        schedule = _schedule(Frequency.WEEKLY)
        trigger = lifecycle.create_for_schedule(schedule)
        fired = DUE - timedelta(days=1)
        trigger.last_triggered = fired

        reconciled = lifecycle.reconcile(schedule, frequency_changed=False)

        assert reconciled.last_triggered == fired
        assert reconciled.interval_weeks == 1

    def test_due_date_change_syncs_next_due_only(self, lifecycle):
        schedule = _schedule(Frequency.WEEKLY)
        trigger = lifecycle.create_for_schedule(schedule)
        trigger.last_triggered = DUE - timedelta(days=1)

        schedule.next_due = DUE + timedelta(days=3)
        reconciled = lifecycle.reconcile(
            schedule, frequency_changed=False, next_due_changed=True
        )

        assert reconciled.next_due == DUE + timedelta(days=3)
        assert reconciled.last_triggered is not None

    def test_creates_trigger_for_legacy_schedule(self, lifecycle, repository):
        schedule = _schedule(Frequency.QUARTERLY)

        trigger = lifecycle.reconcile(schedule, frequency_changed=False)

        assert repository.list_for_schedule(schedule.id) == [trigger]
        assert trigger.interval_months == 3


class TestFiring:
    def test_mark_fired_advances_by_interval(self, lifecycle):
        trigger = lifecycle.create_for_schedule(_schedule(Frequency.MONTHLY))
        fired_at = datetime(2025, 1, 31, 7, 0)

        fired = lifecycle.mark_fired(trigger.id, fired_at)

        assert fired.last_triggered == fired_at
        assert fired.next_due == datetime(2025, 3, 3, 7, 0)

    def test_mark_fired_weekly(self, lifecycle):
        trigger = lifecycle.create_for_schedule(_schedule(Frequency.WEEKLY))
        fired_at = datetime(2024, 12, 28)

        assert lifecycle.mark_fired(trigger.id, fired_at).next_due == datetime(
            2025, 1, 4
        )

    def test_mark_fired_unknown_trigger(self, lifecycle):
        with pytest.raises(TriggerNotFoundError) as exc_info:
            lifecycle.mark_fired(999)
        assert exc_info.value.entity_id == 999

    def test_due_triggers_only_active_and_due(self, lifecycle):
        due = lifecycle.create_for_schedule(_schedule(schedule_id=1))
        later = lifecycle.create_for_schedule(_schedule(schedule_id=2))
        later.next_due = DUE + timedelta(days=1)
        inactive = lifecycle.create_for_schedule(_schedule(schedule_id=3))
        inactive.is_active = False

        assert lifecycle.due_triggers(DUE) == [due]
        assert lifecycle.due_triggers(DUE + timedelta(days=1)) == [due, later]

    def test_upcoming_triggers_window(self, lifecycle):
        overdue = lifecycle.create_for_schedule(_schedule(schedule_id=1))
        overdue.next_due = DUE - timedelta(days=1)
        soon = lifecycle.create_for_schedule(_schedule(schedule_id=2))
        soon.next_due = DUE + timedelta(days=3)
        edge = lifecycle.create_for_schedule(_schedule(schedule_id=3))
        edge.next_due = DUE + timedelta(days=7)
        beyond = lifecycle.create_for_schedule(_schedule(schedule_id=4))
        beyond.next_due = DUE + timedelta(days=8)

        upcoming = lifecycle.upcoming_triggers(timedelta(days=7), as_of=DUE)

        assert upcoming == [soon, edge]
