"""Derived lifecycle state of a PM schedule."""

from pm_engine.models.maintenance import WorkOrder

from ..value_objects.enums import ScheduleState


def derive_schedule_state(work_orders: list[WorkOrder]) -> ScheduleState:
    """
    Derive a live schedule's lifecycle state from its work orders.

    NEW is never returned: creation commits the schedule together with its
    first open work order. DELETED is never derived either, since a deleted
    schedule has no row left to report on.
    """
    if any(work_order.status.is_open for work_order in work_orders):
        return ScheduleState.ACTIVE_WITH_OPEN_WORK
    return ScheduleState.ACTIVE_NO_OPEN_WORK
