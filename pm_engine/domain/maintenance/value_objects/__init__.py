"""Value objects for the preventive maintenance domain."""

from .enums import (
    TERMINAL_WORK_ORDER_STATUSES,
    Frequency,
    ScheduleState,
    TaskCompletionStatus,
    TriggerType,
    WorkOrderPriority,
    WorkOrderStatus,
)
from .frequency import (
    DEFAULT_FREQUENCY,
    FREQUENCY_RULES,
    FrequencyRule,
    match_rule,
    normalize,
)
from .recurrence import (
    IntervalFields,
    add_months,
    add_years,
    as_utc,
    apply_interval,
    interval_for,
    next_due,
    utc_now,
)
from .work_order_seed import WorkOrderSeedInput

__all__ = [
    "DEFAULT_FREQUENCY",
    "FREQUENCY_RULES",
    "TERMINAL_WORK_ORDER_STATUSES",
    "Frequency",
    "FrequencyRule",
    "IntervalFields",
    "ScheduleState",
    "TaskCompletionStatus",
    "TriggerType",
    "WorkOrderPriority",
    "WorkOrderSeedInput",
    "WorkOrderStatus",
    "add_months",
    "add_years",
    "as_utc",
    "apply_interval",
    "interval_for",
    "match_rule",
    "next_due",
    "normalize",
    "utc_now",
]
