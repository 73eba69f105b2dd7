"""Domain enums for preventive maintenance."""

from enum import Enum


class Frequency(str, Enum):
    """Canonical recurrence units a PM schedule can run on."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"


class TriggerType(str, Enum):
    """Trigger type enumeration. Only time-based triggers are driven here."""

    TIME_BASED = "TIME_BASED"


class WorkOrderStatus(str, Enum):
    """Work order status enumeration."""

    OPEN = "OPEN"
    IN_PROGRESS = "IN_PROGRESS"
    ON_HOLD = "ON_HOLD"
    COMPLETED = "COMPLETED"
    CANCELED = "CANCELED"

    @property
    def is_terminal(self) -> bool:
        """Check if work order status is terminal (cannot transition further)."""
        return self in TERMINAL_WORK_ORDER_STATUSES

    @property
    def is_open(self) -> bool:
        return not self.is_terminal


TERMINAL_WORK_ORDER_STATUSES = frozenset(
    {WorkOrderStatus.COMPLETED, WorkOrderStatus.CANCELED}
)


class WorkOrderPriority(str, Enum):
    """Work order priority enumeration."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    URGENT = "URGENT"


class TaskCompletionStatus(str, Enum):
    """Status of a single checklist item on a work order."""

    NOT_STARTED = "NOT_STARTED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    SKIPPED = "SKIPPED"
    FAILED = "FAILED"


class ScheduleState(str, Enum):
    """Lifecycle state of a schedule, derived from its work orders."""

    NEW = "new"
    ACTIVE_NO_OPEN_WORK = "active_no_open_work"
    ACTIVE_WITH_OPEN_WORK = "active_with_open_work"
    DELETED = "deleted"
