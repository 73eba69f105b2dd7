"""Work order SQLModels."""

from datetime import datetime

from sqlmodel import Field, SQLModel

from pm_engine.domain.maintenance.value_objects.enums import (
    TaskCompletionStatus,
    WorkOrderPriority,
    WorkOrderStatus,
)
from pm_engine.domain.maintenance.value_objects.recurrence import utc_now


class WorkOrderBase(SQLModel):
    """Base work order fields."""

    title: str = Field(min_length=1, max_length=512)
    description: str | None = Field(default=None)
    status: WorkOrderStatus = Field(default=WorkOrderStatus.OPEN, index=True)
    priority: WorkOrderPriority = Field(default=WorkOrderPriority.MEDIUM)
    due_date: datetime | None = Field(default=None)
    estimated_hours: float | None = Field(default=None, ge=0)
    assigned_to_id: int | None = Field(default=None)


class WorkOrder(WorkOrderBase, table=True):
    """
    Work order table model.

    pm_schedule_id is cleared when the owning schedule is deleted and the
    work order itself is kept.
    """

    __tablename__ = "work_orders"

    id: int | None = Field(default=None, primary_key=True)
    asset_id: int = Field(foreign_key="assets.id", index=True)
    organization_id: int = Field(index=True)
    pm_schedule_id: int | None = Field(
        default=None, foreign_key="pm_schedules.id", index=True, ondelete="SET NULL"
    )
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(
        default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now}
    )


class WorkOrderTask(SQLModel, table=True):
    """Snapshot of a PM task template taken when the work order was created."""

    __tablename__ = "work_order_tasks"

    id: int | None = Field(default=None, primary_key=True)
    work_order_id: int = Field(
        foreign_key="work_orders.id", index=True, ondelete="CASCADE"
    )
    pm_task_id: int | None = Field(
        default=None, foreign_key="pm_tasks.id", ondelete="SET NULL"
    )
    title: str
    description: str | None = Field(default=None)
    procedure: str | None = Field(default=None)
    order_index: int = Field(default=0, ge=0)
    status: TaskCompletionStatus = Field(default=TaskCompletionStatus.NOT_STARTED)
    created_at: datetime = Field(default_factory=utc_now)
