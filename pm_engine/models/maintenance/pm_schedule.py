"""PM schedule SQLModels."""

from datetime import datetime

from sqlmodel import Field, SQLModel

from pm_engine.domain.maintenance.value_objects.enums import Frequency
from pm_engine.domain.maintenance.value_objects.recurrence import utc_now


class PMScheduleBase(SQLModel):
    """Base PM schedule fields."""

    title: str = Field(min_length=1, max_length=255)
    description: str | None = Field(default=None)
    frequency: Frequency = Field(
        default=Frequency.MONTHLY, description="Canonical recurrence unit"
    )
    next_due: datetime = Field(index=True)


class PMSchedule(PMScheduleBase, table=True):
    """
    PM schedule table model.

    A preventive-maintenance definition tied to one asset. The frequency
    column only ever holds canonical values; raw text is normalized before it
    reaches this table.
    """

    __tablename__ = "pm_schedules"

    id: int | None = Field(default=None, primary_key=True)
    asset_id: int = Field(foreign_key="assets.id", index=True)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(
        default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now}
    )


class PMScheduleTask(SQLModel, table=True):
    """Ordered checklist entry joining a schedule to a PM task template."""

    __tablename__ = "pm_schedule_tasks"

    id: int | None = Field(default=None, primary_key=True)
    pm_schedule_id: int = Field(
        foreign_key="pm_schedules.id", index=True, ondelete="CASCADE"
    )
    pm_task_id: int = Field(foreign_key="pm_tasks.id", index=True)
    order_index: int = Field(default=0, ge=0)
    is_required: bool = Field(default=True)
    created_at: datetime = Field(default_factory=utc_now)
