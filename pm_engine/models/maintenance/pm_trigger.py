"""PM trigger SQLModel."""

from datetime import datetime

from sqlmodel import Field, SQLModel

from pm_engine.domain.maintenance.value_objects.enums import TriggerType
from pm_engine.domain.maintenance.value_objects.recurrence import (
    IntervalFields,
    utc_now,
)


class PMTrigger(SQLModel, table=True):
    """
    PM trigger table model.

    Holds the persisted recurrence interval of a schedule. Exactly one of the
    interval columns is set.
    """

    __tablename__ = "pm_triggers"

    id: int | None = Field(default=None, primary_key=True)
    pm_schedule_id: int = Field(
        foreign_key="pm_schedules.id", index=True, ondelete="CASCADE"
    )
    type: TriggerType = Field(default=TriggerType.TIME_BASED)
    is_active: bool = Field(default=True)
    interval_days: int | None = Field(default=None, ge=1)
    interval_weeks: int | None = Field(default=None, ge=1)
    interval_months: int | None = Field(default=None, ge=1)
    last_triggered: datetime | None = Field(default=None)
    next_due: datetime | None = Field(default=None, index=True)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(
        default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now}
    )

    @property
    def interval(self) -> IntervalFields:
        return IntervalFields(
            days=self.interval_days,
            weeks=self.interval_weeks,
            months=self.interval_months,
        )

    def set_interval(self, fields: IntervalFields) -> None:
        self.interval_days = fields.days
        self.interval_weeks = fields.weeks
        self.interval_months = fields.months
