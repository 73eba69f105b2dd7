"""
PM schedule Data Transfer Objects.

Inputs accepted by the schedule lifecycle and bulk operations, and the
records they return.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from pm_engine.domain.maintenance.value_objects import (
    Frequency,
    ScheduleState,
    TaskCompletionStatus,
    TriggerType,
    WorkOrderPriority,
    WorkOrderSeedInput,
    WorkOrderStatus,
    as_utc,
)


class ScheduleCreateInput(BaseModel):
    """DTO for creating a PM schedule."""

    title: str = Field(..., min_length=1, max_length=255, description="Schedule title")
    description: str | None = Field(None, description="Schedule description")
    frequency: str | None = Field(
        None,
        description="Recurrence as entered or exported, e.g. '6 weeks', "
        "'MonthlyByWeekday|1|First_Mon'. Unrecognised values mean monthly.",
    )
    next_due: datetime | None = Field(
        None, description="First due date; computed from the frequency if omitted"
    )
    asset_id: int = Field(..., description="Asset the schedule maintains")
    task_ids: list[int] = Field(
        default_factory=list, description="PM task templates in checklist order"
    )
    priority: WorkOrderPriority | None = Field(
        None, description="Priority of the first work order"
    )
    estimated_hours: float | None = Field(None, ge=0)
    assigned_to_id: int | None = Field(None)

    @field_validator("next_due")
    @classmethod
    def validate_next_due_utc(cls, v: datetime | None) -> datetime | None:
        """Store due dates in UTC; naive values are taken as UTC."""
        return as_utc(v) if v is not None else None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Lube Pump",
                "frequency": "6 weeks",
                "asset_id": 7,
                "task_ids": [3, 4],
                "priority": "HIGH",
            }
        }
    )

    def seed(self) -> WorkOrderSeedInput:
        return WorkOrderSeedInput(
            priority=self.priority,
            estimated_hours=self.estimated_hours,
            assigned_to_id=self.assigned_to_id,
        )


class ScheduleUpdateInput(BaseModel):
    """Schedule fields an update may change. Only explicitly set fields apply."""

    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    frequency: str | None = None
    next_due: datetime | None = None
    task_ids: list[int] | None = None

    @field_validator("next_due")
    @classmethod
    def validate_next_due_utc(cls, v: datetime | None) -> datetime | None:
        return as_utc(v) if v is not None else None


_SCHEDULE_UPDATE_FIELDS = frozenset(ScheduleUpdateInput.model_fields)
_SEED_FIELDS = frozenset(WorkOrderSeedInput.model_fields)


class ScheduleUpdatePayload(BaseModel):
    """
    DTO for updating a PM schedule.

    Mixes schedule fields with work-order-only seed values; split() separates
    them. asset_id is accepted for compatibility with existing clients and
    ignored, since a schedule never moves to another asset.
    """

    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    frequency: str | None = None
    next_due: datetime | None = None
    task_ids: list[int] | None = None
    asset_id: int | None = Field(None, description="Ignored")
    priority: WorkOrderPriority | None = None
    estimated_hours: float | None = Field(None, ge=0)
    assigned_to_id: int | None = None

    @field_validator("next_due")
    @classmethod
    def validate_next_due_utc(cls, v: datetime | None) -> datetime | None:
        return as_utc(v) if v is not None else None

    def split(self) -> tuple[ScheduleUpdateInput, WorkOrderSeedInput]:
        """Build the schedule update and the work order seed from this payload."""
        provided = self.model_dump(exclude_unset=True)
        update = ScheduleUpdateInput(
            **{k: v for k, v in provided.items() if k in _SCHEDULE_UPDATE_FIELDS}
        )
        seed = WorkOrderSeedInput(
            **{k: v for k, v in provided.items() if k in _SEED_FIELDS}
        )
        return update, seed


class AssetSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    organization_id: int


class ScheduleTaskResponse(BaseModel):
    """Checklist entry of a schedule."""

    task_id: int
    title: str
    order_index: int
    is_required: bool


class TriggerResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    type: TriggerType
    is_active: bool
    interval_days: int | None = None
    interval_weeks: int | None = None
    interval_months: int | None = None
    last_triggered: datetime | None = None
    next_due: datetime | None = None


class WorkOrderTaskResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    pm_task_id: int | None = None
    title: str
    description: str | None = None
    procedure: str | None = None
    order_index: int
    status: TaskCompletionStatus


class WorkOrderResponse(BaseModel):
    """DTO for a work order generated from a schedule."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: str | None = None
    status: WorkOrderStatus
    priority: WorkOrderPriority
    due_date: datetime | None = None
    asset_id: int
    organization_id: int
    assigned_to_id: int | None = None
    pm_schedule_id: int | None = None
    estimated_hours: float | None = None
    created_at: datetime
    tasks: list[WorkOrderTaskResponse] = Field(default_factory=list)


class ScheduleDetail(BaseModel):
    """A schedule with its asset, checklist, trigger and open work order."""

    id: int
    title: str
    description: str | None = None
    frequency: Frequency
    next_due: datetime
    asset_id: int
    asset: AssetSummary | None = None
    tasks: list[ScheduleTaskResponse] = Field(default_factory=list)
    trigger: TriggerResponse | None = None
    open_work_order: WorkOrderResponse | None = None
    state: ScheduleState
    created_at: datetime
    updated_at: datetime


class ScheduleSummary(BaseModel):
    """List entry for a schedule."""

    id: int
    title: str
    description: str | None = None
    frequency: Frequency
    next_due: datetime
    asset_id: int
    asset: AssetSummary | None = None
    recent_work_orders: list[WorkOrderResponse] = Field(default_factory=list)
    task_count: int = 0
    work_order_count: int = 0
    state: ScheduleState


class BulkDeleteRequest(BaseModel):
    schedule_ids: list[int] = Field(..., description="Schedules to delete")


class BulkDeleteFailure(BaseModel):
    schedule_id: int
    error: str


class BulkDeleteResult(BaseModel):
    """
    Aggregate outcome of a bulk delete.

    Counts cover successfully processed schedules only. Ids not owned by the
    caller's organization are listed in skipped_ids; ids whose transaction
    failed are listed in failures.
    """

    deleted_schedules: int = 0
    deleted_work_orders: int = 0
    processed_ids: list[int] = Field(default_factory=list)
    skipped_ids: list[int] = Field(default_factory=list)
    failures: list[BulkDeleteFailure] = Field(default_factory=list)


class TriggerFailure(BaseModel):
    trigger_id: int
    pm_schedule_id: int
    error: str


class DueWorkOrdersResult(BaseModel):
    """
    Outcome of one pass over due triggers.

    A due trigger whose schedule still has an open work order is not fired;
    it stays due and is listed in pending_trigger_ids.
    """

    work_orders: list[WorkOrderResponse] = Field(default_factory=list)
    fired_trigger_ids: list[int] = Field(default_factory=list)
    pending_trigger_ids: list[int] = Field(default_factory=list)
    failures: list[TriggerFailure] = Field(default_factory=list)
