"""Work order seed values."""

from pydantic import BaseModel, Field

from .enums import WorkOrderPriority


class WorkOrderSeedInput(BaseModel):
    """
    Work-order-only values accepted alongside a schedule write.

    They are used for a newly materialized work order and are never stored
    on the schedule itself.
    """

    model_config = {"frozen": True}

    priority: WorkOrderPriority | None = Field(
        default=None, description="Priority of the materialized work order"
    )
    estimated_hours: float | None = Field(default=None, ge=0)
    assigned_to_id: int | None = Field(default=None)
