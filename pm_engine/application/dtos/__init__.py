from pm_engine.domain.maintenance.value_objects import WorkOrderSeedInput

from .pm_schedule_dtos import (
    AssetSummary,
    BulkDeleteFailure,
    BulkDeleteRequest,
    BulkDeleteResult,
    DueWorkOrdersResult,
    ScheduleCreateInput,
    ScheduleDetail,
    ScheduleSummary,
    ScheduleTaskResponse,
    ScheduleUpdateInput,
    ScheduleUpdatePayload,
    TriggerFailure,
    TriggerResponse,
    WorkOrderResponse,
    WorkOrderTaskResponse,
)

__all__ = [
    "AssetSummary",
    "BulkDeleteFailure",
    "BulkDeleteRequest",
    "BulkDeleteResult",
    "DueWorkOrdersResult",
    "ScheduleCreateInput",
    "ScheduleDetail",
    "ScheduleSummary",
    "ScheduleTaskResponse",
    "ScheduleUpdateInput",
    "ScheduleUpdatePayload",
    "TriggerFailure",
    "TriggerResponse",
    "WorkOrderResponse",
    "WorkOrderSeedInput",
    "WorkOrderTaskResponse",
]
