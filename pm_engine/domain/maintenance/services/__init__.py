"""Domain services for preventive maintenance."""

from .schedule_state import derive_schedule_state
from .trigger_lifecycle import TriggerLifecycleService, fields_for
from .work_order_materializer import WorkOrderMaterializer

__all__ = [
    "TriggerLifecycleService",
    "WorkOrderMaterializer",
    "derive_schedule_state",
    "fields_for",
]
