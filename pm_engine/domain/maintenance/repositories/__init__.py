"""Repository interfaces for preventive maintenance."""

from .reference_repositories import AssetRepository, TaskTemplateRepository
from .schedule_repository import ScheduleRepository
from .trigger_repository import TriggerRepository
from .unit_of_work import UnitOfWork
from .work_order_repository import WorkOrderRepository

__all__ = [
    "AssetRepository",
    "ScheduleRepository",
    "TaskTemplateRepository",
    "TriggerRepository",
    "UnitOfWork",
    "WorkOrderRepository",
]
