"""
Unit of Work Interface

The persistence port the engine's services run against.
"""

from abc import ABC, abstractmethod

from .reference_repositories import AssetRepository, TaskTemplateRepository
from .schedule_repository import ScheduleRepository
from .trigger_repository import TriggerRepository
from .work_order_repository import WorkOrderRepository


class UnitOfWork(ABC):
    """
    Transaction-scoped access to every repository the engine uses.

    Used as a context manager: leaving the block normally commits, leaving
    it with an exception rolls back.
    """

    assets: AssetRepository
    task_templates: TaskTemplateRepository
    schedules: ScheduleRepository
    triggers: TriggerRepository
    work_orders: WorkOrderRepository

    @abstractmethod
    def __enter__(self) -> "UnitOfWork":
        pass

    @abstractmethod
    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        pass

    @abstractmethod
    def commit(self) -> None:
        pass

    @abstractmethod
    def rollback(self) -> None:
        pass
