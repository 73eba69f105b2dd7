"""
Work Order Repository Interface

Defines the contract for work order data access operations.
"""

from abc import ABC, abstractmethod

from pm_engine.models.maintenance import WorkOrder, WorkOrderTask


class WorkOrderRepository(ABC):
    """Abstract repository interface for work orders and their task snapshots."""

    @abstractmethod
    def add(self, work_order: WorkOrder) -> WorkOrder:
        """Stage a new work order and flush so it receives an id."""

    @abstractmethod
    def add_tasks(self, tasks: list[WorkOrderTask]) -> list[WorkOrderTask]:
        """Stage work order tasks and flush."""

    @abstractmethod
    def get_by_id(self, work_order_id: int) -> WorkOrder | None:
        pass

    @abstractmethod
    def find_open_for_schedule(self, schedule_id: int) -> list[WorkOrder]:
        """Work orders of a schedule whose status is not terminal."""

    @abstractmethod
    def list_for_schedule(
        self, schedule_id: int, limit: int | None = None
    ) -> list[WorkOrder]:
        """Work orders of a schedule, most recently created first."""

    @abstractmethod
    def count_for_schedule(self, schedule_id: int) -> int:
        pass

    @abstractmethod
    def list_tasks(self, work_order_id: int) -> list[WorkOrderTask]:
        """Task snapshots of a work order ordered by order_index."""

    @abstractmethod
    def delete(self, work_order: WorkOrder) -> None:
        """Delete a work order together with its task snapshots."""

    @abstractmethod
    def detach_from_schedule(self, schedule_id: int) -> int:
        """
        Clear pm_schedule_id on every work order of a schedule.

        Returns:
            Number of work orders detached
        """
