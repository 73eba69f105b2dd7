"""
Schedule Repository Interface

Defines the contract for PM schedule data access operations.
"""

from abc import ABC, abstractmethod

from pm_engine.models.maintenance import PMSchedule, PMScheduleTask


class ScheduleRepository(ABC):
    """
    Abstract repository interface for PM schedules and their task links.

    Implementations flush but never commit; the unit of work owns the
    transaction.
    """

    @abstractmethod
    def add(self, schedule: PMSchedule) -> PMSchedule:
        """
        Stage a new schedule and flush so it receives an id.

        Raises:
            DatabaseError: If the insert fails
        """

    @abstractmethod
    def save(self, schedule: PMSchedule) -> PMSchedule:
        """Flush changes made to an existing schedule."""

    @abstractmethod
    def get_by_id(self, schedule_id: int) -> PMSchedule | None:
        """Retrieve a schedule by id, or None."""

    @abstractmethod
    def get_for_update(self, schedule_id: int) -> PMSchedule | None:
        """
        Retrieve a schedule by id and lock its row for the rest of the
        transaction.

        Concurrent callers locking the same schedule are serialized here,
        which is what keeps the open work order check race free.
        """

    @abstractmethod
    def list_for_organization(self, organization_id: int | None) -> list[PMSchedule]:
        """
        List schedules, newest first.

        Args:
            organization_id: Restrict to schedules whose asset belongs to
                this organization; None lists every schedule.
        """

    @abstractmethod
    def delete(self, schedule: PMSchedule) -> None:
        """Delete a schedule together with its task links."""

    @abstractmethod
    def get_task_links(self, schedule_id: int) -> list[PMScheduleTask]:
        """Task links of a schedule ordered by order_index."""

    @abstractmethod
    def replace_tasks(
        self, schedule_id: int, task_ids: list[int]
    ) -> list[PMScheduleTask]:
        """Drop every task link of the schedule and create new ones in order."""

    @abstractmethod
    def count_tasks(self, schedule_id: int) -> int:
        pass
