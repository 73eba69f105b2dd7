"""
Trigger Repository Interface

Defines the contract for PM trigger data access operations.
"""

from abc import ABC, abstractmethod
from datetime import datetime

from pm_engine.models.maintenance import PMTrigger


class TriggerRepository(ABC):
    """Abstract repository interface for PM triggers."""

    @abstractmethod
    def add(self, trigger: PMTrigger) -> PMTrigger:
        """Stage a new trigger and flush so it receives an id."""

    @abstractmethod
    def save(self, trigger: PMTrigger) -> PMTrigger:
        """Flush changes made to an existing trigger."""

    @abstractmethod
    def get_by_id(self, trigger_id: int) -> PMTrigger | None:
        pass

    @abstractmethod
    def get_active_for_schedule(self, schedule_id: int) -> PMTrigger | None:
        """The active trigger of a schedule, or None for legacy schedules."""

    @abstractmethod
    def list_due(self, as_of: datetime) -> list[PMTrigger]:
        """
        Active triggers whose next_due is at or before as_of.

        Args:
            as_of: Cut-off timestamp (aware UTC)

        Returns:
            Triggers ordered by next_due, earliest first
        """

    @abstractmethod
    def list_upcoming(self, start: datetime, end: datetime) -> list[PMTrigger]:
        """Active triggers with start <= next_due <= end, earliest first."""

    @abstractmethod
    def delete_for_schedule(self, schedule_id: int) -> int:
        """Delete all triggers of a schedule and return how many were removed."""
