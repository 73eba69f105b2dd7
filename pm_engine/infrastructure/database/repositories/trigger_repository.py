"""PM trigger repository implementation."""

from datetime import datetime

from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select

from pm_engine.domain.maintenance.repositories import TriggerRepository
from pm_engine.models.maintenance import PMTrigger

from .base import BaseRepository, DatabaseError


class SqlTriggerRepository(BaseRepository[PMTrigger], TriggerRepository):
    """Repository implementation for PM triggers."""

    @property
    def entity_class(self):
        return PMTrigger

    def get_active_for_schedule(self, schedule_id: int) -> PMTrigger | None:
        try:
            statement = (
                select(PMTrigger)
                .where(
                    PMTrigger.pm_schedule_id == schedule_id,
                    PMTrigger.is_active == True,  # noqa: E712
                )
                .order_by(PMTrigger.id)
            )
            return self.session.exec(statement).first()
        except SQLAlchemyError as e:
            raise DatabaseError(
                f"Error finding trigger of PM schedule {schedule_id}: {str(e)}"
            ) from e

    def list_due(self, as_of: datetime) -> list[PMTrigger]:
        try:
            statement = (
                select(PMTrigger)
                .where(
                    PMTrigger.is_active == True,  # noqa: E712
                    PMTrigger.next_due.is_not(None),
                    PMTrigger.next_due <= as_of,
                )
                .order_by(PMTrigger.next_due, PMTrigger.id)
            )
            return list(self.session.exec(statement).all())
        except SQLAlchemyError as e:
            raise DatabaseError(f"Error finding due triggers: {str(e)}") from e

    def list_upcoming(self, start: datetime, end: datetime) -> list[PMTrigger]:
        try:
            statement = (
                select(PMTrigger)
                .where(
                    PMTrigger.is_active == True,  # noqa: E712
                    PMTrigger.next_due >= start,
                    PMTrigger.next_due <= end,
                )
                .order_by(PMTrigger.next_due, PMTrigger.id)
            )
            return list(self.session.exec(statement).all())
        except SQLAlchemyError as e:
            raise DatabaseError(f"Error finding upcoming triggers: {str(e)}") from e

    def delete_for_schedule(self, schedule_id: int) -> int:
        try:
            result = self.session.exec(
                delete(PMTrigger).where(PMTrigger.pm_schedule_id == schedule_id)
            )
            return result.rowcount
        except SQLAlchemyError as e:
            raise DatabaseError(
                f"Error deleting triggers of PM schedule {schedule_id}: {str(e)}"
            ) from e
