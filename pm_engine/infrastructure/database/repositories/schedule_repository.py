"""
PM schedule repository implementation.

Implements the ScheduleRepository interface of the domain layer with
SQLModel, including the row lock taken before open work order checks.
"""

from sqlalchemy import delete, func
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select

from pm_engine.domain.maintenance.repositories import ScheduleRepository
from pm_engine.models.maintenance import Asset, PMSchedule, PMScheduleTask

from .base import BaseRepository, DatabaseError


class SqlScheduleRepository(BaseRepository[PMSchedule], ScheduleRepository):
    """
    Repository implementation for PM schedules.

    Organization scoping joins through the owning asset, since schedules
    carry no organization of their own.
    """

    @property
    def entity_class(self):
        return PMSchedule

    def get_for_update(self, schedule_id: int) -> PMSchedule | None:
        """
        Get a schedule and lock its row.

        Uses SELECT ... FOR UPDATE where the dialect supports it. SQLite
        ignores the clause; there every transaction already starts with
        BEGIN IMMEDIATE and holds the database write lock.

        Raises:
            DatabaseError: If database operation fails
        """
        try:
            statement = (
                select(PMSchedule)
                .where(PMSchedule.id == schedule_id)
                .with_for_update()
                .execution_options(populate_existing=True)
            )
            return self.session.exec(statement).first()
        except SQLAlchemyError as e:
            raise DatabaseError(
                f"Error locking PM schedule {schedule_id}: {str(e)}"
            ) from e

    def list_for_organization(self, organization_id: int | None) -> list[PMSchedule]:
        try:
            statement = select(PMSchedule)
            if organization_id is not None:
                statement = statement.join(Asset, Asset.id == PMSchedule.asset_id).where(
                    Asset.organization_id == organization_id
                )
            statement = statement.order_by(
                PMSchedule.created_at.desc(), PMSchedule.id.desc()
            )
            return list(self.session.exec(statement).all())
        except SQLAlchemyError as e:
            raise DatabaseError(
                f"Error listing PM schedules for organization {organization_id}: "
                f"{str(e)}"
            ) from e

    def delete(self, schedule: PMSchedule) -> None:
        try:
            self.session.exec(
                delete(PMScheduleTask).where(
                    PMScheduleTask.pm_schedule_id == schedule.id
                )
            )
        except SQLAlchemyError as e:
            raise DatabaseError(
                f"Error deleting tasks of PM schedule {schedule.id}: {str(e)}"
            ) from e
        self.remove(schedule)

    def get_task_links(self, schedule_id: int) -> list[PMScheduleTask]:
        try:
            statement = (
                select(PMScheduleTask)
                .where(PMScheduleTask.pm_schedule_id == schedule_id)
                .order_by(PMScheduleTask.order_index, PMScheduleTask.id)
            )
            return list(self.session.exec(statement).all())
        except SQLAlchemyError as e:
            raise DatabaseError(
                f"Error finding tasks of PM schedule {schedule_id}: {str(e)}"
            ) from e

    def replace_tasks(
        self, schedule_id: int, task_ids: list[int]
    ) -> list[PMScheduleTask]:
        try:
            self.session.exec(
                delete(PMScheduleTask).where(
                    PMScheduleTask.pm_schedule_id == schedule_id
                )
            )
            links = [
                PMScheduleTask(
                    pm_schedule_id=schedule_id,
                    pm_task_id=task_id,
                    order_index=index,
                    is_required=True,
                )
                for index, task_id in enumerate(task_ids)
            ]
            self.session.add_all(links)
            self.session.flush()
            return links
        except SQLAlchemyError as e:
            raise DatabaseError(
                f"Error replacing tasks of PM schedule {schedule_id}: {str(e)}"
            ) from e

    def count_tasks(self, schedule_id: int) -> int:
        try:
            statement = select(func.count(PMScheduleTask.id)).where(
                PMScheduleTask.pm_schedule_id == schedule_id
            )
            return self.session.exec(statement).one()
        except SQLAlchemyError as e:
            raise DatabaseError(
                f"Error counting tasks of PM schedule {schedule_id}: {str(e)}"
            ) from e
