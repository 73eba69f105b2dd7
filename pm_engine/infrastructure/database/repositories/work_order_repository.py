"""Work order repository implementation."""

from sqlalchemy import delete, func, update
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select

from pm_engine.domain.maintenance.repositories import WorkOrderRepository
from pm_engine.domain.maintenance.value_objects import TERMINAL_WORK_ORDER_STATUSES
from pm_engine.models.maintenance import WorkOrder, WorkOrderTask

from .base import BaseRepository, DatabaseError


class SqlWorkOrderRepository(BaseRepository[WorkOrder], WorkOrderRepository):
    """Repository implementation for work orders and their task snapshots."""

    @property
    def entity_class(self):
        return WorkOrder

    def add_tasks(self, tasks: list[WorkOrderTask]) -> list[WorkOrderTask]:
        try:
            self.session.add_all(tasks)
            self.session.flush()
            return tasks
        except SQLAlchemyError as e:
            raise DatabaseError(f"Error adding work order tasks: {str(e)}") from e

    def find_open_for_schedule(self, schedule_id: int) -> list[WorkOrder]:
        try:
            statement = (
                select(WorkOrder)
                .where(
                    WorkOrder.pm_schedule_id == schedule_id,
                    WorkOrder.status.not_in(list(TERMINAL_WORK_ORDER_STATUSES)),
                )
                .order_by(WorkOrder.id)
            )
            return list(self.session.exec(statement).all())
        except SQLAlchemyError as e:
            raise DatabaseError(
                f"Error finding open work orders of PM schedule {schedule_id}: "
                f"{str(e)}"
            ) from e

    def list_for_schedule(
        self, schedule_id: int, limit: int | None = None
    ) -> list[WorkOrder]:
        try:
            statement = (
                select(WorkOrder)
                .where(WorkOrder.pm_schedule_id == schedule_id)
                .order_by(WorkOrder.created_at.desc(), WorkOrder.id.desc())
            )
            if limit:
                statement = statement.limit(limit)
            return list(self.session.exec(statement).all())
        except SQLAlchemyError as e:
            raise DatabaseError(
                f"Error listing work orders of PM schedule {schedule_id}: {str(e)}"
            ) from e

    def count_for_schedule(self, schedule_id: int) -> int:
        try:
            statement = select(func.count(WorkOrder.id)).where(
                WorkOrder.pm_schedule_id == schedule_id
            )
            return self.session.exec(statement).one()
        except SQLAlchemyError as e:
            raise DatabaseError(
                f"Error counting work orders of PM schedule {schedule_id}: {str(e)}"
            ) from e

    def list_tasks(self, work_order_id: int) -> list[WorkOrderTask]:
        try:
            statement = (
                select(WorkOrderTask)
                .where(WorkOrderTask.work_order_id == work_order_id)
                .order_by(WorkOrderTask.order_index, WorkOrderTask.id)
            )
            return list(self.session.exec(statement).all())
        except SQLAlchemyError as e:
            raise DatabaseError(
                f"Error listing tasks of work order {work_order_id}: {str(e)}"
            ) from e

    def delete(self, work_order: WorkOrder) -> None:
        try:
            self.session.exec(
                delete(WorkOrderTask).where(
                    WorkOrderTask.work_order_id == work_order.id
                )
            )
        except SQLAlchemyError as e:
            raise DatabaseError(
                f"Error deleting tasks of work order {work_order.id}: {str(e)}"
            ) from e
        self.remove(work_order)

    def detach_from_schedule(self, schedule_id: int) -> int:
        try:
            result = self.session.exec(
                update(WorkOrder)
                .where(WorkOrder.pm_schedule_id == schedule_id)
                .values(pm_schedule_id=None)
                .execution_options(synchronize_session="fetch")
            )
            return result.rowcount
        except SQLAlchemyError as e:
            raise DatabaseError(
                f"Error detaching work orders of PM schedule {schedule_id}: {str(e)}"
            ) from e
