"""
Bulk cascade application service.

Deletes many PM schedules at once. Each schedule is handled in its own
unit of work so one failing schedule never undoes the others.
"""

from collections.abc import Iterable

from pm_engine.core.observability import get_logger
from pm_engine.infrastructure.database.unit_of_work import (
    UnitOfWorkManager,
    get_unit_of_work_manager,
)

from ..dtos.pm_schedule_dtos import BulkDeleteFailure, BulkDeleteResult

logger = get_logger(__name__)


class BulkCascadeService:
    """Application service for bulk schedule deletion."""

    def __init__(self, uow_manager: UnitOfWorkManager | None = None):
        self._uow_manager = uow_manager or get_unit_of_work_manager()

    def bulk_delete(
        self, schedule_ids: Iterable[int], organization_id: int
    ) -> BulkDeleteResult:
        """
        Delete schedules of one organization with their open work orders.

        Open work orders are deleted with their tasks; completed and canceled
        work orders are kept and detached. Ids that do not exist or belong to
        another organization are skipped. Failures are collected in the
        result instead of being raised.

        Args:
            schedule_ids: Schedules to delete; duplicates are processed once
            organization_id: Organization of the caller

        Returns:
            Aggregate result covering every requested id
        """
        result = BulkDeleteResult()

        for schedule_id in dict.fromkeys(schedule_ids):
            try:
                deleted_work_orders = self._delete_one(schedule_id, organization_id)
            except Exception as e:
                logger.warning(
                    "pm_schedule_bulk_delete_failed",
                    schedule_id=schedule_id,
                    organization_id=organization_id,
                    error=str(e),
                    exc_info=True,
                )
                result.failures.append(
                    BulkDeleteFailure(schedule_id=schedule_id, error=str(e))
                )
                continue

            if deleted_work_orders is None:
                result.skipped_ids.append(schedule_id)
                continue

            result.deleted_schedules += 1
            result.deleted_work_orders += deleted_work_orders
            result.processed_ids.append(schedule_id)

        logger.info(
            "pm_schedules_bulk_deleted",
            organization_id=organization_id,
            deleted_schedules=result.deleted_schedules,
            deleted_work_orders=result.deleted_work_orders,
            skipped=len(result.skipped_ids),
            failed=len(result.failures),
        )
        return result

    def _delete_one(self, schedule_id: int, organization_id: int) -> int | None:
        """
        Delete one schedule in its own transaction.

        Returns:
            Number of open work orders deleted, or None if the schedule is
            not visible to the organization
        """
        with self._uow_manager.transaction() as uow:
            schedule = uow.schedules.get_for_update(schedule_id)
            if schedule is None:
                return None
            asset = uow.assets.get_by_id(schedule.asset_id)
            if asset is None or asset.organization_id != organization_id:
                return None

            open_work_orders = uow.work_orders.find_open_for_schedule(schedule_id)
            for work_order in open_work_orders:
                uow.work_orders.delete(work_order)
            uow.work_orders.detach_from_schedule(schedule_id)
            uow.triggers.delete_for_schedule(schedule_id)
            uow.schedules.delete(schedule)

        logger.debug(
            "pm_schedule_cascade_deleted",
            schedule_id=schedule_id,
            deleted_work_orders=len(open_work_orders),
        )
        return len(open_work_orders)
