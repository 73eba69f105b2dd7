"""
Work Order Materializer

Turns a PM schedule into a concrete work order with a snapshot of its
checklist, and keeps at most one open work order per schedule.
"""

from pm_engine.core.config import get_settings
from pm_engine.core.observability import get_logger
from pm_engine.domain.shared.exceptions import AssetNotFoundError
from pm_engine.models.maintenance import PMSchedule, WorkOrder, WorkOrderTask

from ..repositories.reference_repositories import (
    AssetRepository,
    TaskTemplateRepository,
)
from ..repositories.work_order_repository import WorkOrderRepository
from ..value_objects.enums import (
    TaskCompletionStatus,
    WorkOrderPriority,
    WorkOrderStatus,
)
from ..value_objects.work_order_seed import WorkOrderSeedInput

logger = get_logger(__name__)

FALLBACK_ASSET_NAME = "Asset"


class WorkOrderMaterializer:
    """Creates work orders from PM schedules."""

    def __init__(
        self,
        work_order_repository: WorkOrderRepository,
        asset_repository: AssetRepository,
        task_template_repository: TaskTemplateRepository,
        default_priority: WorkOrderPriority | None = None,
    ) -> None:
        self._work_orders = work_order_repository
        self._assets = asset_repository
        self._task_templates = task_template_repository
        self._default_priority = (
            default_priority or get_settings().DEFAULT_WORK_ORDER_PRIORITY
        )

    def materialize(
        self,
        schedule: PMSchedule,
        task_ids: list[int],
        seed: WorkOrderSeedInput | None = None,
        organization_id: int | None = None,
    ) -> WorkOrder:
        """
        Create an OPEN work order for a schedule.

        The work order is due when the schedule is due. Each task template is
        copied into a work order task in the given order, so later template
        edits do not change work already handed out.

        Args:
            schedule: Flushed schedule
            task_ids: Task template ids in checklist order
            seed: Work-order-only values (priority, estimate, assignee)
            organization_id: Used when the asset cannot be loaded

        Raises:
            AssetNotFoundError: If no organization can be determined
        """
        seed = seed or WorkOrderSeedInput()
        asset = self._assets.get_by_id(schedule.asset_id)
        asset_name = asset.name if asset is not None else FALLBACK_ASSET_NAME
        if asset is not None:
            organization_id = asset.organization_id
        if organization_id is None:
            raise AssetNotFoundError(schedule.asset_id)

        work_order = WorkOrder(
            title=f"{schedule.title} - {asset_name}",
            description=schedule.description
            or f"Preventive maintenance for {asset_name}",
            status=WorkOrderStatus.OPEN,
            priority=seed.priority or self._default_priority,
            due_date=schedule.next_due,
            estimated_hours=seed.estimated_hours,
            assigned_to_id=seed.assigned_to_id,
            asset_id=schedule.asset_id,
            organization_id=organization_id,
            pm_schedule_id=schedule.id,
        )
        work_order = self._work_orders.add(work_order)

        tasks = self._snapshot_tasks(work_order, task_ids)
        if tasks:
            self._work_orders.add_tasks(tasks)

        logger.info(
            "work_order_materialized",
            work_order_id=work_order.id,
            schedule_id=schedule.id,
            task_count=len(tasks),
            due_date=work_order.due_date.isoformat() if work_order.due_date else None,
        )
        return work_order

    def ensure_open(
        self,
        schedule: PMSchedule,
        task_ids: list[int],
        seed: WorkOrderSeedInput | None = None,
        organization_id: int | None = None,
    ) -> WorkOrder | None:
        """
        Materialize a work order only if the schedule has no open one.

        Must run in the same transaction that locked the schedule row.

        Returns:
            The new work order, or None when an open one already exists
        """
        open_work_orders = self._work_orders.find_open_for_schedule(schedule.id)
        if open_work_orders:
            logger.debug(
                "work_order_already_open",
                schedule_id=schedule.id,
                work_order_id=open_work_orders[0].id,
            )
            return None

        return self.materialize(schedule, task_ids, seed, organization_id)

    def _snapshot_tasks(
        self, work_order: WorkOrder, task_ids: list[int]
    ) -> list[WorkOrderTask]:
        if not task_ids:
            return []

        templates = self._task_templates.get_by_ids(task_ids)
        tasks = []
        for task_id in task_ids:
            template = templates.get(task_id)
            if template is None:
                logger.warning(
                    "pm_task_missing_at_materialization",
                    work_order_id=work_order.id,
                    task_id=task_id,
                )
                continue
            tasks.append(
                WorkOrderTask(
                    work_order_id=work_order.id,
                    pm_task_id=template.id,
                    title=template.title,
                    description=template.description,
                    procedure=template.procedure,
                    order_index=len(tasks),
                    status=TaskCompletionStatus.NOT_STARTED,
                )
            )
        return tasks
