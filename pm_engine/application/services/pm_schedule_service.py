"""
PM schedule application service.

Coordinates schedule creation, updates and deletion across the domain
services. Each operation runs in a single unit of work, so a schedule, its
checklist, its trigger and its work order are committed together or not at
all.
"""

from datetime import datetime, timedelta

from sqlalchemy.exc import SQLAlchemyError

from pm_engine.core.config import Settings, get_settings
from pm_engine.core.observability import get_logger
from pm_engine.domain.maintenance.repositories import UnitOfWork
from pm_engine.domain.maintenance.services import (
    TriggerLifecycleService,
    WorkOrderMaterializer,
    derive_schedule_state,
)
from pm_engine.domain.maintenance.value_objects import (
    as_utc,
    match_rule,
    next_due,
    utc_now,
)
from pm_engine.domain.shared.exceptions import (
    AssetNotFoundError,
    RepositoryError,
    ScheduleNotFoundError,
    TaskNotFoundError,
    TransactionFailureError,
    TriggerNotFoundError,
    ValidationError,
)
from pm_engine.infrastructure.database.unit_of_work import (
    UnitOfWorkManager,
    get_unit_of_work_manager,
)
from pm_engine.models.maintenance import Asset, PMSchedule, PMTrigger, WorkOrder

from ..dtos.pm_schedule_dtos import (
    AssetSummary,
    DueWorkOrdersResult,
    ScheduleCreateInput,
    ScheduleDetail,
    ScheduleSummary,
    ScheduleTaskResponse,
    ScheduleUpdatePayload,
    TriggerFailure,
    TriggerResponse,
    WorkOrderResponse,
    WorkOrderTaskResponse,
)

logger = get_logger(__name__)

PERSISTENCE_ERRORS = (RepositoryError, SQLAlchemyError)


class PMScheduleService:
    """
    Application service for the PM schedule lifecycle.

    An organization id, when given, scopes every lookup: schedules and
    assets of other organizations are reported as not found.
    """

    def __init__(
        self,
        uow_manager: UnitOfWorkManager | None = None,
        settings: Settings | None = None,
    ):
        """
        Initialize the PM schedule service.

        Args:
            uow_manager: Source of units of work, defaults to the global one
            settings: Settings override, defaults to the cached settings
        """
        self._uow_manager = uow_manager or get_unit_of_work_manager()
        self._settings = settings or get_settings()

    def create_schedule(
        self, data: ScheduleCreateInput, organization_id: int | None = None
    ) -> ScheduleDetail:
        """
        Create a schedule with its checklist, trigger and first work order.

        Raises:
            ValidationError: If the title is blank
            AssetNotFoundError: If the asset is missing or not owned
            TaskNotFoundError: If a task template is missing or not owned
            TransactionFailureError: If persisting fails
        """
        title = self._validated_title(data.title)
        frequency, rule = match_rule(data.frequency)

        try:
            with self._uow_manager.transaction() as uow:
                asset = self._get_owned_asset(uow, data.asset_id, organization_id)
                task_ids = self._validated_task_ids(
                    uow, data.task_ids, asset.organization_id
                )

                schedule = uow.schedules.add(
                    PMSchedule(
                        title=title,
                        description=data.description,
                        frequency=frequency,
                        next_due=data.next_due or next_due(frequency, utc_now()),
                        asset_id=asset.id,
                    )
                )
                if task_ids:
                    uow.schedules.replace_tasks(schedule.id, task_ids)

                self._trigger_lifecycle(uow).create_for_schedule(schedule)
                self._materializer(uow).materialize(
                    schedule, task_ids, data.seed(), asset.organization_id
                )
                detail = self._build_detail(uow, schedule, asset)
        except PERSISTENCE_ERRORS as e:
            logger.error(
                "pm_schedule_create_failed",
                asset_id=data.asset_id,
                error=str(e),
                exc_info=True,
            )
            raise TransactionFailureError("create", e) from e

        logger.info(
            "pm_schedule_created",
            schedule_id=detail.id,
            asset_id=detail.asset_id,
            frequency=frequency.value,
            frequency_rule=rule,
            raw_frequency=data.frequency,
        )
        return detail

    def update_schedule(
        self,
        schedule_id: int,
        payload: ScheduleUpdatePayload,
        organization_id: int | None = None,
    ) -> ScheduleDetail:
        """
        Update a schedule and make sure it has an open work order.

        Work order fields in the payload (priority, estimated hours,
        assignee) are only used if a new work order is materialized. The
        asset of a schedule never changes.

        Raises:
            ScheduleNotFoundError: If the schedule is missing or not owned
            TaskNotFoundError: If a task template is missing or not owned
            ValidationError: If the title is blank
            TransactionFailureError: If persisting fails
        """
        update, seed = payload.split()
        provided = update.model_fields_set
        title = (
            self._validated_title(update.title)
            if "title" in provided and update.title is not None
            else None
        )

        try:
            with self._uow_manager.transaction() as uow:
                schedule, asset = self._get_owned_schedule(
                    uow, schedule_id, organization_id, lock=True
                )

                frequency_changed = False
                if update.frequency is not None:
                    frequency = match_rule(update.frequency)[0]
                    if frequency != schedule.frequency:
                        schedule.frequency = frequency
                        frequency_changed = True
                        if update.next_due is None:
                            schedule.next_due = next_due(frequency, utc_now())

                if update.next_due is not None:
                    schedule.next_due = update.next_due
                if title is not None:
                    schedule.title = title
                if "description" in provided:
                    schedule.description = update.description
                uow.schedules.save(schedule)

                if update.task_ids is not None:
                    task_ids = self._validated_task_ids(
                        uow, update.task_ids, asset.organization_id
                    )
                    uow.schedules.replace_tasks(schedule.id, task_ids)
                else:
                    task_ids = [
                        link.pm_task_id
                        for link in uow.schedules.get_task_links(schedule.id)
                    ]

                self._trigger_lifecycle(uow).reconcile(
                    schedule,
                    frequency_changed=frequency_changed,
                    next_due_changed=update.next_due is not None,
                )
                work_order = self._materializer(uow).ensure_open(
                    schedule, task_ids, seed, asset.organization_id
                )
                detail = self._build_detail(uow, schedule, asset)
        except PERSISTENCE_ERRORS as e:
            logger.error(
                "pm_schedule_update_failed",
                schedule_id=schedule_id,
                error=str(e),
                exc_info=True,
            )
            raise TransactionFailureError("update", e, schedule_id) from e

        logger.info(
            "pm_schedule_updated",
            schedule_id=schedule_id,
            frequency=detail.frequency.value,
            frequency_changed=frequency_changed,
            work_order_created=work_order.id if work_order else None,
        )
        return detail

    def delete_schedule(
        self, schedule_id: int, organization_id: int | None = None
    ) -> None:
        """
        Delete a schedule with its checklist and trigger.

        Work orders are kept and detached from the schedule.

        Raises:
            ScheduleNotFoundError: If the schedule is missing or not owned
            TransactionFailureError: If persisting fails
        """
        try:
            with self._uow_manager.transaction() as uow:
                schedule, _ = self._get_owned_schedule(
                    uow, schedule_id, organization_id, lock=True
                )
                detached = uow.work_orders.detach_from_schedule(schedule.id)
                uow.triggers.delete_for_schedule(schedule.id)
                uow.schedules.delete(schedule)
        except PERSISTENCE_ERRORS as e:
            logger.error(
                "pm_schedule_delete_failed",
                schedule_id=schedule_id,
                error=str(e),
                exc_info=True,
            )
            raise TransactionFailureError("delete", e, schedule_id) from e

        logger.info(
            "pm_schedule_deleted",
            schedule_id=schedule_id,
            detached_work_orders=detached,
        )

    def get_schedule(
        self, schedule_id: int, organization_id: int | None = None
    ) -> ScheduleDetail:
        """
        Get a schedule with its relations.

        Raises:
            ScheduleNotFoundError: If the schedule is missing or not owned
        """
        with self._uow_manager.transaction() as uow:
            schedule, asset = self._get_owned_schedule(
                uow, schedule_id, organization_id
            )
            return self._build_detail(uow, schedule, asset)

    def list_schedules(self, organization_id: int | None = None) -> list[ScheduleSummary]:
        """List schedules, newest first, with their most recent work orders."""
        limit = self._settings.RECENT_WORK_ORDERS_LIMIT
        summaries = []

        with self._uow_manager.transaction() as uow:
            for schedule in uow.schedules.list_for_organization(organization_id):
                asset = uow.assets.get_by_id(schedule.asset_id)
                recent = uow.work_orders.list_for_schedule(schedule.id, limit=limit)
                open_work_orders = uow.work_orders.find_open_for_schedule(schedule.id)
                summaries.append(
                    ScheduleSummary(
                        id=schedule.id,
                        title=schedule.title,
                        description=schedule.description,
                        frequency=schedule.frequency,
                        next_due=schedule.next_due,
                        asset_id=schedule.asset_id,
                        asset=AssetSummary.model_validate(asset) if asset else None,
                        recent_work_orders=[
                            self._work_order_response(uow, wo, with_tasks=False)
                            for wo in recent
                        ],
                        task_count=uow.schedules.count_tasks(schedule.id),
                        work_order_count=uow.work_orders.count_for_schedule(
                            schedule.id
                        ),
                        state=derive_schedule_state(open_work_orders),
                    )
                )

        return summaries

    def mark_trigger_fired(
        self,
        trigger_id: int,
        fired_at: datetime | None = None,
        organization_id: int | None = None,
    ) -> TriggerResponse:
        """
        Record that a trigger fired and advance its and its schedule's due date.

        Raises:
            TriggerNotFoundError: If the trigger is missing or not owned
        """
        with self._uow_manager.transaction() as uow:
            trigger = uow.triggers.get_by_id(trigger_id)
            if trigger is None:
                raise TriggerNotFoundError(trigger_id)
            try:
                schedule, _ = self._get_owned_schedule(
                    uow, trigger.pm_schedule_id, organization_id, lock=True
                )
            except ScheduleNotFoundError as e:
                raise TriggerNotFoundError(trigger_id) from e

            trigger = self._fire_trigger(
                uow, schedule, trigger_id, as_utc(fired_at) if fired_at else None
            )
            return TriggerResponse.model_validate(trigger)

    def list_due_triggers(self, as_of: datetime | None = None) -> list[TriggerResponse]:
        """Active triggers due at or before as_of, for an external poller."""
        as_of = as_utc(as_of) if as_of else None
        with self._uow_manager.transaction() as uow:
            triggers = self._trigger_lifecycle(uow).due_triggers(as_of)
            return [TriggerResponse.model_validate(t) for t in triggers]

    def list_upcoming_triggers(
        self, days: int = 7, as_of: datetime | None = None
    ) -> list[TriggerResponse]:
        """
        Active triggers coming due within the next days.

        Raises:
            ValidationError: If days is negative
        """
        if days < 0:
            raise ValidationError("days", days, "Window must not be negative")
        as_of = as_utc(as_of) if as_of else None
        with self._uow_manager.transaction() as uow:
            triggers = self._trigger_lifecycle(uow).upcoming_triggers(
                timedelta(days=days), as_of
            )
            return [TriggerResponse.model_validate(t) for t in triggers]

    def generate_due_work_orders(
        self, as_of: datetime | None = None
    ) -> DueWorkOrdersResult:
        """
        Turn due triggers into work orders.

        Each due trigger is handled in its own unit of work with its schedule
        row locked. A work order is materialized only when the schedule has no
        open one; the trigger is then fired and the schedule's next_due moves
        along with it. A trigger whose schedule still has open work stays due.
        A failing trigger is recorded and does not stop the others.

        Args:
            as_of: Evaluation time, defaults to now

        Returns:
            Work orders created plus fired, pending and failed trigger ids
        """
        as_of = as_utc(as_of) if as_of else utc_now()
        result = DueWorkOrdersResult()

        with self._uow_manager.transaction() as uow:
            due = [
                (trigger.id, trigger.pm_schedule_id)
                for trigger in self._trigger_lifecycle(uow).due_triggers(as_of)
            ]

        for trigger_id, schedule_id in due:
            try:
                work_order = self._generate_for_trigger(trigger_id, schedule_id, as_of)
            except Exception as e:
                logger.warning(
                    "pm_work_order_generation_failed",
                    trigger_id=trigger_id,
                    schedule_id=schedule_id,
                    error=str(e),
                    exc_info=True,
                )
                result.failures.append(
                    TriggerFailure(
                        trigger_id=trigger_id, pm_schedule_id=schedule_id, error=str(e)
                    )
                )
                continue

            if work_order is None:
                result.pending_trigger_ids.append(trigger_id)
                continue

            result.work_orders.append(work_order)
            result.fired_trigger_ids.append(trigger_id)

        logger.info(
            "pm_due_work_orders_generated",
            due=len(due),
            generated=len(result.work_orders),
            pending=len(result.pending_trigger_ids),
            failed=len(result.failures),
        )
        return result

    def _generate_for_trigger(
        self, trigger_id: int, schedule_id: int, as_of: datetime
    ) -> WorkOrderResponse | None:
        with self._uow_manager.transaction() as uow:
            schedule = uow.schedules.get_for_update(schedule_id)
            trigger = uow.triggers.get_by_id(trigger_id)
            # Fired or removed since the due list was read.
            if (
                schedule is None
                or trigger is None
                or not trigger.is_active
                or trigger.next_due is None
                or trigger.next_due > as_of
            ):
                return None

            asset = uow.assets.get_by_id(schedule.asset_id)
            task_ids = [
                link.pm_task_id for link in uow.schedules.get_task_links(schedule.id)
            ]
            work_order = self._materializer(uow).ensure_open(
                schedule,
                task_ids,
                organization_id=asset.organization_id if asset else None,
            )
            if work_order is None:
                return None

            self._fire_trigger(uow, schedule, trigger_id, as_of)
            return self._work_order_response(uow, work_order)

    def _fire_trigger(
        self,
        uow: UnitOfWork,
        schedule: PMSchedule,
        trigger_id: int,
        fired_at: datetime | None,
    ) -> PMTrigger:
        trigger = self._trigger_lifecycle(uow).mark_fired(trigger_id, fired_at)
        schedule.next_due = trigger.next_due
        uow.schedules.save(schedule)
        return trigger

    def _trigger_lifecycle(self, uow: UnitOfWork) -> TriggerLifecycleService:
        return TriggerLifecycleService(uow.triggers)

    def _materializer(self, uow: UnitOfWork) -> WorkOrderMaterializer:
        return WorkOrderMaterializer(
            uow.work_orders,
            uow.assets,
            uow.task_templates,
            default_priority=self._settings.DEFAULT_WORK_ORDER_PRIORITY,
        )

    @staticmethod
    def _validated_title(title: str | None) -> str:
        if title is None or not title.strip():
            raise ValidationError("title", title, "Title must not be blank")
        return title.strip()

    @staticmethod
    def _get_owned_asset(
        uow: UnitOfWork, asset_id: int, organization_id: int | None
    ) -> Asset:
        asset = uow.assets.get_by_id(asset_id)
        if asset is None:
            raise AssetNotFoundError(asset_id)
        if organization_id is not None and asset.organization_id != organization_id:
            raise AssetNotFoundError(asset_id)
        return asset

    @staticmethod
    def _get_owned_schedule(
        uow: UnitOfWork,
        schedule_id: int,
        organization_id: int | None,
        lock: bool = False,
    ) -> tuple[PMSchedule, Asset | None]:
        if lock:
            schedule = uow.schedules.get_for_update(schedule_id)
        else:
            schedule = uow.schedules.get_by_id(schedule_id)
        if schedule is None:
            raise ScheduleNotFoundError(schedule_id)

        asset = uow.assets.get_by_id(schedule.asset_id)
        if organization_id is not None and (
            asset is None or asset.organization_id != organization_id
        ):
            raise ScheduleNotFoundError(schedule_id)
        return schedule, asset

    @staticmethod
    def _validated_task_ids(
        uow: UnitOfWork, task_ids: list[int], organization_id: int
    ) -> list[int]:
        templates = uow.task_templates.get_by_ids(task_ids)
        for task_id in task_ids:
            template = templates.get(task_id)
            if template is None or template.organization_id != organization_id:
                raise TaskNotFoundError(task_id)
        return list(task_ids)

    def _build_detail(
        self, uow: UnitOfWork, schedule: PMSchedule, asset: Asset | None
    ) -> ScheduleDetail:
        links = uow.schedules.get_task_links(schedule.id)
        templates = uow.task_templates.get_by_ids([link.pm_task_id for link in links])
        tasks = [
            ScheduleTaskResponse(
                task_id=link.pm_task_id,
                title=templates[link.pm_task_id].title
                if link.pm_task_id in templates
                else "",
                order_index=link.order_index,
                is_required=link.is_required,
            )
            for link in links
        ]

        trigger = uow.triggers.get_active_for_schedule(schedule.id)
        open_work_orders = uow.work_orders.find_open_for_schedule(schedule.id)

        return ScheduleDetail(
            id=schedule.id,
            title=schedule.title,
            description=schedule.description,
            frequency=schedule.frequency,
            next_due=schedule.next_due,
            asset_id=schedule.asset_id,
            asset=AssetSummary.model_validate(asset) if asset else None,
            tasks=tasks,
            trigger=TriggerResponse.model_validate(trigger) if trigger else None,
            open_work_order=self._work_order_response(uow, open_work_orders[0])
            if open_work_orders
            else None,
            state=derive_schedule_state(open_work_orders),
            created_at=schedule.created_at,
            updated_at=schedule.updated_at,
        )

    @staticmethod
    def _work_order_response(
        uow: UnitOfWork, work_order: WorkOrder, with_tasks: bool = True
    ) -> WorkOrderResponse:
        tasks = uow.work_orders.list_tasks(work_order.id) if with_tasks else []
        return WorkOrderResponse(
            **work_order.model_dump(),
            tasks=[WorkOrderTaskResponse.model_validate(task) for task in tasks],
        )
