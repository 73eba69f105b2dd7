"""Tests for work order materialization and the at-most-one-open rule."""

from datetime import datetime

import pytest

from pm_engine.domain.maintenance.services import (
    WorkOrderMaterializer,
    derive_schedule_state,
)
from pm_engine.domain.maintenance.value_objects import (
    Frequency,
    ScheduleState,
    TaskCompletionStatus,
    WorkOrderPriority,
    WorkOrderSeedInput,
    WorkOrderStatus,
)
from pm_engine.domain.shared.exceptions import AssetNotFoundError
from pm_engine.models.maintenance import Asset, PMSchedule, PMTask

from .fakes import (
    InMemoryAssetRepository,
    InMemoryTaskTemplateRepository,
    InMemoryWorkOrderRepository,
)

DUE = datetime(2025, 6, 2, 6, 0)


@pytest.fixture
def work_orders():
    return InMemoryWorkOrderRepository()


@pytest.fixture
def templates():
    return InMemoryTaskTemplateRepository(
        PMTask(
            id=1,
            title="Check oil level",
            description="Top up",
            procedure="Read sight glass",
            organization_id=1,
        ),
        PMTask(id=2, title="Grease bearings", organization_id=1),
    )


@pytest.fixture
def materializer(work_orders, templates):
    assets = InMemoryAssetRepository(
        Asset(id=7, name="Hydraulic Pump", organization_id=1)
    )
    return WorkOrderMaterializer(
        work_orders, assets, templates, default_priority=WorkOrderPriority.MEDIUM
    )


def _schedule(asset_id: int = 7, description: str | None = None) -> PMSchedule:
    return PMSchedule(
        id=11,
        title="Lube Pump",
        description=description,
        frequency=Frequency.WEEKLY,
        next_due=DUE,
        asset_id=asset_id,
    )


class TestMaterialize:
    def test_builds_open_work_order_from_schedule(self, materializer):
        work_order = materializer.materialize(_schedule(), [])

        assert work_order.title == "Lube Pump - Hydraulic Pump"
        assert work_order.description == "Preventive maintenance for Hydraulic Pump"
        assert work_order.status == WorkOrderStatus.OPEN
        assert work_order.priority == WorkOrderPriority.MEDIUM
        assert work_order.due_date == DUE
        assert work_order.pm_schedule_id == 11
        assert work_order.asset_id == 7
        assert work_order.organization_id == 1

    def test_schedule_description_is_used(self, materializer):
        work_order = materializer.materialize(
            _schedule(description="Use ISO VG 46"), []
        )
        assert work_order.description == "Use ISO VG 46"

    def test_seed_values_apply(self, materializer):
        seed = WorkOrderSeedInput(
            priority=WorkOrderPriority.URGENT, estimated_hours=1.5, assigned_to_id=42
        )

        work_order = materializer.materialize(_schedule(), [], seed)

        assert work_order.priority == WorkOrderPriority.URGENT
        assert work_order.estimated_hours == 1.5
        assert work_order.assigned_to_id == 42

    def test_missing_asset_falls_back_to_generic_name(self, materializer):
        work_order = materializer.materialize(
            _schedule(asset_id=99), [], organization_id=1
        )

        assert work_order.title == "Lube Pump - Asset"
        assert work_order.description == "Preventive maintenance for Asset"

    def test_missing_asset_without_organization(self, materializer):
        with pytest.raises(AssetNotFoundError):
            materializer.materialize(_schedule(asset_id=99), [])

    def test_tasks_are_snapshotted_in_order(
        self, materializer, work_orders, templates
    ):
        work_order = materializer.materialize(_schedule(), [2, 1])

        tasks = work_orders.list_tasks(work_order.id)
        assert [t.title for t in tasks] == ["Grease bearings", "Check oil level"]
        assert [t.order_index for t in tasks] == [0, 1]
        assert all(t.status == TaskCompletionStatus.NOT_STARTED for t in tasks)
        assert tasks[1].procedure == "Read sight glass"

        templates.templates[1].title = "Check oil level (revised)"
        assert work_orders.list_tasks(work_order.id)[1].title == "Check oil level"

    def test_unknown_tasks_are_skipped(self, materializer, work_orders):
        work_order = materializer.materialize(_schedule(), [1, 404, 2])

        tasks = work_orders.list_tasks(work_order.id)
        assert [t.pm_task_id for t in tasks] == [1, 2]
        assert [t.order_index for t in tasks] == [0, 1]


class TestEnsureOpen:
    def test_creates_when_none_exists(self, materializer, work_orders):
        created = materializer.ensure_open(_schedule(), [1])

        assert created is not None
        assert work_orders.find_open_for_schedule(11) == [created]

    def test_abstains_when_open_exists(self, materializer, work_orders):
        existing = materializer.materialize(_schedule(), [])
        existing.status = WorkOrderStatus.ON_HOLD

        assert materializer.ensure_open(_schedule(), []) is None
        assert work_orders.count_for_schedule(11) == 1

    @pytest.mark.parametrize(
        "status", [WorkOrderStatus.COMPLETED, WorkOrderStatus.CANCELED]
    )
    def test_terminal_work_orders_do_not_count(
        self, materializer, work_orders, status
    ):
        finished = materializer.materialize(_schedule(), [])
        finished.status = status

        created = materializer.ensure_open(_schedule(), [])

        assert created is not None
        assert work_orders.count_for_schedule(11) == 2
        assert len(work_orders.find_open_for_schedule(11)) == 1


class TestScheduleState:
    def test_open_work(self, materializer, work_orders):
        materializer.materialize(_schedule(), [])
        state = derive_schedule_state(work_orders.list_for_schedule(11))
        assert state == ScheduleState.ACTIVE_WITH_OPEN_WORK

    def test_all_work_finished(self, materializer, work_orders):
        materializer.materialize(_schedule(), []).status = WorkOrderStatus.COMPLETED
        state = derive_schedule_state(work_orders.list_for_schedule(11))
        assert state == ScheduleState.ACTIVE_NO_OPEN_WORK

    def test_no_work_orders(self):
        assert derive_schedule_state([]) == ScheduleState.ACTIVE_NO_OPEN_WORK

    @pytest.mark.parametrize("status", list(WorkOrderStatus))
    def test_only_active_states_are_derived(self, materializer, work_orders, status):
        materializer.materialize(_schedule(), []).status = status
        state = derive_schedule_state(work_orders.list_for_schedule(11))
        assert state not in (ScheduleState.NEW, ScheduleState.DELETED)
        assert (state == ScheduleState.ACTIVE_WITH_OPEN_WORK) == status.is_open
