"""
Test Configuration and Fixtures

Every test that touches the database gets its own file-backed SQLite
database, so concurrent sessions behave the way they do outside tests.
"""

from collections.abc import Callable, Generator
from dataclasses import dataclass, field
from datetime import datetime

import pytest
from sqlalchemy import Engine
from sqlmodel import Session, select

from pm_engine.application.dtos import ScheduleCreateInput, ScheduleDetail
from pm_engine.application.services import BulkCascadeService, PMScheduleService
from pm_engine.core.db import (
    create_db_engine,
    create_session_factory,
    drop_db,
    init_db,
)
from pm_engine.domain.maintenance.value_objects import WorkOrderStatus
from pm_engine.infrastructure.database import UnitOfWorkManager
from pm_engine.models.maintenance import Asset, PMTask, PMTrigger, WorkOrder


@dataclass
class SeedData:
    """Ids of the reference rows every database test starts with."""

    organization_id: int = 1
    other_organization_id: int = 2
    asset_id: int = 7
    asset_name: str = "Hydraulic Pump"
    other_asset_id: int = 8
    task_ids: list[int] = field(default_factory=lambda: [1, 2])
    foreign_task_id: int = 3


@pytest.fixture
def engine(tmp_path) -> Generator[Engine, None, None]:
    engine = create_db_engine(f"sqlite:///{tmp_path / 'pm_engine.db'}", echo=False)
    init_db(engine)
    yield engine
    drop_db(engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine) -> Callable[[], Session]:
    return create_session_factory(engine)


@pytest.fixture
def uow_manager(session_factory) -> UnitOfWorkManager:
    return UnitOfWorkManager(session_factory)


@pytest.fixture
def seed(session_factory) -> SeedData:
    data = SeedData()
    with session_factory() as session:
        session.add_all(
            [
                Asset(
                    id=data.asset_id,
                    name=data.asset_name,
                    organization_id=data.organization_id,
                ),
                Asset(
                    id=data.other_asset_id,
                    name="Air Compressor",
                    organization_id=data.other_organization_id,
                ),
                PMTask(
                    id=1,
                    title="Check oil level",
                    description="Top up to the mark",
                    procedure="1. Stop pump\n2. Read sight glass",
                    organization_id=data.organization_id,
                ),
                PMTask(
                    id=2,
                    title="Grease bearings",
                    procedure="Two shots per fitting",
                    organization_id=data.organization_id,
                ),
                PMTask(
                    id=3,
                    title="Inspect belts",
                    organization_id=data.other_organization_id,
                ),
            ]
        )
        session.commit()
    return data


@pytest.fixture
def pm_service(uow_manager) -> PMScheduleService:
    return PMScheduleService(uow_manager)


@pytest.fixture
def bulk_service(uow_manager) -> BulkCascadeService:
    return BulkCascadeService(uow_manager)


@pytest.fixture
def make_schedule(
    pm_service, seed
) -> Callable[..., ScheduleDetail]:
    """Factory creating schedules through the service."""

    def _make(
        title: str = "Lube Pump",
        frequency: str | None = "weekly",
        organization_id: int | None = None,
        asset_id: int | None = None,
        task_ids: list[int] | None = None,
        next_due: datetime | None = None,
    ) -> ScheduleDetail:
        organization_id = organization_id or seed.organization_id
        if asset_id is None:
            asset_id = (
                seed.asset_id
                if organization_id == seed.organization_id
                else seed.other_asset_id
            )
        data = ScheduleCreateInput(
            title=title,
            frequency=frequency,
            asset_id=asset_id,
            task_ids=task_ids or [],
            next_due=next_due,
        )
        return pm_service.create_schedule(data, organization_id)

    return _make


@pytest.fixture
def db_reader(session_factory):
    """Read-only helpers for asserting on persisted rows."""

    class _Reader:
        def work_orders(self, schedule_id: int | None = None) -> list[WorkOrder]:
            with session_factory() as session:
                statement = select(WorkOrder).order_by(WorkOrder.id)
                if schedule_id is not None:
                    statement = statement.where(WorkOrder.pm_schedule_id == schedule_id)
                return list(session.exec(statement).all())

        def open_work_orders(self, schedule_id: int) -> list[WorkOrder]:
            return [wo for wo in self.work_orders(schedule_id) if wo.status.is_open]

        def triggers(self, schedule_id: int) -> list[PMTrigger]:
            with session_factory() as session:
                statement = select(PMTrigger).where(
                    PMTrigger.pm_schedule_id == schedule_id
                )
                return list(session.exec(statement).all())

        def set_work_order_status(
            self, work_order_id: int, status: WorkOrderStatus
        ) -> None:
            with session_factory() as session:
                work_order = session.get(WorkOrder, work_order_id)
                work_order.status = status
                session.add(work_order)
                session.commit()

    return _Reader()
