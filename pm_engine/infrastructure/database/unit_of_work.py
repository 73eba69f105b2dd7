"""
Unit of Work implementation for managing transactions across repositories.

Every PM schedule operation runs inside one unit of work: repositories
flush, and the unit of work commits on a clean exit or rolls back when the
block raises.
"""

from collections.abc import Callable, Iterator
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from pm_engine.core.db import create_db_engine, create_session_factory
from pm_engine.domain.maintenance.repositories import UnitOfWork

from .repositories import (
    DatabaseError,
    SqlAssetRepository,
    SqlScheduleRepository,
    SqlTaskTemplateRepository,
    SqlTriggerRepository,
    SqlWorkOrderRepository,
)

SessionFactory = Callable[[], Session]


class SqlModelUnitOfWork(UnitOfWork):
    """
    SQLModel-based implementation of Unit of Work pattern.

    Manages one session and exposes every repository bound to it.
    """

    def __init__(self, session_factory: SessionFactory):
        """
        Initialize the unit of work.

        Args:
            session_factory: Callable returning a new SQLModel session
        """
        self._session_factory = session_factory
        self._session: Session | None = None

    def __enter__(self) -> "SqlModelUnitOfWork":
        self._session = self._session_factory()
        self._init_repositories()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        try:
            if exc_type is not None:
                self.rollback()
            else:
                self.commit()
        finally:
            if self._session:
                self._session.close()
                self._session = None

    def commit(self) -> None:
        """
        Commit the current transaction.

        Raises:
            DatabaseError: If commit fails (the transaction is rolled back)
        """
        session = self.session
        try:
            session.commit()
        except SQLAlchemyError as e:
            self.rollback()
            raise DatabaseError(f"Failed to commit transaction: {str(e)}") from e

    def rollback(self) -> None:
        """
        Rollback the current transaction.

        Raises:
            DatabaseError: If rollback fails
        """
        session = self.session
        try:
            session.rollback()
        except SQLAlchemyError as e:
            raise DatabaseError(f"Failed to rollback transaction: {str(e)}") from e

    def _init_repositories(self) -> None:
        session = self.session
        self.assets = SqlAssetRepository(session)
        self.task_templates = SqlTaskTemplateRepository(session)
        self.schedules = SqlScheduleRepository(session)
        self.triggers = SqlTriggerRepository(session)
        self.work_orders = SqlWorkOrderRepository(session)

    @property
    def session(self) -> Session:
        """
        Get the current database session.

        Raises:
            DatabaseError: If no active session
        """
        if not self._session:
            raise DatabaseError("No active database session")
        return self._session


class UnitOfWorkManager:
    """Factory for Unit of Work instances bound to one session factory."""

    def __init__(self, session_factory: SessionFactory | None = None):
        """
        Initialize the manager.

        Args:
            session_factory: Session factory; defaults to one built from the
                configured database URL
        """
        if session_factory is None:
            session_factory = create_session_factory(create_db_engine())
        self._session_factory = session_factory

    def create_unit_of_work(self) -> UnitOfWork:
        return SqlModelUnitOfWork(self._session_factory)

    @contextmanager
    def transaction(self) -> Iterator[UnitOfWork]:
        """
        Context manager for executing code within a transaction.

        Usage:
            with uow_manager.transaction() as uow:
                schedule = uow.schedules.get_for_update(schedule_id)
                schedule.title = "Lube Pump"

        Yields:
            Unit of Work instance
        """
        uow = self.create_unit_of_work()
        with uow:
            yield uow


# Global unit of work manager instance
_uow_manager: UnitOfWorkManager | None = None


def get_unit_of_work_manager() -> UnitOfWorkManager:
    """Get the global Unit of Work manager, creating it on first use."""
    global _uow_manager
    if _uow_manager is None:
        _uow_manager = UnitOfWorkManager()
    return _uow_manager


def configure_unit_of_work(session_factory: SessionFactory | None = None) -> None:
    """Replace the global Unit of Work manager."""
    global _uow_manager
    _uow_manager = UnitOfWorkManager(session_factory)
