"""Read-only lookups of assets and PM task templates."""

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select

from pm_engine.domain.maintenance.repositories import (
    AssetRepository,
    TaskTemplateRepository,
)
from pm_engine.models.maintenance import Asset, PMTask

from .base import BaseRepository, DatabaseError


class SqlAssetRepository(BaseRepository[Asset], AssetRepository):
    """Repository implementation for assets."""

    @property
    def entity_class(self):
        return Asset


class SqlTaskTemplateRepository(BaseRepository[PMTask], TaskTemplateRepository):
    """Repository implementation for PM task templates."""

    @property
    def entity_class(self):
        return PMTask

    def get_by_ids(self, task_ids: list[int]) -> dict[int, PMTask]:
        if not task_ids:
            return {}
        try:
            statement = select(PMTask).where(PMTask.id.in_(set(task_ids)))
            return {task.id: task for task in self.session.exec(statement).all()}
        except SQLAlchemyError as e:
            raise DatabaseError(
                f"Error finding PM tasks {sorted(set(task_ids))}: {str(e)}"
            ) from e
