"""
Read-only repository interfaces for data owned by the wider platform.

Assets and PM task templates are maintained elsewhere; the engine only
looks them up.
"""

from abc import ABC, abstractmethod

from pm_engine.models.maintenance import Asset, PMTask


class AssetRepository(ABC):
    """Asset lookup."""

    @abstractmethod
    def get_by_id(self, asset_id: int) -> Asset | None:
        pass


class TaskTemplateRepository(ABC):
    """PM task template lookup."""

    @abstractmethod
    def get_by_ids(self, task_ids: list[int]) -> dict[int, PMTask]:
        """
        Look up task templates by id.

        Returns:
            Mapping of id to template; ids with no row are absent
        """
