from .base import BaseRepository, DatabaseError
from .reference_repositories import SqlAssetRepository, SqlTaskTemplateRepository
from .schedule_repository import SqlScheduleRepository
from .trigger_repository import SqlTriggerRepository
from .work_order_repository import SqlWorkOrderRepository

__all__ = [
    "BaseRepository",
    "DatabaseError",
    "SqlAssetRepository",
    "SqlScheduleRepository",
    "SqlTaskTemplateRepository",
    "SqlTriggerRepository",
    "SqlWorkOrderRepository",
]
