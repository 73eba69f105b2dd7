from .bulk_cascade_service import BulkCascadeService
from .pm_schedule_service import PMScheduleService

__all__ = ["BulkCascadeService", "PMScheduleService"]
