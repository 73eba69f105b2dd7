"""Preventive maintenance table models."""

from .asset import Asset, AssetBase, PMTask, PMTaskBase
from .pm_schedule import PMSchedule, PMScheduleBase, PMScheduleTask
from .pm_trigger import PMTrigger
from .work_order import WorkOrder, WorkOrderBase, WorkOrderTask

__all__ = [
    "Asset",
    "AssetBase",
    "PMTask",
    "PMTaskBase",
    "PMSchedule",
    "PMScheduleBase",
    "PMScheduleTask",
    "PMTrigger",
    "WorkOrder",
    "WorkOrderBase",
    "WorkOrderTask",
]
