"""
API Dependencies

Dependency injection for the PM schedule routes. Authentication happens in
the host application; its auth layer stores the caller's organization on
request.state before these routes run.
"""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from pm_engine.application.services import BulkCascadeService, PMScheduleService
from pm_engine.core.observability import get_logger, set_organization_id

logger = get_logger(__name__)


def get_current_organization_id(request: Request) -> int:
    """Organization of the authenticated caller, never taken from the body."""
    organization_id = getattr(request.state, "organization_id", None)
    if organization_id is None:
        logger.warning("organization_missing", path=request.url.path)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    organization_id = int(organization_id)
    set_organization_id(organization_id)
    return organization_id


def get_pm_schedule_service() -> PMScheduleService:
    return PMScheduleService()


def get_bulk_cascade_service() -> BulkCascadeService:
    return BulkCascadeService()


OrganizationIdDep = Annotated[int, Depends(get_current_organization_id)]
PMScheduleServiceDep = Annotated[PMScheduleService, Depends(get_pm_schedule_service)]
BulkCascadeServiceDep = Annotated[
    BulkCascadeService, Depends(get_bulk_cascade_service)
]
