"""
PM Schedule API Routes.

CRUD endpoints for preventive-maintenance schedules plus bulk delete.
Every operation is scoped to the caller's organization.
"""

from typing import NoReturn

from fastapi import APIRouter, HTTPException, status

from pm_engine.api.deps import (
    BulkCascadeServiceDep,
    OrganizationIdDep,
    PMScheduleServiceDep,
)
from pm_engine.application.dtos import (
    BulkDeleteRequest,
    BulkDeleteResult,
    ScheduleCreateInput,
    ScheduleDetail,
    ScheduleSummary,
    ScheduleUpdatePayload,
)
from pm_engine.core.observability import get_logger
from pm_engine.domain.shared.exceptions import DomainError, ErrorType

logger = get_logger(__name__)

router = APIRouter(prefix="/pm-schedules", tags=["pm-schedules"])


_ERROR_STATUS = {
    ErrorType.VALIDATION: 422,
    ErrorType.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorType.REPOSITORY: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorType.TRANSACTION: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def _raise_http_error(error: DomainError) -> NoReturn:
    logger.warning(
        "pm_schedule_request_failed",
        error_type=error.error_type.value,
        message=error.message,
    )
    raise HTTPException(
        status_code=_ERROR_STATUS[error.error_type], detail=error.message
    ) from error


@router.get(
    "/",
    summary="List PM schedules",
    response_model=list[ScheduleSummary],
)
def list_pm_schedules(
    organization_id: OrganizationIdDep,
    service: PMScheduleServiceDep,
) -> list[ScheduleSummary]:
    """List the organization's schedules with their most recent work orders."""
    return service.list_schedules(organization_id)


@router.get(
    "/{schedule_id}",
    summary="Get PM schedule",
    response_model=ScheduleDetail,
    responses={404: {"description": "Schedule not found"}},
)
def get_pm_schedule(
    schedule_id: int,
    organization_id: OrganizationIdDep,
    service: PMScheduleServiceDep,
) -> ScheduleDetail:
    try:
        return service.get_schedule(schedule_id, organization_id)
    except DomainError as e:
        _raise_http_error(e)


@router.post(
    "/",
    summary="Create PM schedule",
    description="Create a schedule with its checklist, trigger and first work order.",
    response_model=ScheduleDetail,
    status_code=status.HTTP_201_CREATED,
    responses={
        404: {"description": "Asset or task not found"},
        422: {"description": "Invalid schedule data"},
    },
)
def create_pm_schedule(
    data: ScheduleCreateInput,
    organization_id: OrganizationIdDep,
    service: PMScheduleServiceDep,
) -> ScheduleDetail:
    try:
        return service.create_schedule(data, organization_id)
    except DomainError as e:
        _raise_http_error(e)


@router.put(
    "/{schedule_id}",
    summary="Update PM schedule",
    response_model=ScheduleDetail,
    responses={
        404: {"description": "Schedule or task not found"},
        422: {"description": "Invalid schedule data"},
    },
)
def update_pm_schedule(
    schedule_id: int,
    payload: ScheduleUpdatePayload,
    organization_id: OrganizationIdDep,
    service: PMScheduleServiceDep,
) -> ScheduleDetail:
    try:
        return service.update_schedule(schedule_id, payload, organization_id)
    except DomainError as e:
        _raise_http_error(e)


@router.delete(
    "/{schedule_id}",
    summary="Delete PM schedule",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"description": "Schedule not found"}},
)
def delete_pm_schedule(
    schedule_id: int,
    organization_id: OrganizationIdDep,
    service: PMScheduleServiceDep,
) -> None:
    try:
        service.delete_schedule(schedule_id, organization_id)
    except DomainError as e:
        _raise_http_error(e)


@router.post(
    "/bulk-delete",
    summary="Bulk delete PM schedules",
    description="Delete several schedules and their open work orders. Always "
    "returns an aggregate result, even when some schedules fail.",
    response_model=BulkDeleteResult,
)
def bulk_delete_pm_schedules(
    request: BulkDeleteRequest,
    organization_id: OrganizationIdDep,
    service: BulkCascadeServiceDep,
) -> BulkDeleteResult:
    return service.bulk_delete(request.schedule_ids, organization_id)
