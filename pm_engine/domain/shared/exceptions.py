"""
Domain Exceptions

Custom exceptions for preventive-maintenance errors, discriminated by
ErrorType so the API layer can map them without inspecting messages.
"""

from enum import Enum


class ErrorType(str, Enum):
    """Error type enumeration for discriminated unions."""

    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    REPOSITORY = "repository"
    TRANSACTION = "transaction"


class DomainError(Exception):
    """Base class for all domain errors with type discrimination."""

    def __init__(
        self,
        message: str,
        error_type: ErrorType,
        details: dict[str, str | int | bool | None] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.details = details or {}

    def to_dict(self) -> dict[str, str | dict[str, str | int | bool | None]]:
        """Convert error to dictionary for API responses."""
        return {
            "type": self.error_type.value,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(DomainError):
    """Raised when domain validation rules are violated."""

    def __init__(
        self,
        field_name: str,
        value: str | int | float | bool | None,
        message: str,
        error_code: str | None = None,
    ) -> None:
        self.field_name = field_name
        self.value = value
        self.error_code = error_code or "VALIDATION_ERROR"

        full_message = f"Validation failed for field '{field_name}': {message}"
        details: dict[str, str | int | bool | None] = {
            "field": field_name,
            "value": str(value) if value is not None else None,
            "error_code": self.error_code,
        }

        super().__init__(full_message, ErrorType.VALIDATION, details)


class NotFoundError(DomainError):
    """Base class for missing referenced entities."""

    entity_type = "entity"
    label = "Entity"

    def __init__(self, entity_id: int | None) -> None:
        details = {"entity_type": self.entity_type, "entity_id": entity_id}
        super().__init__(
            f"{self.label} not found: {entity_id}", ErrorType.NOT_FOUND, details
        )
        self.entity_id = entity_id


class ScheduleNotFoundError(NotFoundError):
    """Raised when a PM schedule is not found."""

    entity_type = "pm_schedule"
    label = "PM schedule"


class AssetNotFoundError(NotFoundError):
    """Raised when the asset a schedule refers to is not found."""

    entity_type = "asset"
    label = "Asset"


class TaskNotFoundError(NotFoundError):
    """Raised when a PM task template is not found."""

    entity_type = "pm_task"
    label = "PM task"


class TriggerNotFoundError(NotFoundError):
    """Raised when a PM trigger is not found."""

    entity_type = "pm_trigger"
    label = "PM trigger"


class RepositoryError(DomainError):
    """Base class for persistence failures."""

    def __init__(
        self, message: str, details: dict[str, str | int | bool | None] | None = None
    ) -> None:
        super().__init__(message, ErrorType.REPOSITORY, details)


class TransactionFailureError(DomainError):
    """
    Raised when the transaction behind a single-schedule operation aborts.

    The original cause is chained; callers are expected to surface it, not
    retry.
    """

    def __init__(
        self,
        operation: str,
        cause: Exception,
        schedule_id: int | None = None,
    ) -> None:
        message = f"Failed to {operation} PM schedule: {cause}"
        details = {
            "operation": operation,
            "schedule_id": schedule_id,
            "cause": type(cause).__name__,
        }
        super().__init__(message, ErrorType.TRANSACTION, details)
        self.operation = operation
        self.cause = cause
