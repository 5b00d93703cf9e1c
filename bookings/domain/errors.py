"""Domain error codes for the bookings module."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_TRANSITION = "INVALID_TRANSITION"
    PRECONDITION_FAILED = "PRECONDITION_FAILED"
    DUPLICATE_ALLOCATION = "DUPLICATE_ALLOCATION"
    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    NOT_FOUND = "NOT_FOUND"
    INVALID_ID = "INVALID_ID"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    EXTERNAL_SERVICE_ERROR = "EXTERNAL_SERVICE_ERROR"


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class UnauthorizedError(DomainError):
    """Raised when the actor lacks the capability for an operation."""

    def __init__(self, operation: str) -> None:
        super().__init__(
            code=ErrorCode.UNAUTHORIZED,
            message="Operation not permitted",
        )
        object.__setattr__(self, "operation", operation)


class InvalidTransitionError(DomainError):
    """Raised when a target status is not one step away from the current one."""

    def __init__(self, current: str, target: str) -> None:
        super().__init__(
            code=ErrorCode.INVALID_TRANSITION,
            message=f"Cannot move from {current} to {target}",
        )


class PreconditionFailedError(DomainError):
    """Raised when a transition's cross-component precondition does not hold."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.PRECONDITION_FAILED, message=message)


class DuplicateAllocationError(DomainError):
    """Raised when a desired allocation list repeats a key."""

    def __init__(self, key: str) -> None:
        super().__init__(
            code=ErrorCode.DUPLICATE_ALLOCATION,
            message=f"Duplicate allocation for {key}",
        )


class EventNotFoundError(DomainError):
    """Raised when an event is not found."""

    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.EVENT_NOT_FOUND,
            message="Event not found",
        )
        object.__setattr__(self, "event_id", event_id)


class NotFoundError(DomainError):
    """Raised when a movement, assignment or allocation is not found."""

    def __init__(self, resource: str) -> None:
        super().__init__(
            code=ErrorCode.NOT_FOUND,
            message=f"{resource} not found",
        )


class InvalidIdError(DomainError):
    """Raised when an identifier is malformed."""

    def __init__(self, resource: str = "event") -> None:
        super().__init__(
            code=ErrorCode.INVALID_ID,
            message=f"Invalid {resource} ID format",
        )


class ValidationError(DomainError):
    """Raised for malformed input such as a non-positive movement amount."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.VALIDATION_ERROR, message=message)


class ExternalServiceError(DomainError):
    """Raised when the contract webhook or another collaborator fails."""

    def __init__(self, service: str) -> None:
        super().__init__(
            code=ErrorCode.EXTERNAL_SERVICE_ERROR,
            message=f"{service} is unavailable",
        )
