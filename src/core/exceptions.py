"""Custom exceptions and error codes."""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the API."""

    # Authentication errors (401)
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_TOKEN = "INVALID_TOKEN"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"

    # Authorization errors (403)
    FORBIDDEN = "FORBIDDEN"

    # Not found errors (404)
    PROFILE_NOT_FOUND = "PROFILE_NOT_FOUND"

    # Validation errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Conflict errors (409)
    CONSTRAINT_VIOLATION = "CONSTRAINT_VIOLATION"
    INVALID_STATE_TRANSITION = "INVALID_STATE_TRANSITION"

    # Server errors (500/503)
    INTERNAL_ERROR = "INTERNAL_ERROR"
    QUERY_FAILED = "QUERY_FAILED"
    NETWORK_ERROR = "NETWORK_ERROR"


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Any | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class AuthenticationError(AppException):
    """Authentication failed."""

    def __init__(
        self,
        message: str = "Authentication required",
        error_code: ErrorCode = ErrorCode.UNAUTHORIZED,
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=401,
        )


class AuthorizationError(AppException):
    """Authorization failed."""

    def __init__(self, message: str = "Access denied") -> None:
        super().__init__(
            error_code=ErrorCode.FORBIDDEN,
            message=message,
            status_code=403,
        )


class ValidationFailedError(AppException):
    """Input rejected before it reaches the store."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(
            error_code=ErrorCode.VALIDATION_ERROR,
            message=message,
            status_code=400,
            details={"field": field},
        )
        self.field = field


class ProfileNotFoundError(AppException):
    """Profile not found."""

    def __init__(self, user_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.PROFILE_NOT_FOUND,
            message=f"Profile not found: {user_id}",
            status_code=404,
            details={"user_id": user_id},
        )


class ConstraintViolationError(AppException):
    """A uniqueness or referential constraint rejected the write."""

    def __init__(self, message: str = "The write violated a data constraint") -> None:
        super().__init__(
            error_code=ErrorCode.CONSTRAINT_VIOLATION,
            message=message,
            status_code=409,
        )


class QueryFailedError(AppException):
    """The store could not answer a read; the result is unknown, not empty."""

    def __init__(self, query: str) -> None:
        super().__init__(
            error_code=ErrorCode.QUERY_FAILED,
            message=f"Query failed: {query}",
            status_code=503,
            details={"query": query},
        )


class NetworkError(AppException):
    """The client could not reach the API."""

    def __init__(self, message: str = "Could not reach the server") -> None:
        super().__init__(
            error_code=ErrorCode.NETWORK_ERROR,
            message=message,
            status_code=503,
        )


class InvalidStateTransitionError(AppException):
    """A client-side state machine was driven through an illegal transition."""

    def __init__(self, current: str, action: str) -> None:
        super().__init__(
            error_code=ErrorCode.INVALID_STATE_TRANSITION,
            message=f"Cannot {action} while {current}",
            status_code=409,
            details={"state": current, "action": action},
        )
