"""
inkconnect/core/exceptions.py

Description:
Defines a standard error response format for the API and the error
taxonomy raised by the service layer.

Every error renders as {"detail": {"error": <message>, "code": <code>}}.
"""

from typing import Any

from fastapi import HTTPException, status


class APIError(HTTPException):
    """Custom exception with standardized error response."""

    code = "api_error"

    def __init__(
        self,
        status_code: int,
        message: str,
        headers: dict[str, Any] | None = None,
        code: str | None = None,
    ):
        self.message = message
        super().__init__(
            status_code=status_code,
            detail={"error": message, "code": code or self.code},
            headers=headers,
        )


class ValidationError(APIError):
    """Input rejected before any state was changed."""

    code = "validation_error"

    def __init__(self, message: str, status_code: int = status.HTTP_400_BAD_REQUEST):
        super().__init__(status_code=status_code, message=message)


class NotFoundError(APIError):
    """A referenced profile, role record or entity does not exist."""

    code = "not_found"

    def __init__(self, message: str):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, message=message)


class PermissionDeniedError(APIError):
    """The caller's role or identity may not perform the operation."""

    code = "permission_denied"

    def __init__(self, message: str = "You do not have permission to perform this action"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, message=message)


class InvalidTransitionError(APIError):
    """An appointment status change that is not an edge of the lifecycle."""

    code = "invalid_transition"

    def __init__(self, current: str, requested: str):
        self.current = current
        self.requested = requested
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            message=f"Cannot move appointment from '{current}' to '{requested}'",
        )


class UpstreamError(APIError):
    """The database, object storage or mail provider failed."""

    code = "upstream_error"

    def __init__(self, message: str):
        super().__init__(status_code=status.HTTP_502_BAD_GATEWAY, message=message)
