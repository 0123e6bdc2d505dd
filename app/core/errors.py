"""
Error taxonomy shared by all handlers.

Each error is an HTTPException so FastAPI renders it as {"detail": ...}
without extra handlers. Services re-raise these untouched and degrade
anything else to InternalError.
"""

from fastapi import HTTPException, status
from typing import Any, Dict, Optional

from app.config import settings


class AppError(HTTPException):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail: str = "Internal server error"

    def __init__(self, detail: Any = None, headers: Optional[Dict[str, str]] = None):
        super().__init__(
            status_code=self.status_code,
            detail=detail if detail is not None else self.default_detail,
            headers=headers,
        )


class AuthError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Unauthorized"

    def __init__(self, reason: str, message: str):
        super().__init__(
            detail={"error": reason, "message": message},
            headers={"WWW-Authenticate": "Bearer"},
        )
        self.reason = reason


class PermissionDeniedError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Insufficient permissions"


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid request"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Resource already exists"


class InternalError(AppError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Internal server error"

    def __init__(self, message: Optional[str] = None, exc: Optional[BaseException] = None):
        message = message or self.default_detail
        if exc is not None and not settings.is_production:
            message = f"{message}: {exc}"
        super().__init__(detail=message)
