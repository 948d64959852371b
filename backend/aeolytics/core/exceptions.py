"""
Custom HTTP exceptions for AEOlytics.

Services raise these directly; FastAPI renders them as
``{"detail": {"message": ..., "code": ...}}`` so clients can tell a quota
refusal from a duplicate or an entitlement refusal.
"""
import logging
from contextlib import contextmanager
from typing import Any, Iterator

from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class AEOlyticsError(HTTPException):
    """Base class for errors carrying a stable machine-readable code."""

    code = "error"

    def __init__(
        self,
        message: str,
        status_code: int,
        headers: dict[str, str] | None = None,
        **extra: Any,
    ):
        self.message = message
        super().__init__(
            status_code=status_code,
            detail={"message": message, "code": self.code, **extra},
            headers=headers,
        )

    def __str__(self) -> str:
        return self.message


class NotFoundError(AEOlyticsError):
    """Resource not found exception."""

    code = "not_found"

    def __init__(self, resource: str = "Resource"):
        super().__init__(f"{resource} not found", status.HTTP_404_NOT_FOUND)


class QuotaExceededError(AEOlyticsError):
    """An add operation would exceed the plan's domain or query limit."""

    code = "quota_exceeded"

    def __init__(self, resource: str, limit: int, plan: str):
        super().__init__(
            f"{resource.capitalize()} limit reached ({limit}). "
            f"Upgrade your plan for more {resource}.",
            status.HTTP_402_PAYMENT_REQUIRED,
            resource=resource,
            limit=limit,
            plan=plan,
            upgrade_url="/settings/billing",
        )


class DuplicateEntityError(AEOlyticsError):
    """The entity already exists for this owner."""

    code = "duplicate_entity"

    def __init__(self, detail: str):
        super().__init__(detail, status.HTTP_409_CONFLICT)


class NotEntitledError(AEOlyticsError):
    """The feature or engine is outside the caller's plan."""

    code = "not_entitled"

    def __init__(self, feature: str, plan: str):
        super().__init__(
            f"Your {plan} plan does not include {feature}",
            status.HTTP_403_FORBIDDEN,
            feature=feature,
            plan=plan,
        )


class StoreFailureError(AEOlyticsError):
    """The persistent store rejected or failed a call."""

    code = "store_failure"

    def __init__(self, detail: str):
        super().__init__(detail, status.HTTP_503_SERVICE_UNAVAILABLE)


class UpstreamServiceError(AEOlyticsError):
    """An external service (pipeline, LLM) failed."""

    code = "upstream_failure"

    def __init__(self, service: str, detail: str):
        super().__init__(
            f"{service} failed: {detail}",
            status.HTTP_502_BAD_GATEWAY,
            service=service,
        )


class ValidationFailureError(AEOlyticsError):
    """Malformed input rejected before any store call."""

    code = "validation_failure"

    def __init__(self, detail: str):
        super().__init__(detail, status.HTTP_422_UNPROCESSABLE_ENTITY)


class UnauthorizedError(AEOlyticsError):
    """Unauthorized exception."""

    code = "unauthorized"

    def __init__(self, detail: str = "Could not validate credentials"):
        super().__init__(
            detail,
            status.HTTP_401_UNAUTHORIZED,
            headers={"WWW-Authenticate": "Bearer"},
        )


@contextmanager
def store_errors(action: str) -> Iterator[None]:
    """Convert SQLAlchemy failures into StoreFailureError."""
    try:
        yield
    except SQLAlchemyError as e:
        logger.error(f"Store failure while trying to {action}: {e}")
        raise StoreFailureError(f"Failed to {action}: {e}") from e
