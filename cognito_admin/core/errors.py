"""Typed API errors rendered as RFC 7807 problem details."""
from __future__ import annotations
from datetime import datetime, timezone
from typing import Any, Iterable, Optional

PROBLEM_TYPE_BASE = "https://api.b2bcommerce.com/errors"


class ApiError(Exception):
    """Base error with HTTP status, problem title and error category."""

    status = 500
    title = "Internal Server Error"
    category = "INTERNAL_ERROR"
    type_slug = "internal-error"

    def __init__(self, detail: str, **properties: Any):
        self.detail = detail
        self.properties = properties
        super().__init__(detail)

    def to_dict(self) -> dict:
        """Convert to problem+json body."""
        problem = {
            "type": f"{PROBLEM_TYPE_BASE}/{self.type_slug}",
            "title": self.title,
            "status": self.status,
            "detail": self.detail,
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "errorCategory": self.category,
        }
        problem.update({k: v for k, v in self.properties.items() if v is not None})
        return problem


class InvalidSortFieldError(ApiError):
    """Sort field is not in the allow-list of the listed record type."""

    status = 400
    title = "Invalid Sort Field"
    category = "INVALID_PARAMETER"
    type_slug = "invalid-sort-field"

    def __init__(self, field: str, valid_fields: Iterable[str]):
        self.field = field
        self.valid_fields = sorted(valid_fields)
        super().__init__(
            f"Invalid sort field: {field}. Valid values: {', '.join(self.valid_fields)}",
            validSortFields=self.valid_fields,
        )


class ValidationError(ApiError):
    """Request payload or query parameters failed validation."""

    status = 400
    title = "Validation Error"
    category = "VALIDATION_ERROR"
    type_slug = "validation"

    def __init__(self, errors: dict[str, str]):
        self.errors = errors
        summary = "; ".join(f"{field}: {message}" for field, message in errors.items())
        super().__init__(f"Request validation failed: {summary}", errors=errors)


class ResourceNotFoundError(ApiError):
    status = 404
    title = "Resource Not Found"
    category = "NOT_FOUND"
    type_slug = "not-found"


class CognitoError(ApiError):
    """Cognito rejected or failed an operation."""

    status = 400
    title = "Cognito Operation Failed"
    category = "COGNITO_ERROR"
    type_slug = "cognito"

    def __init__(self, detail: str, cause: Optional[BaseException] = None):
        self.cause = cause
        super().__init__(detail, cause=_cause_message(cause))


class AuthenticationError(ApiError):
    status = 401
    title = "Unauthorized"
    category = "UNAUTHORIZED"
    type_slug = "unauthorized"


class AuthorizationError(ApiError):
    status = 403
    title = "Access Denied"
    category = "ACCESS_DENIED"
    type_slug = "access-denied"


def _cause_message(cause: Optional[BaseException]) -> Optional[str]:
    if cause is None:
        return None
    response = getattr(cause, "response", None)
    if isinstance(response, dict):
        message = response.get("Error", {}).get("Message")
        if message:
            return message
    return str(cause)
