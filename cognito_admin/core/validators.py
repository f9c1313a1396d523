"""Input validation for user/group payloads and listing query parameters."""
from __future__ import annotations
import re
from typing import Any, Mapping, Optional

from .errors import ValidationError
from .listing import PageRequest
from .models import GroupRequest, UserRequest

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 128
PASSWORD_MIN_LENGTH = 8
GROUP_NAME_MAX_LENGTH = 128
EMAIL_MAX_LENGTH = 254

EMAIL_PATTERN = re.compile(r"^[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}$")


# ─────────────────────────────────────────────────────────────────────────────
# Field checks (return an error message or None)
# ─────────────────────────────────────────────────────────────────────────────

def _check_username(value: Any) -> Optional[str]:
    if not isinstance(value, str) or not value.strip():
        return "username is required"
    if not USERNAME_MIN_LENGTH <= len(value.strip()) <= USERNAME_MAX_LENGTH:
        return f"username must be between {USERNAME_MIN_LENGTH} and {USERNAME_MAX_LENGTH} characters"
    return None


def _check_email(value: Any) -> Optional[str]:
    if not isinstance(value, str) or not value.strip():
        return "email is required"
    if len(value.strip()) > EMAIL_MAX_LENGTH:
        return f"email must not exceed {EMAIL_MAX_LENGTH} characters"
    if not EMAIL_PATTERN.match(value.strip()):
        return "email must be a valid email address"
    return None


def _check_password(value: Any) -> Optional[str]:
    if not isinstance(value, str) or len(value) < PASSWORD_MIN_LENGTH:
        return f"password must be at least {PASSWORD_MIN_LENGTH} characters"
    return None


def _check_optional_string(value: Any, field: str) -> Optional[str]:
    if value is not None and not isinstance(value, str):
        return f"{field} must be a string"
    return None


def _check_optional_bool(value: Any, field: str) -> Optional[str]:
    if value is not None and not isinstance(value, bool):
        return f"{field} must be a boolean"
    return None


def _check_attributes(value: Any) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, dict) or not all(
        isinstance(k, str) and isinstance(v, str) for k, v in value.items()
    ):
        return "attributes must be an object of string values"
    return None


def _check_group_name(value: Any) -> Optional[str]:
    if not isinstance(value, str) or not value.strip():
        return "groupName is required"
    if len(value.strip()) > GROUP_NAME_MAX_LENGTH:
        return f"groupName must not exceed {GROUP_NAME_MAX_LENGTH} characters"
    return None


def _check_precedence(value: Any) -> Optional[str]:
    if value is None:
        return None
    # bool is an int subclass
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        return "precedence must be a non-negative integer"
    return None


def _require_object(payload: Any) -> Mapping[str, Any]:
    if not isinstance(payload, dict):
        raise ValidationError({"body": "request body must be a JSON object"})
    return payload


def _raise_if_errors(errors: dict[str, Optional[str]]) -> None:
    failed = {field: message for field, message in errors.items() if message}
    if failed:
        raise ValidationError(failed)


# ─────────────────────────────────────────────────────────────────────────────
# Payload validation
# ─────────────────────────────────────────────────────────────────────────────

def _validate_user_common(payload: Mapping[str, Any]) -> dict[str, Optional[str]]:
    return {
        "phoneNumber": _check_optional_string(payload.get("phoneNumber"), "phoneNumber"),
        "emailVerified": _check_optional_bool(payload.get("emailVerified"), "emailVerified"),
        "phoneNumberVerified": _check_optional_bool(payload.get("phoneNumberVerified"), "phoneNumberVerified"),
        "attributes": _check_attributes(payload.get("attributes")),
    }


def validate_user_create(payload: Any) -> UserRequest:
    """Validate a create-user body.

    Raises:
        ValidationError: With one message per invalid field
    """
    payload = _require_object(payload)
    errors = {
        "username": _check_username(payload.get("username")),
        "email": _check_email(payload.get("email")),
    }
    if payload.get("password") is not None:
        errors["password"] = _check_password(payload.get("password"))
    errors.update(_validate_user_common(payload))
    _raise_if_errors(errors)

    return UserRequest(
        username=payload["username"].strip(),
        email=payload["email"].strip(),
        password=payload.get("password"),
        phone_number=payload.get("phoneNumber"),
        email_verified=payload.get("emailVerified"),
        phone_number_verified=payload.get("phoneNumberVerified"),
        attributes=payload.get("attributes"),
    )


def validate_user_update(payload: Any) -> UserRequest:
    """Validate an update-user body; every field is optional."""
    payload = _require_object(payload)
    errors = _validate_user_common(payload)
    if payload.get("email") is not None:
        errors["email"] = _check_email(payload.get("email"))
    _raise_if_errors(errors)

    email = payload.get("email")
    return UserRequest(
        email=email.strip() if email is not None else None,
        phone_number=payload.get("phoneNumber"),
        email_verified=payload.get("emailVerified"),
        phone_number_verified=payload.get("phoneNumberVerified"),
        attributes=payload.get("attributes"),
    )


def validate_group_create(payload: Any) -> GroupRequest:
    payload = _require_object(payload)
    _raise_if_errors({
        "groupName": _check_group_name(payload.get("groupName")),
        "description": _check_optional_string(payload.get("description"), "description"),
        "precedence": _check_precedence(payload.get("precedence")),
    })
    return GroupRequest(
        group_name=payload["groupName"].strip(),
        description=payload.get("description"),
        precedence=payload.get("precedence"),
    )


def validate_group_update(payload: Any) -> GroupRequest:
    """Validate an update-group body (groupName, if present, is ignored)."""
    payload = _require_object(payload)
    _raise_if_errors({
        "description": _check_optional_string(payload.get("description"), "description"),
        "precedence": _check_precedence(payload.get("precedence")),
    })
    return GroupRequest(
        description=payload.get("description"),
        precedence=payload.get("precedence"),
    )


# ─────────────────────────────────────────────────────────────────────────────
# Query parameters
# ─────────────────────────────────────────────────────────────────────────────

def _parse_int(raw: Optional[str], field: str, default: int, errors: dict[str, Optional[str]]) -> int:
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except (TypeError, ValueError):
        errors[field] = f"{field} must be an integer"
        return default


def parse_page_request(args: Mapping[str, str], default_size: int = 20, max_size: int = 100) -> PageRequest:
    """Build a PageRequest from `page`/`size` query parameters.

    Sizes above `max_size` are clamped; negative pages and sizes below 1
    are rejected.
    """
    errors: dict[str, Optional[str]] = {}
    page = _parse_int(args.get("page"), "page", 0, errors)
    size = _parse_int(args.get("size"), "size", default_size, errors)
    if "page" not in errors and page < 0:
        errors["page"] = "page must be greater than or equal to 0"
    if "size" not in errors and size < 1:
        errors["size"] = "size must be greater than or equal to 1"
    _raise_if_errors(errors)
    return PageRequest(page=page, size=min(size, max_size))
