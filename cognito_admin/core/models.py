"""Record types returned by the Cognito services."""
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass
class UserRecord:
    """A Cognito user as exposed by the API."""
    username: str
    user_id: Optional[str] = None
    email: Optional[str] = None
    phone_number: Optional[str] = None
    enabled: Optional[bool] = None
    email_verified: Optional[bool] = None
    phone_number_verified: Optional[bool] = None
    user_status: Optional[str] = None
    user_create_date: Optional[datetime] = None
    user_last_modified_date: Optional[datetime] = None
    groups: Optional[list[str]] = None
    attributes: dict[str, str] = field(default_factory=dict)


@dataclass
class GroupRecord:
    """A Cognito group as exposed by the API."""
    group_name: str
    description: Optional[str] = None
    precedence: Optional[int] = None
    creation_date: Optional[datetime] = None
    last_modified_date: Optional[datetime] = None
    users: Optional[list[str]] = None


@dataclass
class UserRequest:
    """Validated create/update payload for a user."""
    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    phone_number: Optional[str] = None
    email_verified: Optional[bool] = None
    phone_number_verified: Optional[bool] = None
    attributes: Optional[dict[str, str]] = None


@dataclass
class GroupRequest:
    """Validated create/update payload for a group."""
    group_name: Optional[str] = None
    description: Optional[str] = None
    precedence: Optional[int] = None
