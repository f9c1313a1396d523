"""Cognito ↔ API data transformations.

This module converts boto3 `cognito-idp` response shapes (UserType,
AdminGetUser output, GroupType) into UserRecord/GroupRecord, converts
request payloads into Cognito attribute lists, and renders records as the
camelCase JSON bodies returned by the API.

Usage:
    # Cognito → record
    user = CognitoTransformer.user_from_cognito(resp["Users"][0])

    # record → JSON
    body = CognitoTransformer.user_to_dict(user)
"""
from __future__ import annotations
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from .models import GroupRecord, GroupRequest, UserRecord, UserRequest


def _format_timestamp(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def _parse_bool(value: Optional[str]) -> Optional[bool]:
    if value is None:
        return None
    return value.strip().lower() == "true"


def _attribute(name: str, value: Any) -> Dict[str, str]:
    if isinstance(value, bool):
        value = "true" if value else "false"
    return {"Name": name, "Value": str(value)}


def _drop_none(payload: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in payload.items() if value is not None}


class CognitoTransformer:
    """Converters between Cognito shapes, records and API JSON."""

    @staticmethod
    def attributes_to_map(attributes: Optional[List[Dict[str, str]]]) -> Dict[str, str]:
        """Flatten Cognito [{"Name", "Value"}] pairs into a dict."""
        return {attr["Name"]: attr.get("Value", "") for attr in attributes or [] if "Name" in attr}

    @staticmethod
    def user_from_cognito(cognito_user: Dict[str, Any], groups: Optional[List[str]] = None) -> UserRecord:
        """Convert a Cognito UserType (or AdminGetUser response) to a UserRecord.

        ListUsers returns attributes under "Attributes" while AdminGetUser
        uses "UserAttributes"; both are accepted.

        Example:
            >>> user = CognitoTransformer.user_from_cognito({
            ...     "Username": "alice",
            ...     "Enabled": True,
            ...     "UserStatus": "CONFIRMED",
            ...     "Attributes": [{"Name": "email", "Value": "alice@example.com"}],
            ... })
            >>> user.email
            'alice@example.com'
        """
        raw_attributes = cognito_user.get("Attributes")
        if raw_attributes is None:
            raw_attributes = cognito_user.get("UserAttributes")
        attributes = CognitoTransformer.attributes_to_map(raw_attributes)
        username = cognito_user.get("Username", "")

        return UserRecord(
            username=username,
            user_id=username,
            email=attributes.get("email"),
            phone_number=attributes.get("phone_number"),
            enabled=cognito_user.get("Enabled"),
            email_verified=_parse_bool(attributes.get("email_verified")),
            phone_number_verified=_parse_bool(attributes.get("phone_number_verified")),
            user_status=cognito_user.get("UserStatus"),
            user_create_date=cognito_user.get("UserCreateDate"),
            user_last_modified_date=cognito_user.get("UserLastModifiedDate"),
            groups=groups,
            attributes=attributes,
        )

    @staticmethod
    def group_from_cognito(cognito_group: Dict[str, Any], users: Optional[List[str]] = None) -> GroupRecord:
        """Convert a Cognito GroupType to a GroupRecord."""
        return GroupRecord(
            group_name=cognito_group.get("GroupName", ""),
            description=cognito_group.get("Description"),
            precedence=cognito_group.get("Precedence"),
            creation_date=cognito_group.get("CreationDate"),
            last_modified_date=cognito_group.get("LastModifiedDate"),
            users=users,
        )

    @staticmethod
    def user_request_to_attributes(user_request: UserRequest, creating: bool = False) -> List[Dict[str, str]]:
        """Build the Cognito attribute list for a create or update call.

        On create, email_verified is always sent (default false), and
        phone_number_verified is sent with the phone number. On update,
        only supplied values are sent.
        """
        attributes: List[Dict[str, str]] = []

        if user_request.email is not None:
            attributes.append(_attribute("email", user_request.email))
        if creating:
            attributes.append(_attribute("email_verified", bool(user_request.email_verified)))
        elif user_request.email_verified is not None:
            attributes.append(_attribute("email_verified", user_request.email_verified))

        if user_request.phone_number is not None:
            attributes.append(_attribute("phone_number", user_request.phone_number))
            if creating:
                attributes.append(_attribute("phone_number_verified", bool(user_request.phone_number_verified)))
        if not creating and user_request.phone_number_verified is not None:
            attributes.append(_attribute("phone_number_verified", user_request.phone_number_verified))

        for name, value in (user_request.attributes or {}).items():
            attributes.append(_attribute(name, value))

        return attributes

    @staticmethod
    def group_request_to_params(group_request: GroupRequest) -> Dict[str, Any]:
        """Optional CreateGroup/UpdateGroup parameters present in the request."""
        params: Dict[str, Any] = {}
        if group_request.description is not None:
            params["Description"] = group_request.description
        if group_request.precedence is not None:
            params["Precedence"] = group_request.precedence
        return params

    @staticmethod
    def user_to_dict(user: UserRecord) -> Dict[str, Any]:
        """Render a UserRecord as the API JSON body (null fields omitted)."""
        return _drop_none({
            "username": user.username,
            "userId": user.user_id,
            "email": user.email,
            "phoneNumber": user.phone_number,
            "enabled": user.enabled,
            "emailVerified": user.email_verified,
            "phoneNumberVerified": user.phone_number_verified,
            "userStatus": user.user_status,
            "userCreateDate": _format_timestamp(user.user_create_date),
            "userLastModifiedDate": _format_timestamp(user.user_last_modified_date),
            "groups": user.groups,
            "attributes": user.attributes,
        })

    @staticmethod
    def group_to_dict(group: GroupRecord) -> Dict[str, Any]:
        """Render a GroupRecord as the API JSON body (null fields omitted)."""
        return _drop_none({
            "groupName": group.group_name,
            "description": group.description,
            "creationDate": _format_timestamp(group.creation_date),
            "lastModifiedDate": _format_timestamp(group.last_modified_date),
            "precedence": group.precedence,
            "users": group.users,
        })
