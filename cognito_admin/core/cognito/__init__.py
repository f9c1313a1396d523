"""Cognito user pool admin client library.

Architecture:
- client.py: boto3 cognito-idp client factory, pool-bound wrapper, error translation
- users.py: User lifecycle, membership and paged listing
- groups.py: Group lifecycle, membership and paged listing

Usage:
    from cognito_admin.core.cognito import CognitoClient, UserService, create_boto3_client

    client = CognitoClient(create_boto3_client(cfg), cfg.cognito_user_pool_id)
    users = UserService(client, cfg)
    page = users.list_users(SortSpec("email", "desc"), "alice", PageRequest(0, 20))
"""
from .client import (
    CognitoClient,
    create_boto3_client,
    translate_client_error,
    MAX_LIST_LIMIT,
    REQUEST_TIMEOUT,
)
from .groups import GROUP_SCHEMA, GroupService
from .users import USER_SCHEMA, UserService

__all__ = [
    "CognitoClient",
    "create_boto3_client",
    "translate_client_error",
    "MAX_LIST_LIMIT",
    "REQUEST_TIMEOUT",
    "GROUP_SCHEMA",
    "GroupService",
    "USER_SCHEMA",
    "UserService",
]
