"""Low-level client for the Cognito user pool admin API.

Wraps a boto3 `cognito-idp` client bound to one user pool and translates
botocore failures into API errors.
"""
from __future__ import annotations
import logging
from typing import Any, Dict, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from ..errors import CognitoError, ResourceNotFoundError

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 5
# Cognito's page-size ceiling for ListUsers, ListGroups and ListUsersInGroup
MAX_LIST_LIMIT = 60

NOT_FOUND_CODES = frozenset({"UserNotFoundException", "ResourceNotFoundException"})
ALREADY_EXISTS_CODES = frozenset({"UsernameExistsException", "GroupExistsException", "AliasExistsException"})


def create_boto3_client(config) -> Any:
    """Build a boto3 cognito-idp client from AppConfig.

    Static credentials and a custom endpoint are only passed when configured;
    otherwise boto3 uses its default credential chain and AWS endpoint.
    """
    extra: Dict[str, Any] = {}
    if config.cognito_endpoint_url:
        extra["endpoint_url"] = config.cognito_endpoint_url
    if config.aws_access_key_id and config.aws_secret_access_key:
        extra["aws_access_key_id"] = config.aws_access_key_id
        extra["aws_secret_access_key"] = config.aws_secret_access_key

    return boto3.client(
        "cognito-idp",
        region_name=config.aws_region,
        config=Config(
            connect_timeout=REQUEST_TIMEOUT,
            read_timeout=REQUEST_TIMEOUT,
            retries={"max_attempts": 3, "mode": "standard"},
        ),
        **extra,
    )


def translate_client_error(exc: Exception, action: str, resource: Optional[str] = None) -> Exception:
    """Map a botocore exception to ResourceNotFoundError or CognitoError.

    Args:
        exc: ClientError or BotoCoreError raised by boto3
        action: Human readable operation, e.g. "create user"
        resource: Description of the target, e.g. "User 'alice'"

    Returns:
        The API error to raise
    """
    if isinstance(exc, ClientError):
        error = exc.response.get("Error", {})
        code = error.get("Code", "")
        message = error.get("Message", str(exc))

        if code in NOT_FOUND_CODES:
            return ResourceNotFoundError(f"{resource or 'Resource'} not found")
        if code in ALREADY_EXISTS_CODES:
            return CognitoError(f"{resource or 'Resource'} already exists", exc)
        if code == "InvalidParameterException":
            return CognitoError(f"Invalid parameter: {message}", exc)
        return CognitoError(f"Failed to {action}: {message}", exc)

    return CognitoError(f"Failed to {action}: {exc}", exc)


class CognitoClient:
    """Cognito admin client bound to a single user pool.

    Usage:
        client = CognitoClient(create_boto3_client(cfg), cfg.cognito_user_pool_id)
        resp = client.call("list_groups", "list groups", Limit=60)
    """

    def __init__(self, boto_client: Any, user_pool_id: str):
        """Initialize Cognito client.

        Args:
            boto_client: boto3 cognito-idp client (or a botocore Stubber-wrapped one)
            user_pool_id: Target user pool
        """
        self.boto_client = boto_client
        self.user_pool_id = user_pool_id

    def call(self, operation: str, action: str, resource: Optional[str] = None, **params: Any) -> Dict[str, Any]:
        """Invoke a cognito-idp operation on the bound user pool.

        Args:
            operation: boto3 method name, e.g. "admin_get_user"
            action: Description used in error messages
            resource: Target description used in not-found/exists messages
            **params: Operation parameters (UserPoolId is added)

        Returns:
            Operation response dict

        Raises:
            ResourceNotFoundError: Cognito reported the user/group missing
            CognitoError: Any other Cognito or transport failure
        """
        method = getattr(self.boto_client, operation)
        try:
            return method(UserPoolId=self.user_pool_id, **params)
        except (ClientError, BotoCoreError) as exc:
            logger.warning("[cognito] %s failed: %s", operation, exc)
            raise translate_client_error(exc, action, resource) from exc
