"""Cognito user management operations."""
from __future__ import annotations
import logging
from typing import List, Optional

from ...config import AppConfig
from ..cognito_transformer import CognitoTransformer
from ..listing import ListingSchema, PagedListingEngine, PageRequest, PageResult, SortSpec
from ..models import UserRecord, UserRequest
from .client import MAX_LIST_LIMIT, CognitoClient

logger = logging.getLogger(__name__)

USER_SCHEMA: ListingSchema[UserRecord] = ListingSchema(
    name="user",
    sort_keys={
        "username": lambda user: user.username,
        "email": lambda user: user.email,
        "status": lambda user: user.user_status,
        "enabled": lambda user: user.enabled,
        "createDate": lambda user: user.user_create_date,
    },
    filter_fields=(
        lambda user: user.username,
        lambda user: user.email,
    ),
    default_sort="username",
)


class UserService:
    """Service for managing users of one Cognito user pool."""

    def __init__(self, client: CognitoClient, config: Optional[AppConfig] = None):
        """Initialize user service.

        Args:
            client: Cognito client bound to the user pool
            config: Listing limits (defaults apply when omitted)
        """
        self.client = client
        self.config = config or AppConfig(demo_mode=False)
        self.listing = PagedListingEngine(USER_SCHEMA)

    def list_users(
        self,
        sort: Optional[SortSpec] = None,
        text_filter: Optional[str] = None,
        page: Optional[PageRequest] = None,
    ) -> PageResult[UserRecord]:
        """List users with in-memory filtering, sorting and pagination.

        The sort field is validated before Cognito is called. One ListUsers
        call fetches up to `config.upstream_limit(size)` users; filtering and
        paging only see that snapshot.

        Raises:
            InvalidSortFieldError: Unknown sort field
            CognitoError: ListUsers failed
        """
        page = page or PageRequest(size=self.config.default_page_size)
        effective_sort = self.listing.validate_sort(sort)

        resp = self.client.call(
            "list_users",
            "list users",
            Limit=self.config.upstream_limit(page.size),
        )
        users = [CognitoTransformer.user_from_cognito(u) for u in resp.get("Users", [])]
        logger.debug("[users] Fetched %d users for listing", len(users))

        return self.listing.list(users, effective_sort, text_filter, page)

    def get_user(self, username: str) -> UserRecord:
        """Fetch one user together with its group names.

        Raises:
            ResourceNotFoundError: User does not exist
        """
        resp = self.client.call(
            "admin_get_user",
            "get user",
            f"User '{username}'",
            Username=username,
        )
        return CognitoTransformer.user_from_cognito(resp, groups=self.list_user_groups(username))

    def create_user(self, user_request: UserRequest) -> UserRecord:
        """Create a user without sending the Cognito invitation message.

        The optional password is set as the temporary password.

        Raises:
            CognitoError: Username already exists or Cognito rejected the input
        """
        params = {
            "Username": user_request.username,
            "UserAttributes": CognitoTransformer.user_request_to_attributes(user_request, creating=True),
            "MessageAction": "SUPPRESS",
        }
        if user_request.password:
            params["TemporaryPassword"] = user_request.password

        resp = self.client.call(
            "admin_create_user",
            "create user",
            f"User '{user_request.username}'",
            **params,
        )
        logger.info("[users] Created user %s", user_request.username)
        return CognitoTransformer.user_from_cognito(resp.get("User", {}), groups=[])

    def update_user(self, username: str, user_request: UserRequest) -> UserRecord:
        """Update the supplied attributes and return the refreshed user.

        No upstream update is made when the request carries no attributes.
        """
        attributes = CognitoTransformer.user_request_to_attributes(user_request, creating=False)
        if attributes:
            self.client.call(
                "admin_update_user_attributes",
                "update user",
                f"User '{username}'",
                Username=username,
                UserAttributes=attributes,
            )
            logger.info("[users] Updated %d attribute(s) of %s", len(attributes), username)
        return self.get_user(username)

    def delete_user(self, username: str) -> None:
        self.client.call("admin_delete_user", "delete user", f"User '{username}'", Username=username)
        logger.info("[users] Deleted user %s", username)

    def enable_user(self, username: str) -> UserRecord:
        self.client.call("admin_enable_user", "enable user", f"User '{username}'", Username=username)
        logger.info("[users] Enabled user %s", username)
        return self.get_user(username)

    def disable_user(self, username: str) -> UserRecord:
        self.client.call("admin_disable_user", "disable user", f"User '{username}'", Username=username)
        logger.info("[users] Disabled user %s", username)
        return self.get_user(username)

    def reset_password(self, username: str) -> UserRecord:
        """Force a password reset; Cognito notifies the user out of band."""
        self.client.call(
            "admin_reset_user_password",
            "reset password",
            f"User '{username}'",
            Username=username,
        )
        logger.info("[users] Reset password of %s", username)
        return self.get_user(username)

    def list_user_groups(self, username: str) -> List[str]:
        """Names of the groups the user belongs to, following Cognito pagination tokens."""
        group_names: List[str] = []
        params = {"Username": username, "Limit": MAX_LIST_LIMIT}
        while True:
            resp = self.client.call("admin_list_groups_for_user", "list user groups", f"User '{username}'", **params)
            group_names.extend(g["GroupName"] for g in resp.get("Groups", []) if g.get("GroupName"))
            next_token = resp.get("NextToken")
            if not next_token:
                return group_names
            params["NextToken"] = next_token

    def add_user_to_group(self, username: str, group_name: str) -> UserRecord:
        self.client.call(
            "admin_add_user_to_group",
            "add user to group",
            f"User '{username}' or group '{group_name}'",
            Username=username,
            GroupName=group_name,
        )
        logger.info("[users] Added %s to group %s", username, group_name)
        return self.get_user(username)

    def remove_user_from_group(self, username: str, group_name: str) -> UserRecord:
        self.client.call(
            "admin_remove_user_from_group",
            "remove user from group",
            f"User '{username}' or group '{group_name}'",
            Username=username,
            GroupName=group_name,
        )
        logger.info("[users] Removed %s from group %s", username, group_name)
        return self.get_user(username)
