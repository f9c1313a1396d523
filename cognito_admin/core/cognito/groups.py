"""Cognito group management operations."""
from __future__ import annotations
import logging
from typing import List, Optional

from ...config import AppConfig
from ..cognito_transformer import CognitoTransformer
from ..listing import ListingSchema, PagedListingEngine, PageRequest, PageResult, SortSpec
from ..models import GroupRecord, GroupRequest
from .client import MAX_LIST_LIMIT, CognitoClient

logger = logging.getLogger(__name__)

GROUP_SCHEMA: ListingSchema[GroupRecord] = ListingSchema(
    name="group",
    sort_keys={
        "groupName": lambda group: group.group_name,
        "description": lambda group: group.description,
        "precedence": lambda group: group.precedence,
        "creationDate": lambda group: group.creation_date,
    },
    filter_fields=(
        lambda group: group.group_name,
        lambda group: group.description,
    ),
    default_sort="groupName",
)


class GroupService:
    """Service for managing groups of one Cognito user pool."""

    def __init__(self, client: CognitoClient, config: Optional[AppConfig] = None):
        """Initialize group service.

        Args:
            client: Cognito client bound to the user pool
            config: Listing limits (defaults apply when omitted)
        """
        self.client = client
        self.config = config or AppConfig(demo_mode=False)
        self.listing = PagedListingEngine(GROUP_SCHEMA)

    def list_groups(
        self,
        sort: Optional[SortSpec] = None,
        text_filter: Optional[str] = None,
        page: Optional[PageRequest] = None,
    ) -> PageResult[GroupRecord]:
        """List groups with in-memory filtering, sorting and pagination.

        Same contract as UserService.list_users: sort validated first, then
        a single ListGroups call bounded by `config.upstream_limit(size)`.
        """
        page = page or PageRequest(size=self.config.default_page_size)
        effective_sort = self.listing.validate_sort(sort)

        resp = self.client.call(
            "list_groups",
            "list groups",
            Limit=self.config.upstream_limit(page.size),
        )
        groups = [CognitoTransformer.group_from_cognito(g) for g in resp.get("Groups", [])]
        logger.debug("[groups] Fetched %d groups for listing", len(groups))

        return self.listing.list(groups, effective_sort, text_filter, page)

    def get_group(self, group_name: str) -> GroupRecord:
        """Fetch one group.

        Raises:
            ResourceNotFoundError: Group does not exist
        """
        resp = self.client.call("get_group", "get group", f"Group '{group_name}'", GroupName=group_name)
        return CognitoTransformer.group_from_cognito(resp.get("Group", {}))

    def create_group(self, group_request: GroupRequest) -> GroupRecord:
        """Create a group.

        Raises:
            CognitoError: Group already exists or Cognito rejected the input
        """
        resp = self.client.call(
            "create_group",
            "create group",
            f"Group '{group_request.group_name}'",
            GroupName=group_request.group_name,
            **CognitoTransformer.group_request_to_params(group_request),
        )
        logger.info("[groups] Created group %s", group_request.group_name)
        return CognitoTransformer.group_from_cognito(resp.get("Group", {}))

    def update_group(self, group_name: str, group_request: GroupRequest) -> GroupRecord:
        """Update description/precedence of an existing group."""
        self.get_group(group_name)
        self.client.call(
            "update_group",
            "update group",
            f"Group '{group_name}'",
            GroupName=group_name,
            **CognitoTransformer.group_request_to_params(group_request),
        )
        logger.info("[groups] Updated group %s", group_name)
        return self.get_group(group_name)

    def delete_group(self, group_name: str) -> None:
        self.get_group(group_name)
        self.client.call("delete_group", "delete group", f"Group '{group_name}'", GroupName=group_name)
        logger.info("[groups] Deleted group %s", group_name)

    def list_group_users(self, group_name: str) -> List[str]:
        """Usernames of all members, following Cognito pagination tokens."""
        self.get_group(group_name)
        usernames: List[str] = []
        params = {"GroupName": group_name, "Limit": MAX_LIST_LIMIT}
        while True:
            resp = self.client.call("list_users_in_group", "list group users", f"Group '{group_name}'", **params)
            usernames.extend(u["Username"] for u in resp.get("Users", []) if u.get("Username"))
            next_token = resp.get("NextToken")
            if not next_token:
                return usernames
            params["NextToken"] = next_token

    def add_user_to_group(self, group_name: str, username: str) -> GroupRecord:
        """Add a member and return the group with its member list."""
        self.get_group(group_name)
        self.client.call(
            "admin_add_user_to_group",
            "add user to group",
            f"User '{username}'",
            GroupName=group_name,
            Username=username,
        )
        logger.info("[groups] Added %s to group %s", username, group_name)
        return self._get_group_with_users(group_name)

    def remove_user_from_group(self, group_name: str, username: str) -> GroupRecord:
        """Remove a member and return the group with its member list."""
        self.get_group(group_name)
        self.client.call(
            "admin_remove_user_from_group",
            "remove user from group",
            f"User '{username}'",
            GroupName=group_name,
            Username=username,
        )
        logger.info("[groups] Removed %s from group %s", username, group_name)
        return self._get_group_with_users(group_name)

    def _get_group_with_users(self, group_name: str) -> GroupRecord:
        group = self.get_group(group_name)
        group.users = self.list_group_users(group_name)
        return group
