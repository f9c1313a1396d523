"""
Unit tests for cognito_admin.core.cognito.users.UserService

The boto3 cognito-idp client is a MagicMock; assertions check the
parameters sent to Cognito and the records returned.
"""
import pytest
from botocore.exceptions import ClientError

from conftest import POOL_ID, cognito_user, make_config
from cognito_admin.core.cognito import CognitoClient, UserService
from cognito_admin.core.errors import CognitoError, InvalidSortFieldError, ResourceNotFoundError
from cognito_admin.core.listing import PageRequest, SortSpec
from cognito_admin.core.models import UserRequest


def _client_error(code, message="boom", operation="AdminGetUser"):
    return ClientError({"Error": {"Code": code, "Message": message}}, operation)


# ============================================================================
# Listing
# ============================================================================

def test_list_users_over_fetches_and_paginates(user_service, boto_client):
    boto_client.list_users.return_value = {
        "Users": [cognito_user(f"user{i:02d}", f"user{i:02d}@example.com") for i in range(25)]
    }

    result = user_service.list_users(None, None, PageRequest(page=1, size=20))

    boto_client.list_users.assert_called_once_with(UserPoolId=POOL_ID, Limit=60)
    assert [u.username for u in result.content] == [f"user{i:02d}" for i in range(20, 25)]
    assert result.total_elements == 25
    assert result.is_last is True


def test_list_users_limit_scales_with_page_size(user_service, boto_client):
    boto_client.list_users.return_value = {"Users": []}

    user_service.list_users(None, None, PageRequest(page=0, size=5))

    boto_client.list_users.assert_called_once_with(UserPoolId=POOL_ID, Limit=15)


def test_list_users_invalid_sort_does_not_call_cognito(user_service, boto_client):
    with pytest.raises(InvalidSortFieldError) as exc:
        user_service.list_users(SortSpec("password"), None, PageRequest())

    boto_client.list_users.assert_not_called()
    assert exc.value.valid_fields == ["createDate", "email", "enabled", "status", "username"]


def test_list_users_filters_username_or_email(user_service, boto_client):
    boto_client.list_users.return_value = {"Users": [
        cognito_user("alice", "alice@acme.com"),
        cognito_user("bob", "bob@example.com"),
        cognito_user("acme-bot", None),
    ]}

    result = user_service.list_users(None, "ACME", PageRequest())

    assert [u.username for u in result.content] == ["acme-bot", "alice"]


def test_list_users_sorts_by_email_desc_with_missing_email_last(user_service, boto_client):
    boto_client.list_users.return_value = {"Users": [
        cognito_user("a", "a@example.com"),
        cognito_user("nomail", None),
        cognito_user("z", "z@example.com"),
    ]}

    result = user_service.list_users(SortSpec("email", "desc"), None, PageRequest())

    assert [u.username for u in result.content] == ["z", "a", "nomail"]
    assert (result.sort_by, result.sort_direction) == ("email", "desc")


def test_list_users_wraps_cognito_failure(user_service, boto_client):
    boto_client.list_users.side_effect = _client_error("TooManyRequestsException", "Rate exceeded", "ListUsers")

    with pytest.raises(CognitoError) as exc:
        user_service.list_users()

    assert exc.value.to_dict()["cause"] == "Rate exceeded"


def test_list_users_uses_configured_limits(cognito, boto_client):
    service = UserService(cognito, make_config(upstream_fetch_cap=10, over_fetch_factor=2))
    boto_client.list_users.return_value = {"Users": []}

    service.list_users(None, None, PageRequest(size=20))

    boto_client.list_users.assert_called_once_with(UserPoolId=POOL_ID, Limit=10)


# ============================================================================
# CRUD
# ============================================================================

def test_get_user_includes_groups(user_service, boto_client):
    boto_client.admin_get_user.return_value = {
        "Username": "alice",
        "UserAttributes": [{"Name": "email", "Value": "alice@example.com"}],
        "Enabled": True,
        "UserStatus": "CONFIRMED",
    }
    boto_client.admin_list_groups_for_user.return_value = {"Groups": [{"GroupName": "admins"}]}

    user = user_service.get_user("alice")

    assert user.email == "alice@example.com"
    assert user.groups == ["admins"]
    boto_client.admin_get_user.assert_called_once_with(UserPoolId=POOL_ID, Username="alice")


def test_get_user_not_found(user_service, boto_client):
    boto_client.admin_get_user.side_effect = _client_error("UserNotFoundException", "User does not exist.")

    with pytest.raises(ResourceNotFoundError) as exc:
        user_service.get_user("ghost")

    assert exc.value.detail == "User 'ghost' not found"
    assert exc.value.status == 404


def test_create_user_suppresses_invitation(user_service, boto_client):
    boto_client.admin_create_user.return_value = {"User": cognito_user("alice", "alice@example.com")}

    user = user_service.create_user(UserRequest(username="alice", email="alice@example.com", password="Password123!"))

    kwargs = boto_client.admin_create_user.call_args.kwargs
    assert kwargs["UserPoolId"] == POOL_ID
    assert kwargs["Username"] == "alice"
    assert kwargs["MessageAction"] == "SUPPRESS"
    assert kwargs["TemporaryPassword"] == "Password123!"
    assert {"Name": "email_verified", "Value": "false"} in kwargs["UserAttributes"]
    assert user.username == "alice"
    assert user.groups == []


def test_create_user_without_password_omits_temporary_password(user_service, boto_client):
    boto_client.admin_create_user.return_value = {"User": cognito_user("alice", "alice@example.com")}

    user_service.create_user(UserRequest(username="alice", email="alice@example.com"))

    assert "TemporaryPassword" not in boto_client.admin_create_user.call_args.kwargs


def test_create_user_already_exists(user_service, boto_client):
    boto_client.admin_create_user.side_effect = _client_error(
        "UsernameExistsException", "User account already exists", "AdminCreateUser"
    )

    with pytest.raises(CognitoError) as exc:
        user_service.create_user(UserRequest(username="alice", email="alice@example.com"))

    assert "already exists" in exc.value.detail


def test_create_user_invalid_parameter(user_service, boto_client):
    boto_client.admin_create_user.side_effect = _client_error(
        "InvalidParameterException", "Invalid phone number format.", "AdminCreateUser"
    )

    with pytest.raises(CognitoError) as exc:
        user_service.create_user(UserRequest(username="alice", email="alice@example.com"))

    assert exc.value.detail == "Invalid parameter: Invalid phone number format."


def test_update_user_sends_only_supplied_attributes(user_service, boto_client):
    boto_client.admin_get_user.return_value = {"Username": "alice", "UserAttributes": []}
    boto_client.admin_list_groups_for_user.return_value = {"Groups": []}

    user_service.update_user("alice", UserRequest(email="new@example.com"))

    boto_client.admin_update_user_attributes.assert_called_once_with(
        UserPoolId=POOL_ID,
        Username="alice",
        UserAttributes=[{"Name": "email", "Value": "new@example.com"}],
    )


def test_update_user_without_changes_skips_update(user_service, boto_client):
    boto_client.admin_get_user.return_value = {"Username": "alice", "UserAttributes": []}
    boto_client.admin_list_groups_for_user.return_value = {"Groups": []}

    user_service.update_user("alice", UserRequest())

    boto_client.admin_update_user_attributes.assert_not_called()
    boto_client.admin_get_user.assert_called_once()


def test_delete_user(user_service, boto_client):
    user_service.delete_user("alice")
    boto_client.admin_delete_user.assert_called_once_with(UserPoolId=POOL_ID, Username="alice")


@pytest.mark.parametrize("method,operation", [
    ("enable_user", "admin_enable_user"),
    ("disable_user", "admin_disable_user"),
    ("reset_password", "admin_reset_user_password"),
])
def test_account_state_operations_return_refreshed_user(user_service, boto_client, method, operation):
    boto_client.admin_get_user.return_value = {"Username": "alice", "UserAttributes": [], "Enabled": True}
    boto_client.admin_list_groups_for_user.return_value = {"Groups": []}

    user = getattr(user_service, method)("alice")

    getattr(boto_client, operation).assert_called_once_with(UserPoolId=POOL_ID, Username="alice")
    assert user.username == "alice"


# ============================================================================
# Membership
# ============================================================================

def test_list_user_groups(user_service, boto_client):
    boto_client.admin_list_groups_for_user.return_value = {
        "Groups": [{"GroupName": "admins"}, {"GroupName": "editors"}]
    }

    assert user_service.list_user_groups("alice") == ["admins", "editors"]


def test_list_user_groups_follows_next_token(user_service, boto_client):
    boto_client.admin_list_groups_for_user.side_effect = [
        {"Groups": [{"GroupName": "admins"}], "NextToken": "t1"},
        {"Groups": [{"GroupName": "editors"}]},
    ]

    assert user_service.list_user_groups("alice") == ["admins", "editors"]
    first_call, second_call = boto_client.admin_list_groups_for_user.call_args_list
    assert first_call.kwargs == {"UserPoolId": POOL_ID, "Username": "alice", "Limit": 60}
    assert second_call.kwargs["NextToken"] == "t1"


def test_add_user_to_group(user_service, boto_client):
    boto_client.admin_get_user.return_value = {"Username": "alice", "UserAttributes": []}
    boto_client.admin_list_groups_for_user.return_value = {"Groups": [{"GroupName": "admins"}]}

    user = user_service.add_user_to_group("alice", "admins")

    boto_client.admin_add_user_to_group.assert_called_once_with(
        UserPoolId=POOL_ID, Username="alice", GroupName="admins"
    )
    assert user.groups == ["admins"]


def test_remove_user_from_unknown_group(user_service, boto_client):
    boto_client.admin_remove_user_from_group.side_effect = _client_error(
        "ResourceNotFoundException", "Group not found.", "AdminRemoveUserFromGroup"
    )

    with pytest.raises(ResourceNotFoundError):
        user_service.remove_user_from_group("alice", "ghosts")


def test_cognito_client_injects_pool_id(boto_client):
    client = CognitoClient(boto_client, "pool-x")
    client.call("list_groups", "list groups", Limit=1)
    boto_client.list_groups.assert_called_once_with(UserPoolId="pool-x", Limit=1)
