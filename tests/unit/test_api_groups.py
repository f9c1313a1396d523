"""Tests for /api/groups endpoints with a mocked GroupService."""
from cognito_admin.core.errors import InvalidSortFieldError, ResourceNotFoundError
from cognito_admin.core.listing import PageRequest, PageResult, SortSpec
from cognito_admin.core.models import GroupRecord


def test_create_group(client, groups_mock):
    groups_mock.create_group.return_value = GroupRecord(group_name="admins", description="Admins", precedence=1)

    response = client.post("/api/groups", json={"groupName": "admins", "description": "Admins", "precedence": 1})

    assert response.status_code == 201
    assert response.headers["Location"].endswith("/api/groups/admins")
    assert response.get_json() == {"groupName": "admins", "description": "Admins", "precedence": 1}


def test_create_group_negative_precedence(client, groups_mock):
    response = client.post("/api/groups", json={"groupName": "admins", "precedence": -5})

    assert response.status_code == 400
    assert "precedence" in response.get_json()["errors"]
    groups_mock.create_group.assert_not_called()


def test_list_groups(client, groups_mock):
    groups_mock.list_groups.return_value = PageResult(
        content=[GroupRecord(group_name="TestGroup")],
        page=0, size=20, total_elements=1, total_pages=1, is_last=True,
        sort_by="groupName", sort_direction="asc", filter="test",
    )

    response = client.get("/api/groups?filter=test&sortBy=groupName")

    assert response.status_code == 200
    groups_mock.list_groups.assert_called_once_with(SortSpec("groupName", "asc"), "test", PageRequest())
    body = response.get_json()
    assert body["content"] == [{"groupName": "TestGroup"}]
    assert body["sortBy"] == "groupName"
    assert body["totalPages"] == 1


def test_list_groups_invalid_sort(client, groups_mock):
    groups_mock.list_groups.side_effect = InvalidSortFieldError("members", ["groupName", "precedence"])

    response = client.get("/api/groups?sortBy=members")

    assert response.status_code == 400
    assert response.get_json()["detail"] == "Invalid sort field: members. Valid values: groupName, precedence"


def test_get_group_not_found(client, groups_mock):
    groups_mock.get_group.side_effect = ResourceNotFoundError("Group 'ghosts' not found")

    response = client.get("/api/groups/ghosts")

    assert response.status_code == 404
    assert response.mimetype == "application/problem+json"


def test_update_group(client, groups_mock):
    groups_mock.update_group.return_value = GroupRecord(group_name="admins", precedence=3)

    response = client.put("/api/groups/admins", json={"precedence": 3})

    assert response.status_code == 200
    group_name, group_request = groups_mock.update_group.call_args.args
    assert group_name == "admins"
    assert group_request.precedence == 3


def test_delete_group(client, groups_mock):
    response = client.delete("/api/groups/admins")

    assert response.status_code == 204
    groups_mock.delete_group.assert_called_once_with("admins")


def test_group_members(client, groups_mock):
    groups_mock.list_group_users.return_value = ["alice", "bob"]
    groups_mock.add_user_to_group.return_value = GroupRecord(group_name="admins", users=["alice", "carol"])
    groups_mock.remove_user_from_group.return_value = GroupRecord(group_name="admins", users=["alice"])

    assert client.get("/api/groups/admins/users").get_json() == ["alice", "bob"]
    assert client.post("/api/groups/admins/users/carol").get_json()["users"] == ["alice", "carol"]
    assert client.delete("/api/groups/admins/users/carol").get_json()["users"] == ["alice"]
    groups_mock.remove_user_from_group.assert_called_once_with("admins", "carol")
