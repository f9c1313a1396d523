"""User administration endpoints (/api/users).

All business logic lives in cognito_admin.core.cognito.UserService; routes
parse and validate input, call the service and serialize records.

Security:
    - Bearer token validated by @require_bearer_token when API_AUTH_ENABLED=true
    - Errors are raised as ApiError and rendered by the app error handlers
"""

from __future__ import annotations
import logging

from flask import Blueprint, current_app, jsonify, request

from ..core.cognito import UserService
from ..core.cognito_transformer import CognitoTransformer
from ..core.listing import SortSpec
from ..core.validators import parse_page_request, validate_user_create, validate_user_update
from .decorators import get_acting_principal, require_bearer_token

logger = logging.getLogger(__name__)

bp = Blueprint("users", __name__, url_prefix="/api/users")


def _service() -> UserService:
    return current_app.extensions["user_service"]


def _user_response(user, status: int = 200):
    return jsonify(CognitoTransformer.user_to_dict(user)), status


# ─────────────────────────────────────────────────────────────────────────────
# Users
# ─────────────────────────────────────────────────────────────────────────────

@bp.route("", methods=["POST"])
@require_bearer_token
def create_user():
    """Create a user (201 Created with Location header)."""
    user_request = validate_user_create(request.get_json(silent=True))
    user = _service().create_user(user_request)
    logger.info("[api] %s created user %s", get_acting_principal(), user.username)

    response = jsonify(CognitoTransformer.user_to_dict(user))
    response.status_code = 201
    response.headers["Location"] = f"{request.host_url.rstrip('/')}/api/users/{user.username}"
    return response


@bp.route("", methods=["GET"])
@require_bearer_token
def list_users():
    """List users.

    Query parameters:
        page: Zero-based page number (default 0)
        size: Page size (default 20, clamped to the configured maximum)
        sortBy: username | email | status | enabled | createDate
        sortDirection: asc | desc
        filter: Case-insensitive substring of username or email
    """
    cfg = current_app.config["APP_CONFIG"]
    page = parse_page_request(request.args, cfg.default_page_size, cfg.max_page_size)
    sort = SortSpec.from_params(request.args.get("sortBy"), request.args.get("sortDirection"))
    text_filter = request.args.get("filter") or None

    result = _service().list_users(sort, text_filter, page)
    return jsonify(result.to_dict(serialize=CognitoTransformer.user_to_dict)), 200


@bp.route("/<username>", methods=["GET"])
@require_bearer_token
def get_user(username: str):
    return _user_response(_service().get_user(username))


@bp.route("/<username>", methods=["PUT"])
@require_bearer_token
def update_user(username: str):
    """Update the supplied attributes of a user."""
    user_request = validate_user_update(request.get_json(silent=True))
    return _user_response(_service().update_user(username, user_request))


@bp.route("/<username>", methods=["DELETE"])
@require_bearer_token
def delete_user(username: str):
    _service().delete_user(username)
    logger.info("[api] %s deleted user %s", get_acting_principal(), username)
    return "", 204


# ─────────────────────────────────────────────────────────────────────────────
# Account state
# ─────────────────────────────────────────────────────────────────────────────

@bp.route("/<username>/enable", methods=["POST"])
@require_bearer_token
def enable_user(username: str):
    return _user_response(_service().enable_user(username))


@bp.route("/<username>/disable", methods=["POST"])
@require_bearer_token
def disable_user(username: str):
    return _user_response(_service().disable_user(username))


@bp.route("/<username>/reset-password", methods=["POST"])
@require_bearer_token
def reset_password(username: str):
    return _user_response(_service().reset_password(username))


# ─────────────────────────────────────────────────────────────────────────────
# Group membership
# ─────────────────────────────────────────────────────────────────────────────

@bp.route("/<username>/groups", methods=["GET"])
@require_bearer_token
def list_user_groups(username: str):
    return jsonify(_service().list_user_groups(username)), 200


@bp.route("/<username>/groups/<group_name>", methods=["POST"])
@require_bearer_token
def add_user_to_group(username: str, group_name: str):
    return _user_response(_service().add_user_to_group(username, group_name))


@bp.route("/<username>/groups/<group_name>", methods=["DELETE"])
@require_bearer_token
def remove_user_from_group(username: str, group_name: str):
    return _user_response(_service().remove_user_from_group(username, group_name))
