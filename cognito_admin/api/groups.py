"""Group administration endpoints (/api/groups)."""

from __future__ import annotations
import logging

from flask import Blueprint, current_app, jsonify, request

from ..core.cognito import GroupService
from ..core.cognito_transformer import CognitoTransformer
from ..core.listing import SortSpec
from ..core.validators import parse_page_request, validate_group_create, validate_group_update
from .decorators import get_acting_principal, require_bearer_token

logger = logging.getLogger(__name__)

bp = Blueprint("groups", __name__, url_prefix="/api/groups")


def _service() -> GroupService:
    return current_app.extensions["group_service"]


def _group_response(group, status: int = 200):
    return jsonify(CognitoTransformer.group_to_dict(group)), status


# ─────────────────────────────────────────────────────────────────────────────
# Groups
# ─────────────────────────────────────────────────────────────────────────────

@bp.route("", methods=["POST"])
@require_bearer_token
def create_group():
    group_request = validate_group_create(request.get_json(silent=True))
    group = _service().create_group(group_request)
    logger.info("[api] %s created group %s", get_acting_principal(), group.group_name)

    response = jsonify(CognitoTransformer.group_to_dict(group))
    response.status_code = 201
    response.headers["Location"] = f"{request.host_url.rstrip('/')}/api/groups/{group.group_name}"
    return response


@bp.route("", methods=["GET"])
@require_bearer_token
def list_groups():
    """List groups.

    Query parameters:
        page, size: Zero-based page and page size
        sortBy: groupName | description | precedence | creationDate
        sortDirection: asc | desc
        filter: Case-insensitive substring of groupName or description
    """
    cfg = current_app.config["APP_CONFIG"]
    page = parse_page_request(request.args, cfg.default_page_size, cfg.max_page_size)
    sort = SortSpec.from_params(request.args.get("sortBy"), request.args.get("sortDirection"))
    text_filter = request.args.get("filter") or None

    result = _service().list_groups(sort, text_filter, page)
    return jsonify(result.to_dict(serialize=CognitoTransformer.group_to_dict)), 200


@bp.route("/<group_name>", methods=["GET"])
@require_bearer_token
def get_group(group_name: str):
    return _group_response(_service().get_group(group_name))


@bp.route("/<group_name>", methods=["PUT"])
@require_bearer_token
def update_group(group_name: str):
    group_request = validate_group_update(request.get_json(silent=True))
    return _group_response(_service().update_group(group_name, group_request))


@bp.route("/<group_name>", methods=["DELETE"])
@require_bearer_token
def delete_group(group_name: str):
    _service().delete_group(group_name)
    logger.info("[api] %s deleted group %s", get_acting_principal(), group_name)
    return "", 204


# ─────────────────────────────────────────────────────────────────────────────
# Members
# ─────────────────────────────────────────────────────────────────────────────

@bp.route("/<group_name>/users", methods=["GET"])
@require_bearer_token
def list_group_users(group_name: str):
    return jsonify(_service().list_group_users(group_name)), 200


@bp.route("/<group_name>/users/<username>", methods=["POST"])
@require_bearer_token
def add_user_to_group(group_name: str, username: str):
    """Add a member; the response lists the group's members."""
    return _group_response(_service().add_user_to_group(group_name, username))


@bp.route("/<group_name>/users/<username>", methods=["DELETE"])
@require_bearer_token
def remove_user_from_group(group_name: str, username: str):
    return _group_response(_service().remove_user_from_group(group_name, username))
