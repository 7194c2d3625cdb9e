"""REST endpoints for the directories available to the current user.

Each collection (users, userGroups, connections) is backed by a
DirectoryResource built per request from the caller's session. All business
logic lives in ``directory_api.core``; this module only maps HTTP onto it.

Security:
    - Every endpoint requires ``Authorization: Bearer <token>`` (see api.auth)
"""

from __future__ import annotations
from typing import Any, List

from flask import Blueprint, current_app, g, jsonify, request

from directory_api.api.auth import authenticate_request
from directory_api.core.directory_resource import (
    ConnectionDirectoryResource,
    DirectoryResource,
    UserDirectoryResource,
    UserGroupDirectoryResource,
)
from directory_api.core.exceptions import ClientError, NotFoundError
from directory_api.core.model import DirectoryType
from directory_api.core.object_resource import DirectoryObjectResourceFactory
from directory_api.core.patch import parse_patches
from directory_api.core.permissions import ObjectPermissionType
from directory_api.core.translators import ConnectionTranslator, UserGroupTranslator, UserTranslator

bp = Blueprint("directories", __name__)

COLLECTIONS = {
    "users": (UserDirectoryResource, UserTranslator),
    "userGroups": (UserGroupDirectoryResource, UserGroupTranslator),
    "connections": (ConnectionDirectoryResource, ConnectionTranslator),
}


# ─────────────────────────────────────────────────────────────────────────────
# Request Hooks
# ─────────────────────────────────────────────────────────────────────────────

@bp.before_request
def require_session():
    """Reject requests without a valid session."""
    authenticate_request()


@bp.after_request
def add_correlation_id(response):
    """Echo the correlation ID for tracing."""
    correlation_id = request.headers.get("X-Correlation-Id")
    if correlation_id:
        response.headers["X-Correlation-Id"] = correlation_id
    return response


# ─────────────────────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────────────────────

def _directory_resource(collection: str) -> DirectoryResource:
    """Build the DirectoryResource for the given collection and current session."""
    try:
        resource_class, translator_class = COLLECTIONS[collection]
    except KeyError:
        raise NotFoundError(f"Not found: \"{collection}\"") from None

    session = g.session
    try:
        directory = session.user_context.get_directory(DirectoryType.of(resource_class.object_type))
    except LookupError:
        raise NotFoundError(f"Not found: \"{collection}\"") from None

    listener_service = current_app.config["LISTENER_SERVICE"]
    translator = translator_class()
    return resource_class(
        session.authenticated_user,
        session.user_context,
        directory,
        translator,
        DirectoryObjectResourceFactory(translator, listener_service),
        listener_service,
    )


def _json_body() -> Any:
    """Return the parsed JSON body, or None if the request has no body."""
    if not request.get_data(cache=True):
        return None
    # Invalid JSON raises BadRequest (400)
    return request.get_json(force=True)


def _requested_permissions() -> List[ObjectPermissionType]:
    values = request.args.getlist("permission")
    try:
        return [ObjectPermissionType(value) for value in values]
    except ValueError:
        allowed = ", ".join(t.value for t in ObjectPermissionType)
        raise ClientError(f"Invalid permission filter. Allowed values: {allowed}.") from None


# ─────────────────────────────────────────────────────────────────────────────
# Collection Operations
# ─────────────────────────────────────────────────────────────────────────────

@bp.route("/<collection>", methods=["GET"])
def get_objects(collection: str):
    """List visible objects, optionally filtered by ``permission`` query values.

    Returns:
        200 OK with a map of identifier to object
    """
    resource = _directory_resource(collection)
    return jsonify(resource.get_objects(_requested_permissions())), 200


@bp.route("/<collection>", methods=["PATCH"])
def patch_objects(collection: str):
    """Remove objects via JSON Patch ``remove`` operations.

    Returns:
        204 No Content
    """
    resource = _directory_resource(collection)
    resource.patch_objects(parse_patches(_json_body()))
    return "", 204


@bp.route("/<collection>", methods=["POST"])
def create_object(collection: str):
    """Create an object.

    Returns:
        200 OK with the created object, identifier populated
    """
    resource = _directory_resource(collection)
    created = resource.create_object(_json_body())
    return jsonify(created), 200


# ─────────────────────────────────────────────────────────────────────────────
# Single Object Operations
# ─────────────────────────────────────────────────────────────────────────────

@bp.route("/<collection>/<identifier>", methods=["GET"])
def get_object(collection: str, identifier: str):
    resource = _directory_resource(collection).get_object_resource(identifier)
    return jsonify(resource.get_object()), 200


@bp.route("/<collection>/<identifier>", methods=["PUT"])
def update_object(collection: str, identifier: str):
    """Update an object.

    Returns:
        204 No Content
    """
    resource = _directory_resource(collection).get_object_resource(identifier)
    resource.update_object(_json_body())
    return "", 204


@bp.route("/<collection>/<identifier>", methods=["DELETE"])
def delete_object(collection: str, identifier: str):
    """Delete an object.

    Returns:
        204 No Content
    """
    resource = _directory_resource(collection).get_object_resource(identifier)
    resource.delete_object()
    return "", 204
