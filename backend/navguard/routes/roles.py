# Overview: Flask API routes for the role registry and role-permission assignment.

"""
Role management routes.

Provides endpoints for:
- Role CRUD (system roles and roles held by users are protected from deletion)
- Full replacement of a role's permission set
- Listing the users holding a role
"""

from flask import Blueprint, current_app, g, jsonify, request

from ..decorators import require_auth, require_permission
from ..errors import NavguardError
from ..permissions import PermissionSlug
from ..services import permission_service, role_service
from . import error_response

roles_bp = Blueprint("roles", __name__, url_prefix="/api/roles")


def _audit(event_type: str, role_id: int, action: str):
    permission_service.log_security_event(
        user_id=g.current_user.id,
        event_type=event_type,
        success=True,
        resource=request.path,
        action=action,
        ip_address=request.remote_addr,
        user_agent=request.headers.get("User-Agent"),
    )
    current_app.logger.info("%s role=%s by user=%s: %s", event_type, role_id, g.current_user.id, action)


@roles_bp.get("")
@require_auth
@require_permission(PermissionSlug.VIEW_ROLES)
def list_roles():
    """
    List roles with their permissions.

    Query params:
    - keyword: str - match name or description
    - page, per_page: int - pagination (omit page for everything)
    """
    result = role_service.list_roles(
        keyword=request.args.get("keyword"),
        page=request.args.get("page", type=int),
        per_page=request.args.get("per_page", type=int),
    )
    body = {"roles": result["items"], "count": result["count"]}
    if "pagination" in result:
        body["pagination"] = result["pagination"]
    return jsonify(body)


@roles_bp.get("/<int:role_id>")
@require_auth
@require_permission(PermissionSlug.VIEW_ROLES)
def get_role(role_id: int):
    try:
        role = role_service.get_role(role_id)
    except NavguardError as e:
        return error_response(e)
    return jsonify({"role": role.to_dict()})


@roles_bp.post("")
@require_auth
@require_permission(PermissionSlug.MANAGE_ROLES)
def create_role():
    """
    Create a new role.

    Request body:
    - name: str (required)
    - description: str (optional)
    - permissions: list[int] (optional) - initial permission ids
    """
    data = request.get_json(silent=True) or {}
    try:
        role = role_service.create_role(
            name=data.get("name"),
            description=data.get("description"),
            permission_ids=data.get("permissions"),
        )
    except NavguardError as e:
        return error_response(e)

    current_app.logger.info("Role %s created by user=%s", role.name, g.current_user.id)
    return jsonify({"role": role.to_dict(), "message": "Role created successfully"}), 201


@roles_bp.put("/<int:role_id>")
@require_auth
@require_permission(PermissionSlug.MANAGE_ROLES)
def update_role(role_id: int):
    data = request.get_json(silent=True) or {}
    fields = {key: data[key] for key in ("name", "description") if key in data}
    try:
        role = role_service.update_role(role_id, **fields)
    except NavguardError as e:
        return error_response(e)
    return jsonify({"role": role.to_dict(), "message": "Role updated successfully"})


@roles_bp.delete("/<int:role_id>")
@require_auth
@require_permission(PermissionSlug.MANAGE_ROLES)
def delete_role(role_id: int):
    try:
        role_service.delete_role(role_id)
    except NavguardError as e:
        return error_response(e)

    _audit("ROLE_DELETED", role_id, f"Deleted role {role_id}")
    return jsonify({"message": "Role deleted successfully"})


@roles_bp.post("/<int:role_id>/assign-permissions")
@require_auth
@require_permission(PermissionSlug.MANAGE_ROLES)
def assign_permissions(role_id: int):
    """
    Replace the role's permission set.

    Request body:
    - permissions: list[int] (required) - the complete desired set of permission ids
    """
    data = request.get_json(silent=True) or {}
    permission_ids = data.get("permissions")
    if not isinstance(permission_ids, list):
        return jsonify({"error": "permissions must be a list of permission ids"}), 400

    try:
        role = role_service.assign_permissions(role_id, permission_ids)
    except NavguardError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to assign permissions to role %s", role_id)
        return jsonify({"error": "Internal server error"}), 500

    _audit(
        "ROLE_PERMISSIONS_REPLACED",
        role_id,
        f"{len(role.permissions)} permission(s) on {role.name}",
    )
    return jsonify({"role": role.to_dict(), "message": "Permissions updated successfully"})


@roles_bp.get("/<int:role_id>/users")
@require_auth
@require_permission(PermissionSlug.VIEW_ROLES)
def list_role_users(role_id: int):
    try:
        users = role_service.list_role_users(role_id)
    except NavguardError as e:
        return error_response(e)
    return jsonify({"users": [u.to_dict(include_role=False) for u in users]})
