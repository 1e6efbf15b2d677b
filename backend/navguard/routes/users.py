# Overview: Flask API routes for user-role membership.

from flask import Blueprint, current_app, g, jsonify, request

from ..decorators import require_auth, require_permission
from ..errors import NavguardError
from ..permissions import PermissionSlug
from ..services import identity_service, permission_service, role_service
from . import error_response

users_bp = Blueprint("users", __name__, url_prefix="/api")


@users_bp.get("/user-roles")
@require_auth
@require_permission(PermissionSlug.ASSIGN_ROLES)
def list_user_roles():
    """
    List users with their role.

    Query params:
    - keyword: str - match name or email
    - role_id: int - only holders of this role
    - page, per_page: int - pagination
    """
    result = role_service.list_user_roles(
        keyword=request.args.get("keyword"),
        role_id=request.args.get("role_id", type=int),
        page=request.args.get("page", type=int),
        per_page=request.args.get("per_page", type=int),
    )
    body = {"users": result["items"], "count": result["count"]}
    if "pagination" in result:
        body["pagination"] = result["pagination"]
    return jsonify(body)


@users_bp.post("/users/<int:user_id>/assign-role")
@require_auth
@require_permission(PermissionSlug.ASSIGN_ROLES)
def assign_role(user_id: int):
    """
    Give a user a role, replacing the one they held.

    Request body:
    - role_id: int (required)
    """
    data = request.get_json(silent=True) or {}
    role_id = data.get("role_id")
    if not isinstance(role_id, int):
        return jsonify({"error": "role_id required"}), 400

    try:
        user = role_service.assign_role_to_user(user_id, role_id)
    except NavguardError as e:
        return error_response(e)

    permission_service.log_security_event(
        user_id=g.current_user.id,
        event_type="ROLE_ASSIGNED",
        success=True,
        resource=request.path,
        action=f"Assigned role {role_id} to user {user_id}",
        ip_address=request.remote_addr,
        user_agent=request.headers.get("User-Agent"),
    )
    current_app.logger.info("Role %s assigned to user=%s by user=%s", role_id, user_id, g.current_user.id)
    return jsonify({"user": user.to_dict(), "message": "Role assigned successfully"})


@users_bp.get("/users/<int:user_id>/permissions")
@require_auth
@require_permission(PermissionSlug.VIEW_ROLES)
def user_permissions(user_id: int):
    try:
        slugs = identity_service.get_user_permissions(user_id)
    except NavguardError as e:
        return error_response(e)
    return jsonify({"permissions": sorted(slugs)})
