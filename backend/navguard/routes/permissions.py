# Overview: Flask API routes for the permission catalog.

from flask import Blueprint, current_app, g, jsonify, request

from ..decorators import require_auth, require_permission
from ..errors import NavguardError
from ..permissions import PermissionSlug
from ..services import permission_service
from . import error_response

permissions_bp = Blueprint("permissions", __name__, url_prefix="/api/permissions")


@permissions_bp.get("")
@require_auth
@require_permission(PermissionSlug.VIEW_PERMISSIONS)
def list_permissions():
    """
    List catalog permissions.

    Query params:
    - module: str - filter by module ("General" for unlabelled permissions)
    - keyword: str - match name, slug or description
    - page, per_page: int - pagination (omit page for everything)
    """
    result = permission_service.list_permissions(
        module=request.args.get("module") or None,
        keyword=request.args.get("keyword"),
        page=request.args.get("page", type=int),
        per_page=request.args.get("per_page", type=int),
    )
    body = {"permissions": result["items"], "count": result["count"]}
    if "pagination" in result:
        body["pagination"] = result["pagination"]
    return jsonify(body)


@permissions_bp.get("/modules")
@require_auth
@require_permission(PermissionSlug.VIEW_PERMISSIONS)
def list_modules():
    return jsonify({"modules": permission_service.list_modules()})


@permissions_bp.get("/<int:permission_id>")
@require_auth
@require_permission(PermissionSlug.VIEW_PERMISSIONS)
def get_permission(permission_id: int):
    try:
        permission = permission_service.get_permission(permission_id)
    except NavguardError as e:
        return error_response(e)
    return jsonify({"permission": permission.to_dict()})


@permissions_bp.post("")
@require_auth
@require_permission(PermissionSlug.MANAGE_PERMISSIONS)
def create_permission():
    """
    Create a permission. The slug is derived from the name.

    Request body:
    - name: str (required)
    - module: str (optional, defaults to "General")
    - description: str (optional)
    """
    data = request.get_json(silent=True) or {}
    try:
        permission = permission_service.create_permission(
            name=data.get("name"),
            module=data.get("module"),
            description=data.get("description"),
        )
    except NavguardError as e:
        return error_response(e)

    current_app.logger.info("Permission %s created by user=%s", permission.slug, g.current_user.id)
    return jsonify({"permission": permission.to_dict(), "message": "Permission created successfully"}), 201


@permissions_bp.put("/<int:permission_id>")
@require_auth
@require_permission(PermissionSlug.MANAGE_PERMISSIONS)
def update_permission(permission_id: int):
    data = request.get_json(silent=True) or {}
    if "slug" in data:
        return jsonify({"error": "slug cannot be changed"}), 400

    fields = {key: data[key] for key in ("name", "module", "description") if key in data}
    try:
        permission = permission_service.update_permission(permission_id, **fields)
    except NavguardError as e:
        return error_response(e)
    return jsonify({"permission": permission.to_dict(), "message": "Permission updated successfully"})


@permissions_bp.delete("/<int:permission_id>")
@require_auth
@require_permission(PermissionSlug.MANAGE_PERMISSIONS)
def delete_permission(permission_id: int):
    try:
        permission_service.delete_permission(permission_id)
    except NavguardError as e:
        return error_response(e)

    permission_service.log_security_event(
        user_id=g.current_user.id,
        event_type="PERMISSION_DELETED",
        success=True,
        resource=request.path,
        action=f"Deleted permission {permission_id}",
        ip_address=request.remote_addr,
        user_agent=request.headers.get("User-Agent"),
    )
    return jsonify({"message": "Permission deleted successfully"})
