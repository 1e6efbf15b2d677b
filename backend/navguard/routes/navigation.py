# Overview: Flask API routes serving the filtered navigation tree and shell routing decisions.

from flask import Blueprint, current_app, g, jsonify, request

from ..decorators import optional_auth, require_auth
from ..navigation import filter_routes, landing_url, localize_section_titles, resolve_navigation

navigation_bp = Blueprint("navigation", __name__, url_prefix="/api/navigation")


@navigation_bp.get("")
@optional_auth
def navigation_tree():
    """Visible sections and pages for the caller; empty when not signed in."""
    routes = filter_routes(current_app.config["ROUTE_TABLE"], g.identity)
    routes = localize_section_titles(routes, g.identity.role_name)
    return jsonify({"routes": [route.to_dict() for route in routes]})


@navigation_bp.get("/resolve")
@optional_auth
def resolve_path():
    """
    Decide what the shell does with a URL.

    Query params:
    - path: str (required), e.g. /dashboard/billing or /auth/sign-in
    """
    path = request.args.get("path")
    if not path:
        return jsonify({"error": "path required"}), 400

    decision = resolve_navigation(
        path,
        g.identity,
        current_app.config["ROUTE_TABLE"],
        default_landing=current_app.config["DEFAULT_LANDING_PATH"],
        sign_in_path=current_app.config["SIGN_IN_PATH"],
    )
    return jsonify({"decision": decision.to_dict()})


@navigation_bp.get("/landing")
@require_auth
def landing():
    target = landing_url(
        current_app.config["ROUTE_TABLE"],
        g.identity.permission_slugs,
        default=current_app.config["DEFAULT_LANDING_PATH"],
    )
    return jsonify({"redirect_to": target})
