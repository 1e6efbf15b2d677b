# Overview: Flask API routes for sign-in, sign-out and the current identity.

"""
Authentication API routes

Login returns the session token together with the identity's permission
slugs and the landing URL, so the client can redirect straight away.
Identities holding the patient role are refused even with valid credentials.
"""

from flask import Blueprint, current_app, g, jsonify, request

from ..decorators import require_auth
from ..identity import ACCESS_RESTRICTED_MESSAGE
from ..navigation import landing_url
from ..services import auth_service, identity_service, permission_service, session_service

auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")

@auth_bp.post("/login")
def login_route():
    """
    Authenticate and create a session.

    Request body:
    - email: str (required)
    - password: str (required)
    """
    data = request.get_json(silent=True) or {}
    email = data.get("email")
    password = data.get("password")

    if not email or not password:
        return jsonify({"error": "email and password required"}), 400

    user_agent = request.headers.get("User-Agent")
    ip_address = request.remote_addr

    try:
        user = auth_service.authenticate(email, password)
        if not user:
            permission_service.log_security_event(
                user_id=None,
                event_type="LOGIN_FAILED",
                success=False,
                resource=request.path,
                action=email,
                reason="Invalid credentials",
                ip_address=ip_address,
                user_agent=user_agent,
            )
            return jsonify({"error": "Invalid credentials"}), 401

        identity = identity_service.resolve_identity(user)
        if identity.is_patient:
            permission_service.log_security_event(
                user_id=user.id,
                event_type="LOGIN_RESTRICTED",
                success=False,
                resource=request.path,
                reason="Patient role cannot sign in to the admin console",
                ip_address=ip_address,
                user_agent=user_agent,
            )
            return jsonify({"error": ACCESS_RESTRICTED_MESSAGE}), 403

        session, token = session_service.create_session(
            user_id=user.id,
            user_agent=user_agent,
            ip_address=ip_address,
        )
    except Exception:
        current_app.logger.exception("Failed to login user")
        return jsonify({"error": "Internal server error"}), 500

    redirect_to = landing_url(
        current_app.config["ROUTE_TABLE"],
        identity.permission_slugs,
        default=current_app.config["DEFAULT_LANDING_PATH"],
    )
    current_app.logger.info("User %s signed in, landing on %s", user.id, redirect_to)

    return jsonify({
        "user": user.to_dict(),
        "permissions": sorted(identity.permission_slugs),
        "token": token,
        "session": session.to_dict(),
        "redirect_to": redirect_to,
        "message": "Login successful",
    }), 200


@auth_bp.post("/logout")
@require_auth
def logout_route():
    session_service.revoke_session(g.session_token)
    permission_service.log_security_event(
        user_id=g.current_user.id,
        event_type="LOGOUT",
        success=True,
        resource=request.path,
        ip_address=request.remote_addr,
        user_agent=request.headers.get("User-Agent"),
    )
    return jsonify({"message": "Logged out"})


@auth_bp.get("/me")
@require_auth
def me_route():
    return jsonify({
        "user": g.current_user.to_dict(),
        "permissions": sorted(g.identity.permission_slugs),
    })


@auth_bp.get("/permissions")
@require_auth
def permissions_route():
    return jsonify({"permissions": sorted(g.identity.permission_slugs)})
