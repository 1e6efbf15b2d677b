# Overview: Request and permission decorators for API routes.

from functools import wraps

from flask import g, jsonify, request

from .identity import ANONYMOUS
from .services import identity_service, permission_service, session_service
from .services.permission_service import PermissionDeniedError


def _bearer_token() -> str | None:
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        return None
    return auth_header.split(" ", 1)[1]


def _load_identity() -> bool:
    """Resolve the bearer token into g.current_user / g.identity. Returns success."""
    token = _bearer_token()
    if not token:
        return False

    user = session_service.validate_session(token)
    if not user:
        return False

    g.current_user = user
    g.session_token = token
    g.identity = identity_service.resolve_identity(user)
    return True


def _is_authenticated() -> bool:
    return getattr(g, "identity", ANONYMOUS).is_authenticated


def require_auth(f):
    """
    Require a valid bearer session.

    Sets on Flask g:
    - g.current_user: the authenticated User row
    - g.identity: the immutable Identity built for this request
    - g.session_token: the presented token (for logout)
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not _bearer_token():
            return jsonify({"error": "Authentication required"}), 401
        if not _load_identity():
            return jsonify({"error": "Invalid or expired token"}), 401
        return f(*args, **kwargs)

    return decorated_function


def optional_auth(f):
    """Resolve the identity when a valid token is present; otherwise g.identity is ANONYMOUS."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not _load_identity():
            g.identity = ANONYMOUS
        return f(*args, **kwargs)

    return decorated_function


def require_permission(permission_slug):
    """Require a specific permission slug. Must be stacked under @require_auth."""
    permission_slug = str(getattr(permission_slug, "value", permission_slug))

    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if not _is_authenticated():
                return jsonify({"error": "Authentication required"}), 401

            try:
                permission_service.require_permission(
                    g.identity,
                    permission_slug,
                    resource=request.path,
                    ip_address=request.remote_addr,
                    user_agent=request.headers.get("User-Agent"),
                )
            except PermissionDeniedError as e:
                return jsonify({
                    "error": "Permission denied",
                    "required_permission": permission_slug,
                    "message": str(e),
                }), 403

            return f(*args, **kwargs)

        return decorated_function
    return decorator
