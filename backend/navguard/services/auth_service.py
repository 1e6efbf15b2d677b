# Overview: Service-layer operations for console users and credential checks.

"""
Authentication Service

Credential checks only: bcrypt verification for login and hashing for users
created by the CLI. Password policy and self-registration are handled by the
identity provider, not here.
"""

import bcrypt
from flask import current_app

from ..errors import ConflictError, NotFoundError, ValidationError
from ..extensions import db
from ..models import User
from ..time_utils import utcnow
from .role_service import get_role_by_name


def hash_password(password: str) -> str:
    """Hash password using bcrypt (cost factor BCRYPT_ROUNDS, 12 by default)."""
    if not password:
        raise ValidationError("password required")
    salt = bcrypt.gensalt(rounds=current_app.config.get("BCRYPT_ROUNDS", 12))
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Timing-safe bcrypt check. Malformed hashes never match."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


def authenticate(email: str, password: str) -> User | None:
    """
    Return the active user matching the credentials, or None.

    Records last_login_at on success.
    """
    user = db.session.query(User).filter_by(email=(email or "").strip().lower()).first()
    if not user or not user.is_active:
        return None
    if not verify_password(password or "", user.password_hash):
        return None

    user.last_login_at = utcnow()
    db.session.commit()
    return user


def create_user(name: str, email: str, password: str, role_name: str | None = None) -> User:
    """Create a console user, optionally holding a named role."""
    email = (email or "").strip().lower()
    if not name or not email:
        raise ValidationError("name and email required")

    if db.session.query(User).filter_by(email=email).first():
        raise ConflictError(f"User '{email}' already exists")

    role = None
    if role_name:
        role = get_role_by_name(role_name)
        if role is None:
            raise NotFoundError(f"Role '{role_name}' not found")

    user = User(
        name=name,
        email=email,
        password_hash=hash_password(password),
        role_id=role.id if role else None,
    )
    db.session.add(user)
    db.session.commit()
    return user
