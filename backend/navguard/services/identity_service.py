# Overview: Resolve stored users into immutable Identity values.

from ..errors import NotFoundError
from ..extensions import db
from ..identity import Identity
from ..models import Permission, RolePermission, User


def get_user(user_id: int) -> User:
    user = db.session.get(User, user_id)
    if user is None:
        raise NotFoundError(f"User {user_id} not found")
    return user


def get_user_permissions(user_id: int) -> set[str]:
    """Slugs granted through the user's role. No role means no permissions."""
    user = get_user(user_id)
    if user.role_id is None:
        return set()

    rows = (
        db.session.query(Permission.slug)
        .join(RolePermission, RolePermission.permission_id == Permission.id)
        .filter(RolePermission.role_id == user.role_id)
        .all()
    )
    return {row[0] for row in rows}


def resolve_identity(user: User) -> Identity:
    """Flatten the user's role into an authenticated Identity."""
    return Identity.authenticated(
        id=user.id,
        name=user.name,
        email=user.email,
        role_name=user.role.name if user.role else None,
        permission_slugs=get_user_permissions(user.id),
    )
