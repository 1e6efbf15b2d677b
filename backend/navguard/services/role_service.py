# Overview: Service-layer operations for roles: registry CRUD, permission assignment, user membership.

"""
Role Registry

WHY: Roles are the only way permissions reach an identity. Each user holds
exactly one role; a role owns a set of catalog permissions.

DESIGN:
- assign_permissions REPLACES the role's set; callers always send the full
  desired set, never a delta
- Replacement is all-or-nothing: an unknown permission id aborts the whole
  call and the stored set is unchanged
- System roles cannot be deleted or renamed
- A role held by any user cannot be deleted (no cascade to a default role)
"""

from sqlalchemy import func, or_

from ..errors import ConflictError, NotFoundError, ValidationError
from ..extensions import db
from ..models import Permission, Role, RolePermission, User
from ..permissions import DEFAULT_ROLES, DEFAULT_ROLE_PERMISSIONS
from .pagination import paginate


def get_role(role_id: int) -> Role:
    role = db.session.get(Role, role_id)
    if role is None:
        raise NotFoundError(f"Role {role_id} not found")
    return role


def get_role_by_name(name: str) -> Role | None:
    return (
        db.session.query(Role)
        .filter(func.lower(Role.name) == (name or "").strip().lower())
        .first()
    )


def list_roles(keyword: str | None = None, page: int | None = None, per_page: int | None = None) -> dict:
    """List roles, each with its permissions, ordered by name."""
    query = db.session.query(Role)

    if keyword and keyword.strip():
        pattern = f"%{keyword.strip().lower()}%"
        query = query.filter(or_(
            func.lower(Role.name).like(pattern),
            func.lower(func.coalesce(Role.description, "")).like(pattern),
        ))

    query = query.order_by(Role.name.asc(), Role.id.asc())
    return paginate(query, page, per_page, lambda r: r.to_dict())


def _resolve_permissions(permission_ids) -> list[Permission]:
    try:
        wanted = {int(pid) for pid in (permission_ids or [])}
    except (TypeError, ValueError):
        raise ValidationError("permissions must be a list of permission ids") from None

    if not wanted:
        return []

    found = db.session.query(Permission).filter(Permission.id.in_(wanted)).all()
    missing = wanted - {p.id for p in found}
    if missing:
        raise NotFoundError(f"Unknown permission id(s): {', '.join(str(m) for m in sorted(missing))}")
    return found


def create_role(
    name: str,
    description: str | None = None,
    permission_ids=None,
    is_system: bool = False,
) -> Role:
    """Create a role, optionally with an initial permission set."""
    name = (name or "").strip()
    if not name:
        raise ValidationError("name required")

    if get_role_by_name(name):
        raise ConflictError(f"Role '{name}' already exists")

    permissions = _resolve_permissions(permission_ids)

    role = Role(name=name, description=description, is_system=is_system)
    db.session.add(role)
    db.session.flush()

    for permission in permissions:
        db.session.add(RolePermission(role_id=role.id, permission_id=permission.id))

    db.session.commit()
    return role


_UNSET = object()


def update_role(role_id: int, name=_UNSET, description=_UNSET) -> Role:
    role = get_role(role_id)

    if name is not _UNSET:
        name = (name or "").strip()
        if not name:
            raise ValidationError("name must not be empty")
        if name != role.name:
            if role.is_system:
                raise ConflictError(f"System role '{role.name}' cannot be renamed")
            other = get_role_by_name(name)
            if other is not None and other.id != role.id:
                raise ConflictError(f"Role '{name}' already exists")
            role.name = name

    if description is not _UNSET:
        role.description = description

    db.session.commit()
    return role


def delete_role(role_id: int) -> None:
    """
    Delete a role.

    Raises ConflictError for system roles and for roles any user holds.
    """
    role = get_role(role_id)

    if role.is_system:
        raise ConflictError(f"System role '{role.name}' cannot be deleted")

    holders = db.session.query(User).filter_by(role_id=role.id).count()
    if holders:
        raise ConflictError(f"Role '{role.name}' is assigned to {holders} user(s); reassign them first")

    db.session.query(RolePermission).filter_by(role_id=role.id).delete()
    db.session.delete(role)
    db.session.commit()


def assign_permissions(role_id: int, permission_ids) -> Role:
    """
    Replace a role's permission set with exactly permission_ids.

    All-or-nothing: on any error the transaction is rolled back and the
    previously stored set remains.
    """
    try:
        role = get_role(role_id)
        permissions = _resolve_permissions(permission_ids)

        db.session.query(RolePermission).filter_by(role_id=role.id).delete()
        for permission in permissions:
            db.session.add(RolePermission(role_id=role.id, permission_id=permission.id))

        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    db.session.refresh(role)
    return role


def list_role_users(role_id: int) -> list[User]:
    role = get_role(role_id)
    return db.session.query(User).filter_by(role_id=role.id).order_by(User.name.asc()).all()


def list_user_roles(
    keyword: str | None = None,
    role_id: int | None = None,
    page: int | None = None,
    per_page: int | None = None,
) -> dict:
    """Users with the role they hold, for the user-roles screen."""
    query = db.session.query(User)

    if role_id is not None:
        query = query.filter(User.role_id == role_id)

    if keyword and keyword.strip():
        pattern = f"%{keyword.strip().lower()}%"
        query = query.filter(or_(
            func.lower(User.name).like(pattern),
            func.lower(User.email).like(pattern),
        ))

    query = query.order_by(User.name.asc(), User.id.asc())
    return paginate(query, page, per_page, lambda u: u.to_dict())


def assign_role_to_user(user_id: int, role_id: int) -> User:
    """Give a user a role. The previous role, if any, is replaced."""
    user = db.session.get(User, user_id)
    if user is None:
        raise NotFoundError(f"User {user_id} not found")
    role = get_role(role_id)

    user.role_id = role.id
    db.session.commit()
    return user


def create_default_roles() -> int:
    """Create DEFAULT_ROLES that do not exist yet. Returns the number created."""
    created = 0
    for name, description, is_system in DEFAULT_ROLES:
        if get_role_by_name(name) is None:
            db.session.add(Role(name=name, description=description, is_system=is_system))
            created += 1
    db.session.commit()
    return created


def assign_default_role_permissions() -> int:
    """
    Grant DEFAULT_ROLE_PERMISSIONS to their roles.

    Idempotent: skips roles and permissions that do not exist, and grants
    already present. Returns the number of grants created.
    """
    created_count = 0

    for role_name, slugs in DEFAULT_ROLE_PERMISSIONS.items():
        role = get_role_by_name(role_name)
        if not role:
            continue

        held = {
            row[0]
            for row in db.session.query(RolePermission.permission_id).filter_by(role_id=role.id).all()
        }
        for permission in db.session.query(Permission).filter(Permission.slug.in_(slugs)).all():
            if permission.id not in held:
                db.session.add(RolePermission(role_id=role.id, permission_id=permission.id))
                created_count += 1

    db.session.commit()
    return created_count
