# Overview: Service-layer operations for the permission catalog and security audit log.

"""
Permission Catalog and Security Event Logging

WHY: Permissions are the vocabulary of every authorization decision. The
catalog is the single source of valid slugs; roles may only reference
catalog entries and route declarations are validated against it.

DESIGN PRINCIPLES:
- Fail closed: an unknown slug is never held by anyone
- Slugs are immutable; only display fields (name, module, description) change
- Module is never empty: absent labels become the default module
- Log denials only: permission grants are not logged
"""

from sqlalchemy import func, or_

from ..errors import ConflictError, NotFoundError, ValidationError
from ..extensions import db
from ..models import Permission, RolePermission, SecurityEvent
from ..permissions import PERMISSION_DEFINITIONS, normalize_module, slugify
from ..time_utils import utcnow
from .pagination import paginate


class PermissionDeniedError(Exception):
    """Raised when an identity lacks a required permission."""

    def __init__(self, permission_slug: str):
        self.permission_slug = permission_slug
        super().__init__(f"Permission denied: {permission_slug}")


def log_security_event(
    user_id: int | None,
    event_type: str,
    success: bool,
    resource: str | None = None,
    action: str | None = None,
    reason: str | None = None,
    ip_address: str | None = None,
    user_agent: str | None = None,
) -> SecurityEvent:
    """
    Append a security event to the audit trail.

    event_type examples:
    - PERMISSION_DENIED
    - LOGIN_FAILED
    - LOGIN_RESTRICTED
    - LOGOUT
    - ROLE_ASSIGNED
    - ROLE_PERMISSIONS_REPLACED
    - ROLE_DELETED
    - PERMISSION_DELETED
    """
    event = SecurityEvent(
        user_id=user_id,
        event_type=event_type,
        resource=resource,
        action=action,
        success=success,
        reason=reason,
        ip_address=ip_address,
        user_agent=user_agent,
        occurred_at=utcnow(),
    )

    db.session.add(event)
    db.session.commit()

    return event


def require_permission(identity, permission_slug: str, resource: str | None = None,
                       ip_address: str | None = None, user_agent: str | None = None) -> None:
    """
    Require the identity to hold a permission; raise PermissionDeniedError if not.

    Denials are written to security_events.
    """
    if identity.has_permission(permission_slug) and not identity.is_patient:
        return

    log_security_event(
        user_id=identity.id,
        event_type="PERMISSION_DENIED",
        success=False,
        resource=resource,
        action=permission_slug,
        reason=f"Missing permission: {permission_slug}",
        ip_address=ip_address,
        user_agent=user_agent,
    )
    raise PermissionDeniedError(permission_slug)


# =============================================================================
# CATALOG
# =============================================================================

def get_permission(permission_id: int) -> Permission:
    permission = db.session.get(Permission, permission_id)
    if permission is None:
        raise NotFoundError(f"Permission {permission_id} not found")
    return permission


def list_permissions(
    module: str | None = None,
    keyword: str | None = None,
    page: int | None = None,
    per_page: int | None = None,
) -> dict:
    """
    List catalog permissions ordered by module then slug.

    module filters on the normalized module; keyword matches name, slug or
    description case-insensitively.
    """
    query = db.session.query(Permission)

    if module is not None:
        query = query.filter(Permission.module == normalize_module(module))

    if keyword and keyword.strip():
        pattern = f"%{keyword.strip().lower()}%"
        query = query.filter(or_(
            func.lower(Permission.name).like(pattern),
            func.lower(Permission.slug).like(pattern),
            func.lower(func.coalesce(Permission.description, "")).like(pattern),
        ))

    query = query.order_by(Permission.module.asc(), Permission.slug.asc())
    return paginate(query, page, per_page, lambda p: p.to_dict())


def list_modules() -> list[str]:
    """Distinct module names present in the catalog."""
    rows = db.session.query(Permission.module).distinct().all()
    return sorted(row[0] for row in rows)


def get_catalog_slugs() -> set[str]:
    return {row[0] for row in db.session.query(Permission.slug).all()}


def create_permission(name: str, module: str | None = None, description: str | None = None) -> Permission:
    """
    Create a catalog permission; the slug is derived from the name.

    Raises ValidationError for a name with no slug characters and
    ConflictError if the derived slug already exists.
    """
    name = (name or "").strip()
    slug = slugify(name)
    if not slug:
        raise ValidationError("name must contain letters or digits")

    if db.session.query(Permission).filter_by(slug=slug).first():
        raise ConflictError(f"Permission '{slug}' already exists")

    permission = Permission(
        slug=slug,
        name=name,
        module=normalize_module(module),
        description=description,
    )
    db.session.add(permission)
    db.session.commit()
    return permission


_UNSET = object()


def update_permission(permission_id: int, name=_UNSET, module=_UNSET, description=_UNSET) -> Permission:
    """Update display fields. The slug stays what it was at creation."""
    permission = get_permission(permission_id)

    if name is not _UNSET:
        name = (name or "").strip()
        if not name:
            raise ValidationError("name must not be empty")
        permission.name = name
    if module is not _UNSET:
        permission.module = normalize_module(module)
    if description is not _UNSET:
        permission.description = description

    db.session.commit()
    return permission


def delete_permission(permission_id: int) -> None:
    """Delete a catalog permission that no role references."""
    permission = get_permission(permission_id)

    in_use = db.session.query(RolePermission).filter_by(permission_id=permission.id).count()
    if in_use:
        raise ConflictError(
            f"Permission '{permission.slug}' is granted to {in_use} role(s); revoke it first"
        )

    db.session.delete(permission)
    db.session.commit()


def initialize_permissions() -> int:
    """
    Insert every static definition missing from the catalog.

    Idempotent: existing rows are left untouched. Returns the number created.
    """
    created_count = 0

    for slug, name, description, module in PERMISSION_DEFINITIONS:
        existing = db.session.query(Permission).filter_by(slug=slug).first()
        if not existing:
            db.session.add(Permission(
                slug=slug,
                name=name,
                description=description,
                module=normalize_module(module),
            ))
            created_count += 1

    db.session.commit()
    return created_count
