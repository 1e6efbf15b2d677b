# Overview: Immutable identity value and its single-writer context holder.

"""
Identity model shared by the server and the async client.

An Identity is a frozen value. Login, refresh and logout never edit an
identity in place; they build a new one and hand it to
IdentityContext.set_identity, which is the only writer. Readers (route
filter, page guards, the role-permission editor) always observe a whole
identity, never a half-updated one.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Iterable, Mapping

from .permissions import PATIENT_ROLE


ACCESS_RESTRICTED_MESSAGE = (
    "Access Restricted: Administrative panel access is limited to "
    "authorized clinical and operational staff."
)


@dataclass(frozen=True)
class Identity:
    id: int | None = None
    name: str | None = None
    email: str | None = None
    role_name: str | None = None
    permission_slugs: frozenset[str] = field(default_factory=frozenset)
    is_authenticated: bool = False
    loading: bool = False

    def __post_init__(self):
        if not isinstance(self.permission_slugs, frozenset):
            object.__setattr__(self, "permission_slugs", frozenset(self.permission_slugs or ()))

    @property
    def is_patient(self) -> bool:
        return (self.role_name or "").strip().lower() == PATIENT_ROLE

    def has_permission(self, slug: str | None) -> bool:
        """Exact, case-sensitive membership. Empty slugs are never held."""
        if not slug:
            return False
        return str(getattr(slug, "value", slug)) in self.permission_slugs

    def has_any_permission(self, slugs: Iterable[str]) -> bool:
        return any(self.has_permission(s) for s in slugs)

    def has_all_permissions(self, slugs: Iterable[str]) -> bool:
        return all(self.has_permission(s) for s in slugs)

    @classmethod
    def authenticated(
        cls,
        *,
        id: int,
        name: str | None,
        email: str | None,
        role_name: str | None,
        permission_slugs: Iterable[str],
    ) -> "Identity":
        return cls(
            id=id,
            name=name,
            email=email,
            role_name=role_name,
            permission_slugs=frozenset(permission_slugs),
            is_authenticated=True,
        )

    @classmethod
    def from_payload(cls, user: Mapping, permissions: Iterable[str]) -> "Identity":
        """Build from the `user` and `permissions` members of a login or /me response."""
        role = user.get("role") or {}
        return cls.authenticated(
            id=user.get("id"),
            name=user.get("name"),
            email=user.get("email"),
            role_name=role.get("name"),
            permission_slugs=permissions or (),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role_name,
            "permissions": sorted(self.permission_slugs),
            "is_authenticated": self.is_authenticated,
        }


ANONYMOUS = Identity()
RESOLVING = Identity(loading=True)


class IdentityContext:
    """Holder for the current identity. set_identity is the only mutator."""

    def __init__(self, identity: Identity = ANONYMOUS):
        self._identity = identity

    @property
    def identity(self) -> Identity:
        return self._identity

    def set_identity(self, identity: Identity) -> None:
        if not isinstance(identity, Identity):
            raise TypeError(f"expected Identity, got {type(identity).__name__}")
        self._identity = identity

    def mark_loading(self) -> None:
        self.set_identity(replace(self._identity, loading=True))

    def clear(self) -> None:
        self.set_identity(ANONYMOUS)
