# Overview: Landing page resolution and shell routing decisions (redirects and page guards).

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from ..identity import Identity
from .filtering import can_access, has_page_permission
from .table import LAYOUT_PREFIXES, Layout, Route, RoutePage, find_page

ACCESS_DENIED_MESSAGE = (
    "You don't have permission to access this page. "
    "Please contact your administrator if you believe this is an error."
)


def _first_accessible(table: Iterable[Route], permission_slugs) -> tuple[Route, RoutePage] | None:
    for route in table:
        if route.is_pre_auth:
            continue
        for page in route.pages:
            if has_page_permission(page, permission_slugs):
                return route, page
    return None


def resolve_landing_page(table: Iterable[Route], permission_slugs: Iterable[str] | None) -> str | None:
    """
    Path of the first page the permission set reaches, in declared order.

    Returns None for an empty or absent permission set (the caller uses its
    fixed default) and when no authenticated page qualifies.
    """
    slugs = frozenset(permission_slugs or ())
    if not slugs:
        return None

    found = _first_accessible(table, slugs)
    if found is None:
        return None
    return found[1].path


def landing_url(
    table: Iterable[Route],
    permission_slugs: Iterable[str] | None,
    default: str = "/dashboard/home",
) -> str:
    """Full redirect target after authentication, e.g. "/dashboard/appointments"."""
    slugs = frozenset(permission_slugs or ())
    if not slugs:
        return default

    found = _first_accessible(table, slugs)
    if found is None:
        return default
    route, page = found
    return route.url_for(page)


@dataclass(frozen=True)
class NavigationDecision:
    """
    What the shell should do with a requested path.

    action is one of: "render", "redirect", "access-denied", "loading",
    "not-found".
    """
    action: str
    path: str
    target: str | None = None
    page: RoutePage | None = None
    message: str | None = None

    def to_dict(self) -> dict:
        return {
            "action": self.action,
            "path": self.path,
            "target": self.target,
            "page": self.page.to_dict() if self.page else None,
            "message": self.message,
        }


def guard_page(path: str, identity: Identity, table: Iterable[Route]) -> NavigationDecision:
    """
    Per-page guard for routed content.

    Every declared page is checked, including the ones the menu would have
    hidden, so typing a URL directly renders an access-denied state.
    """
    found = find_page(table, path)
    if found is None:
        return NavigationDecision("not-found", path)

    _, page = found
    if can_access(page.required_permission, identity):
        return NavigationDecision("render", path, page=page)
    return NavigationDecision("access-denied", path, page=page, message=ACCESS_DENIED_MESSAGE)


def resolve_navigation(
    path: str,
    identity: Identity,
    table: Iterable[Route],
    *,
    default_landing: str = "/dashboard/home",
    sign_in_path: str = "/auth/sign-in",
) -> NavigationDecision:
    """Shell routing for one requested URL."""
    table = tuple(table)

    if identity.loading:
        return NavigationDecision("loading", path)

    auth_prefix = LAYOUT_PREFIXES[Layout.AUTH]
    if path == auth_prefix or path.startswith(auth_prefix + "/"):
        if identity.is_authenticated:
            # Already signed in: the landing page replaces the auth screen.
            target = landing_url(table, identity.permission_slugs, default=default_landing)
            return NavigationDecision("redirect", path, target=target)
        found = find_page(table, path)
        if found is None:
            return NavigationDecision("redirect", path, target=sign_in_path)
        return NavigationDecision("render", path, page=found[1])

    if not identity.is_authenticated:
        return NavigationDecision("redirect", path, target=sign_in_path)

    return guard_page(path, identity, table)
