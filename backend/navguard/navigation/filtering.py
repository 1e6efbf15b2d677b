# Overview: Deny-by-default route filtering for the navigation menu.

from __future__ import annotations

from dataclasses import replace
from typing import Iterable

from ..identity import Identity
from .table import Route, RoutePage


def has_page_permission(page: RoutePage, permission_slugs: Iterable[str]) -> bool:
    """
    True if the page is permission-free, or its slug is held.

    Unknown slugs are simply never held, so a broken declaration denies.
    """
    if not page.required_permission:
        return True
    return page.required_permission in permission_slugs


def can_access(required_permission: str | None, identity: Identity) -> bool:
    """Per-page guard check used for routed content."""
    if not identity.is_authenticated or identity.loading:
        return False
    if identity.is_patient:
        return False
    if not required_permission:
        return True
    return identity.has_permission(required_permission)


def filter_routes(table: Iterable[Route], identity: Identity) -> list[Route]:
    """
    Visible subset of the route table for an identity.

    - unauthenticated or still resolving: nothing
    - patient role (any casing): nothing, whatever it has been granted
    - pre-authentication sections: dropped
    - pages: kept only when has_page_permission holds
    - sections left empty: dropped
    Order of sections and pages is preserved. Pure; returns new Route values.
    """
    if not identity.is_authenticated or identity.loading:
        return []

    if identity.is_patient:
        return []

    slugs = identity.permission_slugs
    visible = []
    for route in table:
        if route.is_pre_auth:
            continue

        pages = tuple(page for page in route.pages if has_page_permission(page, slugs))
        if pages:
            visible.append(replace(route, pages=pages))

    return visible
