# Overview: Route declaration table: ordered navigation sections and their pages.

"""
Route declarations for the admin console.

The table is static configuration, declared independently of any identity.
Its order is the menu order and the tie-break order for landing page
resolution. Pages name at most one required permission; pages without one
are visible to every authenticated identity.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator

from ..errors import RouteTableError
from ..permissions import PermissionSlug as P


class Layout:
    DASHBOARD = "dashboard"  # authenticated application shell
    AUTH = "auth"            # pre-authentication screens (sign in / sign up)


LAYOUT_PREFIXES = {
    Layout.DASHBOARD: "/dashboard",
    Layout.AUTH: "/auth",
}

PRE_AUTH_LAYOUTS = frozenset({Layout.AUTH})


@dataclass(frozen=True)
class RoutePage:
    path: str
    name: str
    required_permission: str | None = None
    icon: str | None = None

    def __post_init__(self):
        # Enum members are stored as their plain slug so set membership works.
        slug = self.required_permission
        if slug is not None:
            object.__setattr__(self, "required_permission", str(getattr(slug, "value", slug)))

    def to_dict(self) -> dict:
        return {
            "path": self.path,
            "name": self.name,
            "permission": self.required_permission,
            "icon": self.icon,
        }


@dataclass(frozen=True)
class Route:
    layout: str
    pages: tuple[RoutePage, ...]
    title: str | None = None

    def __post_init__(self):
        object.__setattr__(self, "pages", tuple(self.pages))

    @property
    def is_pre_auth(self) -> bool:
        return self.layout in PRE_AUTH_LAYOUTS

    def url_for(self, page: RoutePage) -> str:
        return LAYOUT_PREFIXES.get(self.layout, "") + page.path

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "layout": self.layout,
            "pages": [dict(page.to_dict(), url=self.url_for(page)) for page in self.pages],
        }


def _section(title, pages, layout=Layout.DASHBOARD):
    return Route(layout=layout, title=title, pages=tuple(RoutePage(*p) for p in pages))


ROUTES: tuple[Route, ...] = (
    _section(None, [
        ("/home", "dashboard", P.VIEW_DASHBOARD, "home"),
    ]),
    _section("core management", [
        ("/appointments", "appointments", P.VIEW_APPOINTMENTS, "calendar-days"),
        ("/patients", "patients", P.VIEW_PATIENTS, "user-group"),
        ("/departments", "departments", P.VIEW_DEPARTMENTS, "building-office"),
        ("/services", "services", P.VIEW_SERVICES, "briefcase"),
        ("/staff", "staff", P.VIEW_STAFF, "users"),
    ]),
    _section("doctor menu", [
        ("/prescriptions", "prescriptions", P.VIEW_PRESCRIPTIONS, "clipboard-document-list"),
        ("/patient-reports", "patient reports", P.VIEW_PATIENT_REPORTS, "document-chart-bar"),
    ]),
    _section("staff menu", [
        ("/bills", "manage bills", P.VIEW_BILLS, "list-bullet"),
        ("/medicines", "medicines", P.VIEW_MEDICINES, "beaker"),
        ("/doctors", "doctors", P.VIEW_DOCTORS, "user"),
    ]),
    _section("content management", [
        ("/gallery", "gallery", P.VIEW_GALLERY, "photo"),
        ("/testimonials", "testimonials", P.VIEW_TESTIMONIALS, "chat-bubble-left-right"),
        ("/faq", "faq", P.VIEW_FAQ, "question-mark-circle"),
        ("/contact-inquiries", "contact inquiries", P.VIEW_CONTACT_INQUIRIES, "envelope"),
        ("/health-packages", "health packages", P.VIEW_HEALTH_PACKAGES, "rectangle-stack"),
        ("/home-care", "home care", P.VIEW_SERVICES, "home-modern"),
    ]),
    _section("operations", [
        ("/billing", "billing & finance", P.VIEW_BILLING_FINANCE, "currency-dollar"),
        ("/inventory", "inventory", P.VIEW_INVENTORY, "cube"),
        ("/integrations", "integrations", P.VIEW_SETTINGS, "link"),
    ]),
    _section("reports & settings", [
        ("/settings", "settings", P.VIEW_SETTINGS, "cog-6-tooth"),
    ]),
    _section("coming soon", [
        ("/reports", "reports", P.VIEW_REPORTS, "chart-bar"),
        ("/pharmacy", "pharmacy", P.VIEW_PHARMACY, "beaker"),
        ("/laboratory", "laboratory", P.VIEW_LABORATORY, "beaker"),
        ("/rooms", "rooms & beds", P.VIEW_ROOMS, "home-modern"),
        ("/schedules", "schedules", P.VIEW_SCHEDULES, "clock"),
        ("/emergency", "emergency", P.VIEW_EMERGENCY, "exclamation-triangle"),
    ]),
    _section("role & permission management", [
        ("/roles", "roles", P.VIEW_ROLES, "shield-check"),
        ("/permissions", "permissions", P.VIEW_PERMISSIONS, "key"),
        ("/role-permissions", "role permissions", P.MANAGE_ROLES, "server-stack"),
        ("/user-roles", "user roles", P.ASSIGN_ROLES, "users"),
    ]),
    _section("account", [
        ("/profile", "profile", None, "user-circle"),
        ("/notifications", "notifications", P.VIEW_NOTIFICATIONS, "bell"),
    ]),
    _section("auth pages", [
        ("/sign-in", "sign in", None, "server-stack"),
    ], layout=Layout.AUTH),
)


def iter_pages(table: Iterable[Route]) -> Iterator[tuple[Route, RoutePage]]:
    for route in table:
        for page in route.pages:
            yield route, page


def find_page(table: Iterable[Route], url: str) -> tuple[Route, RoutePage] | None:
    """Locate the declared page for a full URL such as "/dashboard/billing"."""
    url = url.rstrip("/") or "/"
    for route, page in iter_pages(table):
        if route.url_for(page) == url:
            return route, page
    return None


def validate_route_table(table: Iterable[Route], known_slugs: Iterable[str]) -> None:
    """
    Check a route table against the permission catalog.

    Raises RouteTableError listing every unknown permission reference,
    duplicate page path within a section, and unknown layout.
    """
    known = frozenset(known_slugs)
    problems = []

    for index, route in enumerate(table):
        label = route.title or f"section #{index}"
        if route.layout not in LAYOUT_PREFIXES:
            problems.append(f"{label}: unknown layout {route.layout!r}")

        seen = set()
        for page in route.pages:
            if page.path in seen:
                problems.append(f"{label}: duplicate path {page.path}")
            seen.add(page.path)

            if page.required_permission is not None and page.required_permission not in known:
                problems.append(f"{label}: {page.path} requires unknown permission {page.required_permission!r}")

    if problems:
        raise RouteTableError(problems)
