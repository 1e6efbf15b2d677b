# Overview: Role-specific wording for navigation section titles.

from __future__ import annotations

from dataclasses import replace
from typing import Iterable

from .table import Route

ROLE_SECTION_TITLES: dict[str, dict[str, str]] = {
    "admin": {
        "doctor menu": "DOCTOR MENU",
        "staff menu": "STAFF MENU",
        "core management": "CORE MANAGEMENT",
        "content management": "CONTENT MANAGEMENT",
        "operations": "OPERATIONS",
        "reports & settings": "REPORTS & SETTINGS",
        "coming soon": "COMING SOON",
        "role & permission management": "ROLE & PERMISSION MANAGEMENT",
        "account": "ACCOUNT",
    },
    "doctor": {
        "doctor menu": "MY WORK",
        "staff menu": "RESOURCES",
        "core management": "PATIENT MANAGEMENT",
        "content management": "CONTENT",
        "operations": "OPERATIONS",
        "reports & settings": "REPORTS",
        "coming soon": "COMING SOON",
        "role & permission management": "ADMINISTRATION",
        "account": "MY ACCOUNT",
    },
    "staff": {
        "doctor menu": "MEDICAL",
        "staff menu": "MY TASKS",
        "core management": "MANAGEMENT",
        "content management": "CONTENT",
        "operations": "OPERATIONS",
        "reports & settings": "SETTINGS",
        "coming soon": "COMING SOON",
        "role & permission management": "ADMIN",
        "account": "ACCOUNT",
    },
    "patient": {
        "doctor menu": "MY HEALTH",
        "staff menu": "SERVICES",
        "core management": "APPOINTMENTS",
        "content management": "INFORMATION",
        "operations": "BILLING",
        "reports & settings": "SETTINGS",
        "coming soon": "COMING SOON",
        "role & permission management": "ADMIN",
        "account": "MY ACCOUNT",
    },
}


def section_title_for(title: str | None, role_name: str | None) -> str | None:
    """Role-specific title, falling back to the upper-cased declared title."""
    if not title:
        return title
    mapping = ROLE_SECTION_TITLES.get((role_name or "").strip().lower(), {})
    return mapping.get(title.strip().lower(), title.upper())


def localize_section_titles(routes: Iterable[Route], role_name: str | None) -> list[Route]:
    return [replace(route, title=section_title_for(route.title, role_name)) for route in routes]
