# Overview: Navigation package: route declarations, filtering, landing resolution.

from .table import (
    Layout,
    LAYOUT_PREFIXES,
    Route,
    RoutePage,
    ROUTES,
    find_page,
    iter_pages,
    validate_route_table,
)
from .filtering import can_access, filter_routes, has_page_permission
from .landing import (
    ACCESS_DENIED_MESSAGE,
    NavigationDecision,
    guard_page,
    landing_url,
    resolve_landing_page,
    resolve_navigation,
)
from .titles import localize_section_titles, section_title_for

__all__ = [
    "Layout",
    "LAYOUT_PREFIXES",
    "Route",
    "RoutePage",
    "ROUTES",
    "find_page",
    "iter_pages",
    "validate_route_table",
    "can_access",
    "filter_routes",
    "has_page_permission",
    "ACCESS_DENIED_MESSAGE",
    "NavigationDecision",
    "guard_page",
    "landing_url",
    "resolve_landing_page",
    "resolve_navigation",
    "localize_section_titles",
    "section_title_for",
]
