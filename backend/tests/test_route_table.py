"""
Route declaration table tests.

Verifies:
- The shipped table only references catalog slugs
- Broken declarations are reported at build time, not at render time
"""

import pytest

from navguard import create_app
from navguard import config
from navguard.errors import RouteTableError
from navguard.navigation import ROUTES, Layout, Route, RoutePage, find_page, validate_route_table
from navguard.permissions import PermissionSlug, get_all_permission_slugs


class TestShippedTable:
    def test_every_permission_is_in_catalog(self):
        validate_route_table(ROUTES, get_all_permission_slugs())

    def test_every_slug_is_an_enum_value(self):
        values = {member.value for member in PermissionSlug}
        for route in ROUTES:
            for page in route.pages:
                assert page.required_permission is None or page.required_permission in values

    def test_last_section_is_pre_auth(self):
        assert ROUTES[-1].layout == Layout.AUTH
        assert ROUTES[-1].is_pre_auth

    def test_find_page_uses_layout_prefix(self):
        route, page = find_page(ROUTES, "/dashboard/role-permissions")
        assert page.required_permission == "manage-roles"
        assert route.url_for(page) == "/dashboard/role-permissions"
        assert find_page(ROUTES, "/role-permissions") is None

    def test_to_dict_carries_url(self):
        data = ROUTES[-1].to_dict()
        assert data["layout"] == "auth"
        assert data["pages"][0]["url"] == "/auth/sign-in"


class TestValidation:
    def test_unknown_slug_is_reported(self):
        table = (Route(layout=Layout.DASHBOARD, title="x", pages=(RoutePage("/a", "a", "view-everything"),)),)

        with pytest.raises(RouteTableError) as exc_info:
            validate_route_table(table, get_all_permission_slugs())

        assert exc_info.value.problems == ["x: /a requires unknown permission 'view-everything'"]

    def test_duplicate_path_within_section(self):
        table = (Route(layout=Layout.DASHBOARD, title="x", pages=(RoutePage("/a", "a"), RoutePage("/a", "again"))),)

        with pytest.raises(RouteTableError, match="duplicate path /a"):
            validate_route_table(table, [])

    def test_unknown_layout(self):
        table = (Route(layout="kiosk", pages=(RoutePage("/a", "a"),)),)

        with pytest.raises(RouteTableError, match="unknown layout 'kiosk'"):
            validate_route_table(table, [])

    def test_all_problems_are_collected(self):
        table = (
            Route(layout="kiosk", title="one", pages=(RoutePage("/a", "a", "nope"),)),
            Route(layout=Layout.DASHBOARD, title="two", pages=(RoutePage("/b", "b"), RoutePage("/b", "b"))),
        )

        with pytest.raises(RouteTableError) as exc_info:
            validate_route_table(table, [])

        assert len(exc_info.value.problems) == 3

    def test_create_app_rejects_broken_table(self):
        class BrokenTable(config.TestConfig):
            ROUTE_TABLE = (Route(layout=Layout.DASHBOARD, pages=(RoutePage("/a", "a", "view-everything"),)),)

        with pytest.raises(RouteTableError):
            create_app(BrokenTable)
