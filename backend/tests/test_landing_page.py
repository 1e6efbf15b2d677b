"""
Landing page and shell routing tests.

Verifies:
- Empty permission sets have no landing page (caller default applies)
- First qualifying page wins, in declared order
- Signed-in identities are sent away from the auth screens
- Every declared page is guarded, hidden or not
"""

from navguard.identity import ANONYMOUS, RESOLVING, Identity
from navguard.navigation import (
    ACCESS_DENIED_MESSAGE,
    ROUTES,
    Layout,
    Route,
    RoutePage,
    guard_page,
    landing_url,
    resolve_landing_page,
    resolve_navigation,
)


def make_identity(*slugs, role_name="staff"):
    return Identity.authenticated(
        id=7,
        name="Sam",
        email="sam@hms.test",
        role_name=role_name,
        permission_slugs=slugs,
    )


PATIENTS_FIRST = (
    Route(layout=Layout.AUTH, pages=(RoutePage("/sign-in", "sign in"),)),
    Route(
        layout=Layout.DASHBOARD,
        title="clinic",
        pages=(
            RoutePage("/patients", "patients", "view-patients"),
            RoutePage("/appointments", "appointments", "view-appointments"),
        ),
    ),
)

RECEPTION_TABLE = (
    Route(
        layout=Layout.DASHBOARD,
        pages=(
            RoutePage("/home", "home"),
            RoutePage("/appointments", "appointments", "view-appointments"),
            RoutePage("/billing", "billing", "manage-billing"),
        ),
    ),
)


# =============================================================================
# LANDING PAGE RESOLVER
# =============================================================================


class TestResolveLandingPage:
    def test_empty_permissions_have_no_landing_page(self):
        assert resolve_landing_page(ROUTES, []) is None
        assert resolve_landing_page(ROUTES, None) is None

    def test_first_page_of_first_authenticated_section(self):
        assert resolve_landing_page(PATIENTS_FIRST, ["view-patients"]) == "/patients"

    def test_later_page_when_first_is_not_held(self):
        assert resolve_landing_page(PATIENTS_FIRST, ["view-appointments"]) == "/appointments"

    def test_permission_free_page_ranks_by_position(self):
        assert resolve_landing_page(RECEPTION_TABLE, ["view-appointments"]) == "/home"

    def test_pre_auth_sections_are_skipped(self):
        auth_only = (Route(layout=Layout.AUTH, pages=(RoutePage("/sign-in", "sign in"),)),)
        assert resolve_landing_page(auth_only, ["view-patients"]) is None

    def test_nothing_qualifies(self):
        assert resolve_landing_page(PATIENTS_FIRST, ["view-bills"]) is None

    def test_declared_table(self):
        assert resolve_landing_page(ROUTES, ["view-dashboard", "view-bills"]) == "/home"
        assert resolve_landing_page(ROUTES, ["view-bills"]) == "/bills"
        assert resolve_landing_page(ROUTES, ["view-roles"]) == "/roles"

    def test_unknown_slug_lands_on_first_permission_free_page(self):
        assert resolve_landing_page(ROUTES, ["not-a-permission"]) == "/profile"


class TestLandingUrl:
    def test_default_for_empty_permissions(self):
        assert landing_url(ROUTES, []) == "/dashboard/home"

    def test_layout_prefix_is_applied(self):
        assert landing_url(ROUTES, ["view-appointments"]) == "/dashboard/appointments"

    def test_custom_default_when_nothing_qualifies(self):
        assert landing_url(PATIENTS_FIRST, ["view-bills"], default="/dashboard/welcome") == "/dashboard/welcome"


# =============================================================================
# SHELL ROUTING
# =============================================================================


class TestResolveNavigation:
    def test_loading_identity_waits(self):
        decision = resolve_navigation("/dashboard/home", RESOLVING, ROUTES)
        assert decision.action == "loading"

    def test_signed_in_identity_is_sent_to_landing_page(self):
        identity = make_identity("view-bills")

        decision = resolve_navigation("/auth/sign-in", identity, ROUTES)

        assert decision.action == "redirect"
        assert decision.target == "/dashboard/bills"

    def test_signed_in_identity_without_permissions_gets_default(self):
        decision = resolve_navigation("/auth", make_identity(), ROUTES)
        assert decision.action == "redirect"
        assert decision.target == "/dashboard/home"

    def test_anonymous_can_open_sign_in(self):
        decision = resolve_navigation("/auth/sign-in", ANONYMOUS, ROUTES)
        assert decision.action == "render"
        assert decision.page.path == "/sign-in"

    def test_anonymous_undeclared_auth_path_goes_to_sign_in(self):
        decision = resolve_navigation("/auth/sign-up", ANONYMOUS, ROUTES)
        assert decision.action == "redirect"
        assert decision.target == "/auth/sign-in"

    def test_anonymous_dashboard_request_goes_to_sign_in(self):
        decision = resolve_navigation("/dashboard/home", ANONYMOUS, ROUTES, sign_in_path="/auth/login")
        assert decision.action == "redirect"
        assert decision.target == "/auth/login"

    def test_held_page_renders(self):
        decision = resolve_navigation("/dashboard/bills", make_identity("view-bills"), ROUTES)
        assert decision.action == "render"
        assert decision.page.required_permission == "view-bills"

    def test_unheld_page_is_access_denied_not_redirect(self):
        decision = resolve_navigation("/dashboard/billing", make_identity("view-bills"), ROUTES)
        assert decision.action == "access-denied"
        assert decision.target is None
        assert decision.message == ACCESS_DENIED_MESSAGE

    def test_undeclared_dashboard_path(self):
        decision = resolve_navigation("/dashboard/nowhere", make_identity("view-bills"), ROUTES)
        assert decision.action == "not-found"

    def test_trailing_slash_is_ignored(self):
        decision = resolve_navigation("/dashboard/bills/", make_identity("view-bills"), ROUTES)
        assert decision.action == "render"


class TestGuardPage:
    def test_hidden_page_typed_directly_is_denied(self):
        identity = make_identity("view-appointments")
        decision = guard_page("/dashboard/roles", identity, ROUTES)
        assert decision.action == "access-denied"

    def test_patient_denied_even_on_permission_free_page(self):
        identity = make_identity("view-dashboard", role_name="patient")
        assert guard_page("/dashboard/profile", identity, ROUTES).action == "access-denied"

    def test_decision_serializes(self):
        data = guard_page("/dashboard/profile", make_identity(), ROUTES).to_dict()
        assert data["action"] == "render"
        assert data["page"] == {"path": "/profile", "name": "profile", "permission": None, "icon": "user-circle"}
