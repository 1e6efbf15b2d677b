"""
Async admin API client tests, served by httpx.MockTransport.
"""

import asyncio
import json

import httpx
import pytest

from navguard.client import AdminApiClient, AuthProvider
from navguard.client.http import ApiAuthError
from navguard.errors import (
    AccessRestrictedError,
    ConflictError,
    NotFoundError,
    TransientNetworkError,
    ValidationError,
)
from navguard.identity import ANONYMOUS

LOGIN_BODY = {
    "token": "tok-123",
    "user": {"id": 4, "name": "Rey", "email": "rey@hms.test", "role": {"name": "receptionist"}},
    "permissions": ["view-appointments"],
    "redirect_to": "/dashboard/appointments",
}


def run(coro):
    return asyncio.run(coro)


def make_client(handler):
    return AdminApiClient("http://hms.test/", transport=httpx.MockTransport(handler))


class TestRequests:
    def test_bearer_token_and_payload(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"role": {"id": 2, "name": "doctor", "permissions": []}})

        async def scenario():
            client = make_client(handler)
            client.token = "tok-123"
            role = await client.assign_permissions(2, {5, 1, 3})
            await client.aclose()
            return role

        role = run(scenario())

        assert role["name"] == "doctor"
        request = seen[0]
        assert request.url.path == "/api/roles/2/assign-permissions"
        assert request.headers["Authorization"] == "Bearer tok-123"
        assert json.loads(request.content) == {"permissions": [1, 3, 5]}

    def test_list_permissions_fetches_everything(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"permissions": [], "count": 0})

        run(make_client(handler).list_permissions(module="Billing"))

        params = seen[0].url.params
        assert params["per_page"] == "1000"
        assert params["module"] == "Billing"

    def test_navigation_returns_routes(self):
        routes = [{"title": None, "layout": "dashboard", "pages": []}]
        client = make_client(lambda request: httpx.Response(200, json={"routes": routes}))
        assert run(client.navigation()) == routes

    def test_login_stores_token(self):
        client = make_client(lambda request: httpx.Response(200, json=LOGIN_BODY))
        run(client.login("rey@hms.test", "pw"))
        assert client.token == "tok-123"


class TestErrorTranslation:
    @pytest.mark.parametrize("status,error", [
        (400, ValidationError),
        (404, NotFoundError),
        (409, ConflictError),
        (500, TransientNetworkError),
        (503, TransientNetworkError),
    ])
    def test_status_mapping(self, status, error):
        client = make_client(lambda request: httpx.Response(status, json={"error": "boom"}))
        with pytest.raises(error):
            run(client.list_roles())

    def test_server_message_is_kept(self):
        client = make_client(lambda request: httpx.Response(409, json={"error": "Role 'doctor' already exists"}))
        with pytest.raises(ConflictError, match="already exists"):
            run(client.create_role("Doctor"))

    def test_auth_errors_carry_status(self):
        client = make_client(lambda request: httpx.Response(403, json={"error": "Permission denied"}))
        with pytest.raises(ApiAuthError) as exc_info:
            run(client.list_roles())
        assert exc_info.value.status_code == 403

    def test_transport_failure(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(TransientNetworkError):
            run(make_client(handler).list_permissions())

    def test_redirect_loop_is_transient(self):
        def handler(request):
            raise httpx.TooManyRedirects("Exceeded maximum allowed redirects.", request=request)

        with pytest.raises(TransientNetworkError):
            run(make_client(handler).list_roles())

    def test_non_json_success_body(self):
        client = make_client(lambda request: httpx.Response(200, text="<html>ok</html>"))
        with pytest.raises(TransientNetworkError, match="not JSON"):
            run(client.assign_permissions(2, [1]))

    def test_success_body_missing_key(self):
        client = make_client(lambda request: httpx.Response(200, json={"ok": True}))
        with pytest.raises(TransientNetworkError, match="missing 'role'"):
            run(client.assign_permissions(2, [1]))


class TestAuthProvider:
    def test_login_publishes_identity(self):
        provider = AuthProvider(make_client(lambda request: httpx.Response(200, json=LOGIN_BODY)))

        redirect_to = run(provider.login("rey@hms.test", "pw"))

        assert redirect_to == "/dashboard/appointments"
        assert provider.identity.is_authenticated
        assert not provider.identity.loading
        assert provider.has_permission("view-appointments")
        assert provider.has_any_permission(["view-bills", "view-appointments"])
        assert not provider.has_all_permissions(["view-bills", "view-appointments"])

    def test_bad_credentials_leave_context_signed_out(self):
        provider = AuthProvider(make_client(lambda request: httpx.Response(401, json={"error": "Invalid credentials"})))

        with pytest.raises(ApiAuthError):
            run(provider.login("rey@hms.test", "bad"))

        assert provider.identity is ANONYMOUS

    def test_server_refusal_of_patient(self):
        provider = AuthProvider(make_client(lambda request: httpx.Response(403, json={"error": "Access Restricted"})))

        with pytest.raises(AccessRestrictedError):
            run(provider.login("pat@hms.test", "pw"))

        assert provider.identity is ANONYMOUS

    def test_patient_payload_is_signed_out(self):
        calls = []
        body = dict(LOGIN_BODY, user={"id": 8, "email": "pat@hms.test", "role": {"name": "Patient"}})

        def handler(request):
            calls.append(request.url.path)
            return httpx.Response(200, json=body if request.url.path == "/api/auth/login" else {})

        provider = AuthProvider(make_client(handler))

        with pytest.raises(AccessRestrictedError):
            run(provider.login("pat@hms.test", "pw"))

        assert calls == ["/api/auth/login", "/api/auth/logout"]
        assert provider.identity is ANONYMOUS
        assert provider.api.token is None

    def test_refresh_with_expired_token_signs_out(self):
        client = make_client(lambda request: httpx.Response(401, json={"error": "Invalid or expired token"}))
        client.token = "stale"
        provider = AuthProvider(client)

        identity = run(provider.refresh())

        assert identity is ANONYMOUS
        assert client.token is None

    def test_refresh_network_failure_keeps_identity(self):
        responses = iter([
            httpx.Response(200, json=LOGIN_BODY),
            httpx.Response(502),
        ])
        provider = AuthProvider(make_client(lambda request: next(responses)))
        run(provider.login("rey@hms.test", "pw"))
        before = provider.identity

        with pytest.raises(TransientNetworkError):
            run(provider.refresh())

        assert provider.identity is before

    def test_refresh_picks_up_new_permissions(self):
        responses = iter([
            httpx.Response(200, json=LOGIN_BODY),
            httpx.Response(200, json={"user": LOGIN_BODY["user"], "permissions": ["view-bills"]}),
        ])
        provider = AuthProvider(make_client(lambda request: next(responses)))
        run(provider.login("rey@hms.test", "pw"))

        run(provider.refresh())

        assert provider.identity.permission_slugs == frozenset({"view-bills"})

    def test_logout(self):
        provider = AuthProvider(make_client(lambda request: httpx.Response(200, json=LOGIN_BODY)))
        run(provider.login("rey@hms.test", "pw"))

        run(provider.logout())

        assert provider.identity is ANONYMOUS
        assert provider.api.token is None
