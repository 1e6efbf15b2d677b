# Overview: httpx.AsyncClient wrapper for the navguard admin API.

"""
Async HTTP client for the admin API.

Every call returns the decoded JSON body. Failures are translated into the
navguard exception taxonomy:
- request errors and 5xx        -> TransientNetworkError (no automatic retry)
- 2xx without the expected JSON -> TransientNetworkError
- 400                           -> ValidationError
- 401 / 403                     -> ApiAuthError carrying the status code
- 404                           -> NotFoundError
- 409                           -> ConflictError
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional, Protocol

import httpx

from ..errors import (
    ConflictError,
    NavguardError,
    NotFoundError,
    TransientNetworkError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# The editor always wants the whole catalog in one page.
FETCH_ALL_PER_PAGE = 1000


class RolesApi(Protocol):
    async def list_roles(self) -> List[Dict[str, Any]]: ...

    async def assign_permissions(self, role_id: int, permission_ids: Iterable[int]) -> Dict[str, Any]: ...


class PermissionsApi(Protocol):
    async def list_permissions(self, module: Optional[str] = None) -> List[Dict[str, Any]]: ...


class ApiAuthError(NavguardError):
    """401/403 from the server. status_code tells which."""

    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.status_code = status_code


_STATUS_ERRORS = {
    400: ValidationError,
    404: NotFoundError,
    409: ConflictError,
}


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict):
        return body.get("message") or body.get("error") or response.reason_phrase
    return response.reason_phrase


def _field(body: Any, key: str) -> Any:
    if not isinstance(body, dict) or key not in body:
        raise TransientNetworkError(f"response is missing '{key}'")
    return body[key]


class AdminApiClient:
    """
    Thin async wrapper around the admin API with bearer-token handling.

    Pass `transport` to route requests somewhere other than the network
    (httpx.MockTransport in tests, httpx.ASGITransport/WSGI bridges locally).
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.client = httpx.AsyncClient(base_url=self.base_url, timeout=timeout, transport=transport)
        self.token: Optional[str] = None

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        try:
            response = await self.client.request(method, path, headers=self._headers(), **kwargs)
        except httpx.RequestError as e:
            logger.warning("%s %s failed: %s", method, path, e)
            raise TransientNetworkError(f"{method} {path} failed: {e}") from e

        if response.status_code >= 500:
            logger.warning("%s %s returned %s", method, path, response.status_code)
            raise TransientNetworkError(f"{method} {path} returned {response.status_code}")

        if response.status_code >= 400:
            message = _error_message(response)
            logger.info("%s %s rejected (%s): %s", method, path, response.status_code, message)
            if response.status_code in (401, 403):
                raise ApiAuthError(message, response.status_code)
            raise _STATUS_ERRORS.get(response.status_code, NavguardError)(message)

        try:
            return response.json()
        except ValueError as e:
            logger.warning("%s %s returned a body that is not JSON", method, path)
            raise TransientNetworkError(f"{method} {path} returned a body that is not JSON") from e

    async def get(self, path: str, params: Optional[Dict] = None) -> Dict[str, Any]:
        return await self._request("GET", path, params=params)

    async def post(self, path: str, json: Optional[Dict] = None) -> Dict[str, Any]:
        return await self._request("POST", path, json=json)

    async def put(self, path: str, json: Optional[Dict] = None) -> Dict[str, Any]:
        return await self._request("PUT", path, json=json)

    async def delete(self, path: str) -> Dict[str, Any]:
        return await self._request("DELETE", path)

    # Auth

    async def login(self, email: str, password: str) -> Dict[str, Any]:
        """Authenticate and store the session token. Returns the login body."""
        data = await self.post("/api/auth/login", json={"email": email, "password": password})
        self.token = data.get("token")
        return data

    async def logout(self) -> None:
        if not self.token:
            return
        try:
            await self.post("/api/auth/logout")
        finally:
            self.token = None

    async def me(self) -> Dict[str, Any]:
        return await self.get("/api/auth/me")

    async def navigation(self) -> List[Dict[str, Any]]:
        return _field(await self.get("/api/navigation"), "routes")

    # Roles

    async def list_roles(self) -> List[Dict[str, Any]]:
        return _field(await self.get("/api/roles"), "roles")

    async def get_role(self, role_id: int) -> Dict[str, Any]:
        return _field(await self.get(f"/api/roles/{role_id}"), "role")

    async def create_role(
        self,
        name: str,
        description: Optional[str] = None,
        permission_ids: Optional[Iterable[int]] = None,
    ) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"name": name, "description": description}
        if permission_ids is not None:
            payload["permissions"] = list(permission_ids)
        return _field(await self.post("/api/roles", json=payload), "role")

    async def delete_role(self, role_id: int) -> None:
        await self.delete(f"/api/roles/{role_id}")

    async def assign_permissions(self, role_id: int, permission_ids: Iterable[int]) -> Dict[str, Any]:
        """Replace the role's permission set with exactly `permission_ids`."""
        body = await self.post(
            f"/api/roles/{role_id}/assign-permissions",
            json={"permissions": sorted(permission_ids)},
        )
        return _field(body, "role")

    async def list_role_users(self, role_id: int) -> List[Dict[str, Any]]:
        return _field(await self.get(f"/api/roles/{role_id}/users"), "users")

    # Permissions

    async def list_permissions(self, module: Optional[str] = None) -> List[Dict[str, Any]]:
        params: Dict[str, Any] = {"page": 1, "per_page": FETCH_ALL_PER_PAGE}
        if module:
            params["module"] = module
        return _field(await self.get("/api/permissions", params=params), "permissions")

    async def list_modules(self) -> List[str]:
        return _field(await self.get("/api/permissions/modules"), "modules")

    # Users

    async def assign_role(self, user_id: int, role_id: int) -> Dict[str, Any]:
        return _field(await self.post(f"/api/users/{user_id}/assign-role", json={"role_id": role_id}), "user")

    async def user_permissions(self, user_id: int) -> List[str]:
        return _field(await self.get(f"/api/users/{user_id}/permissions"), "permissions")

    async def aclose(self) -> None:
        await self.client.aclose()

    async def __aenter__(self) -> "AdminApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
