# Overview: Operator-side sign-in state built on the admin API client.

"""
AuthProvider owns the operator's IdentityContext.

Login, refresh and logout never patch the current identity: each builds a
new Identity (or ANONYMOUS) and hands it to IdentityContext.set_identity.
While a call is in flight the context carries loading=True, so the route
filter renders nothing rather than a stale menu.

Patients are refused here as well as on the server: a login or refresh that
resolves to the patient role signs the session out again.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from ..errors import AccessRestrictedError, TransientNetworkError
from ..identity import ACCESS_RESTRICTED_MESSAGE, Identity, IdentityContext
from .http import AdminApiClient, ApiAuthError

logger = logging.getLogger(__name__)


class AuthProvider:
    def __init__(self, api: AdminApiClient, context: Optional[IdentityContext] = None):
        self.api = api
        self.context = context or IdentityContext()
        self.redirect_to: Optional[str] = None

    @property
    def identity(self) -> Identity:
        return self.context.identity

    async def login(self, email: str, password: str) -> str:
        """
        Sign in and publish the new identity.

        Returns the landing URL chosen by the server. Raises
        AccessRestrictedError for patients, ApiAuthError for bad credentials
        and TransientNetworkError when the server is unreachable. On any
        failure the context is left signed out.
        """
        self.context.mark_loading()
        try:
            data = await self.api.login(email, password)
        except ApiAuthError as e:
            self.context.clear()
            if e.status_code == 403:
                raise AccessRestrictedError(str(e)) from e
            raise
        except Exception:
            self.context.clear()
            raise

        identity = Identity.from_payload(data.get("user") or {}, data.get("permissions") or ())
        if identity.is_patient:
            await self._sign_out()
            raise AccessRestrictedError(ACCESS_RESTRICTED_MESSAGE)

        self.context.set_identity(identity)
        self.redirect_to = data.get("redirect_to")
        logger.info("Signed in as %s (%s)", identity.email, identity.role_name)
        return self.redirect_to

    async def logout(self) -> None:
        await self._sign_out()
        logger.info("Signed out")

    async def refresh(self) -> Identity:
        """
        Re-read the identity from the server.

        An expired session signs out. A network failure keeps the previous
        identity and re-raises.
        """
        if not self.api.token:
            self.context.clear()
            return self.identity

        previous = self.identity
        self.context.mark_loading()
        try:
            data = await self.api.me()
        except ApiAuthError:
            self.api.token = None
            self.context.clear()
            return self.identity
        except TransientNetworkError:
            self.context.set_identity(previous)
            raise

        identity = Identity.from_payload(data.get("user") or {}, data.get("permissions") or ())
        if identity.is_patient:
            await self._sign_out()
            return self.identity

        self.context.set_identity(identity)
        return identity

    async def _sign_out(self) -> None:
        try:
            await self.api.logout()
        except (ApiAuthError, TransientNetworkError) as e:
            # Token is dropped locally either way.
            logger.warning("Logout call failed: %s", e)
        finally:
            self.context.clear()

    def has_permission(self, slug: str) -> bool:
        return self.identity.has_permission(slug)

    def has_any_permission(self, slugs: Iterable[str]) -> bool:
        return self.identity.has_any_permission(slugs)

    def has_all_permissions(self, slugs: Iterable[str]) -> bool:
        return self.identity.has_all_permissions(slugs)
