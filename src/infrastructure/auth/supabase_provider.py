"""Supabase Auth (GoTrue) identity provider.

Only the two admin/credential calls the API needs are wrapped:

    POST /auth/v1/admin/users            create an account (service role key)
    POST /auth/v1/admin/generate_link    build a signup (email confirmation) link
    POST /auth/v1/token?grant_type=password
                                         check email + password (anon key)
"""

import logging
from typing import Any, Optional

import httpx

from core.config import settings
from core.exceptions import UpstreamAuthError
from infrastructure.auth.provider import IdentityUser

logger = logging.getLogger(__name__)


def _error_message(response: httpx.Response) -> str:
    """Pull the human readable message out of a GoTrue error body."""
    try:
        body = response.json()
    except ValueError:
        return response.text or f"Identity provider returned {response.status_code}"
    if isinstance(body, dict):
        for key in ("msg", "message", "error_description", "error"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
    return f"Identity provider returned {response.status_code}"


class SupabaseIdentityProvider:
    """Identity provider backed by the Supabase Auth REST API."""

    def __init__(
        self,
        base_url: str = settings.supabase_url,
        service_role_key: str = settings.supabase_service_role_key,
        anon_key: str = settings.supabase_anon_key,
        timeout: float = settings.identity_timeout_seconds,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._service_role_key = service_role_key
        self._anon_key = anon_key
        self._timeout = timeout
        self._transport = transport

    async def create_user(self, email: str, password: str) -> IdentityUser:
        """Create an account, then request a verification link for it."""
        body = await self._post(
            "/auth/v1/admin/users",
            {"email": email, "password": password},
            key=self._service_role_key,
        )
        user = self._to_user(body)

        try:
            link_body = await self._post(
                "/auth/v1/admin/generate_link",
                {"type": "signup", "email": email, "password": password},
                key=self._service_role_key,
            )
        except UpstreamAuthError as e:
            # The account exists at this point; a missing link is not fatal
            logger.warning("Verification link generation failed for %s: %s", user.uid, e.message)
            return user

        properties = link_body.get("properties") or {}
        user.verification_link = link_body.get("action_link") or properties.get("action_link")
        return user

    async def sign_in(self, email: str, password: str) -> IdentityUser:
        """Exchange email and password for the account record."""
        body = await self._post(
            "/auth/v1/token",
            {"email": email, "password": password},
            key=self._anon_key or self._service_role_key,
            params={"grant_type": "password"},
        )
        return self._to_user(body.get("user") or {})

    async def _post(
        self,
        path: str,
        payload: dict[str, Any],
        key: str,
        params: Optional[dict[str, str]] = None,
    ) -> dict[str, Any]:
        if not self._base_url:
            raise UpstreamAuthError("Identity provider is not configured", status_code=503)

        headers = {"apikey": key, "Authorization": f"Bearer {key}"}
        try:
            async with httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                response = await client.post(path, json=payload, headers=headers, params=params)
        except httpx.HTTPError as e:
            logger.exception("Identity provider request to %s failed", path)
            raise UpstreamAuthError(f"Identity provider unreachable: {e}", status_code=502) from e

        if response.is_error:
            message = _error_message(response)
            logger.info("Identity provider rejected %s: %s", path, message)
            status_code = 502 if response.status_code >= 500 else 400
            raise UpstreamAuthError(message, status_code=status_code)

        body = response.json()
        return body if isinstance(body, dict) else {}

    @staticmethod
    def _to_user(body: dict[str, Any]) -> IdentityUser:
        uid = body.get("id")
        if not uid:
            raise UpstreamAuthError("Identity provider returned no user id", status_code=502)
        return IdentityUser(uid=str(uid), email=str(body.get("email") or ""))
