from __future__ import annotations

from dataclasses import dataclass

from ..models import Credentials, Identity, LoginResponse
from .base import BaseClient, parse_object


@dataclass
class AuthClient(BaseClient):
    module: str = "auth"

    async def signin(self, username: str, password: str) -> LoginResponse:
        payload = Credentials(username=username, password=password).to_payload()
        data = await self._request(
            "POST",
            "/auth/signin",
            operation="signin",
            json_body=payload,
            meta={"skip_auth_policy": True, "anonymous": True},
        )
        return parse_object("/auth/signin", LoginResponse, data)

    async def me(self, *, own_failures: bool = False, token: str | None = None) -> Identity:
        """Fetch the caller's profile.

        ``own_failures`` keeps a 401/403 out of the global invalidation policy, for
        callers (login, startup revalidation) that handle the failure themselves.
        ``token`` overrides the session token for a candidate not yet accepted.
        """
        meta: dict[str, object] = {"skip_auth_policy": own_failures}
        if token is not None:
            meta["token"] = token
        data = await self._request("GET", "/auth/me", operation="me", meta=meta)
        return parse_object("/auth/me", Identity, data)
