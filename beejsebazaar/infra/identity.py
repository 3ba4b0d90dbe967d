from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from ..domain.errors import UpstreamError
from ..observability.logging_utils import log_event
from ..schemas import CurrentUser
from .config import AppConfig


class IdentityClient:
    """
    Read-only view of the hosted identity provider (Clerk backend API).

    Sign-in and sign-up screens are hosted by the provider; the service only
    needs to know whether a session is active and the user's first name.
    """

    def __init__(self, config: AppConfig, *, transport: Optional[httpx.BaseTransport] = None):
        self._config = config
        self._transport = transport

    def _request(self, method: str, path: str) -> Optional[Dict[str, Any]]:
        secret = self._config.require("clerk_secret_key")
        url = f"{self._config.clerk_api_url.rstrip('/')}/{path.lstrip('/')}"
        headers = {"Authorization": f"Bearer {secret}", "Accept": "application/json"}
        try:
            with httpx.Client(
                timeout=self._config.http_timeout_seconds,
                trust_env=False,
                transport=self._transport,
            ) as client:
                response = client.request(method, url, headers=headers)
        except httpx.HTTPError as exc:
            raise UpstreamError(f"Identity provider unreachable: {exc}") from exc
        if response.status_code == 404:
            return None
        if response.status_code in (401, 403):
            raise UpstreamError("Invalid identity provider key.", upstream_status=response.status_code)
        if response.is_error:
            raise UpstreamError(
                f"Identity provider error (Status {response.status_code})",
                upstream_status=response.status_code,
            )
        payload = response.json()
        return payload if isinstance(payload, dict) else None

    def current_user(self, session_id: Optional[str]) -> Optional[CurrentUser]:
        if not session_id:
            return None
        session = self._request("GET", f"sessions/{session_id}")
        if not session or session.get("status") != "active" or not session.get("user_id"):
            log_event("identity.session_inactive", status=(session or {}).get("status"))
            return None
        user = self._request("GET", f"users/{session['user_id']}") or {}
        return CurrentUser(user_id=session["user_id"], first_name=user.get("first_name"))

    def sign_out(self, session_id: str) -> bool:
        revoked = self._request("POST", f"sessions/{session_id}/revoke")
        log_event("identity.sign_out", revoked=revoked is not None)
        return revoked is not None
