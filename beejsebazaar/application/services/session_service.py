from __future__ import annotations

from typing import Optional

from ...infra.config import AppConfig
from ...infra.identity import IdentityClient
from ...schemas import SessionStatus


class SessionService:
    """Pages only branch on "signed in?" and greet by first name."""

    def __init__(self, config: AppConfig, *, identity: Optional[IdentityClient] = None):
        self._config = config
        self._identity = identity or IdentityClient(config)

    def whoami(self, session_id: Optional[str]) -> SessionStatus:
        user = self._identity.current_user(session_id)
        if user is None:
            return SessionStatus(signed_in=False)
        return SessionStatus(signed_in=True, first_name=user.first_name)

    def sign_out(self, session_id: str) -> SessionStatus:
        self._identity.sign_out(session_id)
        return SessionStatus(signed_in=False)
