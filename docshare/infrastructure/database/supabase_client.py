from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from supabase import Client, create_client

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class UserInfo:
    id: str
    email: str | None


class SupabaseAuthAdapter:
    """Resolves a bearer token to the caller's verified identity.

    When SUPABASE_DISABLED=1 the token itself is taken as the caller's
    profile id, which is what local runs and the test suite rely on.
    Otherwise a Supabase project must be configured; without one every token
    is rejected.
    """

    def __init__(self) -> None:
        self.disabled = os.getenv("SUPABASE_DISABLED", "0") == "1"
        self.url = os.getenv("SUPABASE_URL")
        self.key = os.getenv("SUPABASE_ANON_KEY")
        self._client: Client | None = None
        if not self.disabled and self.url and self.key:
            self._client = create_client(self.url, self.key)

    def validate_token(self, token: str) -> UserInfo:
        if not token or not token.strip():
            raise ValueError("Missing access token")
        if self.disabled:
            return UserInfo(id=token.strip(), email=None)
        if not self._client:
            logger.error("Token rejected: SUPABASE_URL/SUPABASE_ANON_KEY are not set")
            raise ValueError("Authentication backend not configured")
        try:  # pragma: no cover - network path
            res = self._client.auth.get_user(token)
            user = res.user
        except Exception as exc:  # pragma: no cover - network path
            logger.warning("Token validation failed: %s", exc)
            raise ValueError(f"Invalid access token: {exc}") from exc
        if not user:  # pragma: no cover - network path
            raise ValueError("Invalid access token")
        return UserInfo(id=user.id, email=user.email)


_CLIENT_SINGLETON: Client | None = None


def get_supabase_client() -> Client | None:
    global _CLIENT_SINGLETON
    disabled = os.getenv("SUPABASE_DISABLED", "0") == "1"
    url = os.getenv("SUPABASE_URL")
    key = os.getenv("SUPABASE_ANON_KEY")
    if disabled or not url or not key:
        return None
    if _CLIENT_SINGLETON is None:
        _CLIENT_SINGLETON = create_client(url, key)
    return _CLIENT_SINGLETON
