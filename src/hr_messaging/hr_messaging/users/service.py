from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from ..core.exceptions import AuthenticationError
from .model import Identity
from .repository import TokenVerifier

logger = logging.getLogger(__name__)


def extract_token(auth: Any, headers: Optional[Mapping[str, str]] = None) -> Optional[str]:
    """Find the credential in a Socket.IO ``auth`` payload or a Bearer header."""

    if isinstance(auth, Mapping):
        token = auth.get("token")
        if token:
            return str(token)

    header = (headers or {}).get("Authorization") or (headers or {}).get("authorization")
    if header:
        scheme, _, value = str(header).partition(" ")
        if scheme.lower() == "bearer" and value.strip():
            return value.strip()
    return None


class AuthService:
    """Use case: authenticate a realtime connection attempt."""

    def __init__(self, verifier: TokenVerifier):
        self._verifier = verifier

    def authenticate(self, credential: Optional[str]) -> Identity:
        if not credential:
            raise AuthenticationError("Unauthorized")

        identity = self._verifier.verify(credential)
        logger.debug("Authenticated user %s as %s", identity.user_id, identity.role.value)
        return identity
