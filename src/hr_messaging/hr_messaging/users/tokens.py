from __future__ import annotations

from datetime import timedelta
from typing import Any, Dict

import jwt

from ..common.datetime_utils import now_utc
from ..core.enums import Role
from ..core.exceptions import AuthenticationError
from .model import Identity
from .repository import TokenVerifier


def issue_token(secret: str, *, user_id: int, role: Role, algorithm: str = "HS256", expires_in: int = 3600) -> str:
    """Mint a token the way the HR auth service does. Used by scripts and tests."""

    payload = {
        "userId": int(user_id),
        "role": Role(role).value,
        "exp": now_utc() + timedelta(seconds=expires_in),
    }
    return jwt.encode(payload, secret, algorithm=algorithm)


class JWTTokenVerifier(TokenVerifier):
    """Verify HS256 access tokens issued by the HR auth service.

    The token carries ``userId`` (or ``sub``) and ``role`` claims.
    """

    def __init__(self, secret: str, *, algorithm: str = "HS256"):
        self._secret = secret
        self._algorithm = algorithm

    def decode(self, token: str) -> Dict[str, Any]:
        try:
            return jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except jwt.PyJWTError as e:
            raise AuthenticationError("Unauthorized") from e

    def verify(self, token: str) -> Identity:
        payload = self.decode(token)

        raw_user_id = payload.get("userId", payload.get("sub"))
        try:
            user_id = int(raw_user_id)
            role = Role(str(payload.get("role", "")))
        except (TypeError, ValueError):
            raise AuthenticationError("Unauthorized")
        if user_id <= 0:
            raise AuthenticationError("Unauthorized")

        return Identity(user_id=user_id, role=role)
