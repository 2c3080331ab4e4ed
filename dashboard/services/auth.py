#  Agent Dashboard - Auth Service
#
#  JWT encode/decode for caller identity. Tokens are normally issued by the
#  external sign-in flow; create_access_token exists for tooling and tests.
#  The "sub" claim carries the caller's open_id.
#
#  Depends on: dashboard/config.py
#  Used by:    container.py, middleware/auth.py

import logging
from datetime import datetime, timedelta, timezone

import jwt

from dashboard.config import AUTH_ALGORITHM, AUTH_SECRET_KEY

logger = logging.getLogger("dashboard.auth")

# Optional identity claims copied into the user upsert when present
PROFILE_CLAIMS = ("name", "email", "login_method")


class AuthService:
    """Signs and verifies bearer tokens."""

    def __init__(self, secret_key: str = AUTH_SECRET_KEY, algorithm: str = AUTH_ALGORITHM):
        self._secret_key = secret_key
        self._algorithm = algorithm

    def create_access_token(
        self,
        open_id: str,
        *,
        expires_in: timedelta = timedelta(hours=1),
        **claims,
    ) -> str:
        payload = {
            "sub": open_id,
            "exp": datetime.now(timezone.utc) + expires_in,
        }
        payload.update({k: v for k, v in claims.items() if k in PROFILE_CLAIMS})
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def decode_token(self, token: str) -> dict:
        """Decode and validate a JWT. Raises jwt.PyJWTError on failure."""
        payload = jwt.decode(
            token,
            self._secret_key,
            algorithms=[self._algorithm],
            options={"require": ["sub"]},
        )
        if not isinstance(payload.get("sub"), str) or not payload["sub"]:
            raise jwt.InvalidTokenError("Token subject must be a non-empty string")
        return payload
