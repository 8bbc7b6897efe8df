"""Signed session tokens."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from uuid import uuid4

import jwt

from nutriai.domain.errors import InvalidCredentialsError

_ALGORITHM = "HS256"


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass(frozen=True)
class SessionClaims:
    """Decoded session token contents."""

    user_id: str
    token_id: str
    expires_at: datetime


@dataclass
class SessionTokenCodec:
    """Issue and verify HS256 session tokens."""

    secret: str
    ttl_days: int = 30
    clock: Callable[[], datetime] = field(default=_utc_now)

    def issue(self, user_id: str) -> str:
        """Return a new signed token for the user."""
        now = self.clock()
        payload = {
            "sub": user_id,
            "jti": uuid4().hex,
            "iat": int(now.timestamp()),
            "exp": int((now + timedelta(days=self.ttl_days)).timestamp()),
        }
        return jwt.encode(payload, self.secret, algorithm=_ALGORITHM)

    def decode(self, token: str) -> SessionClaims:
        """Verify a token and return its claims."""
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[_ALGORITHM],
                options={
                    "require": ["sub", "jti", "exp"],
                    "verify_exp": False,
                    "verify_iat": False,
                },
            )
        except jwt.InvalidTokenError as exc:
            raise InvalidCredentialsError("Invalid session token") from exc
        expires_at = datetime.fromtimestamp(int(payload["exp"]), tz=UTC)
        if expires_at <= self.clock():
            raise InvalidCredentialsError("Session expired")
        return SessionClaims(
            user_id=str(payload["sub"]),
            token_id=str(payload["jti"]),
            expires_at=expires_at,
        )
