"""Access token cache with an early-refresh policy."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class AccessTokenCache:
    """Holds one token until shortly before its declared expiry."""

    refresh_margin_seconds: int = 60
    clock: Callable[[], datetime] = field(default=_utc_now)
    _token: str | None = field(default=None, init=False, repr=False)
    _expires_at: datetime | None = field(default=None, init=False, repr=False)

    def get(self) -> str | None:
        """Return the cached token unless it is within the refresh margin."""
        if self._token is None or self._expires_at is None:
            return None
        refresh_at = self._expires_at - timedelta(seconds=self.refresh_margin_seconds)
        if self.clock() >= refresh_at:
            return None
        return self._token

    def set(self, token: str, expires_in_seconds: int) -> None:
        """Store a token with its lifetime in seconds."""
        self._token = token
        self._expires_at = self.clock() + timedelta(seconds=expires_in_seconds)

    def clear(self) -> None:
        """Forget the cached token."""
        self._token = None
        self._expires_at = None
