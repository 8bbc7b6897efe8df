"""Account registration, login and session handling."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol

from passlib.context import CryptContext

from nutriai.domain.errors import (
    InvalidCredentialsError,
    StorageError,
    ValidationError,
)
from nutriai.services.sessions import SessionTokenCodec

MIN_PASSWORD_LENGTH = 6

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AccountCredentials:
    """Stored login data for an account."""

    user_id: str
    email: str
    password_hash: str


class AccountRepository(Protocol):
    """Persistence interface for accounts and sessions."""

    def create_account(self, email: str, password_hash: str) -> str:
        """Create an account with an empty profile and return its id.

        Raises AlreadyExistsError when the email is taken.
        """

    def get_credentials(self, email: str) -> AccountCredentials | None:
        """Return stored credentials for an email, if present."""

    def revoke_session(self, token_id: str, expires_at: datetime) -> None:
        """Mark a session token id as revoked."""

    def is_session_revoked(self, token_id: str) -> bool:
        """Return True when the session token id was revoked."""


def default_password_context() -> CryptContext:
    """Return the password hashing context."""
    return CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


@dataclass
class AccountService:
    """Application service for account lifecycle actions."""

    repository: AccountRepository
    tokens: SessionTokenCodec
    passwords: CryptContext = field(default_factory=default_password_context)

    def register(self, email: str, password: str) -> str:
        """Create an account and return a session token."""
        normalized = _normalize_email(email)
        if "@" not in normalized:
            raise ValidationError("A valid email address is required")
        if len(password or "") < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
            )
        password_hash = self.passwords.hash(password)
        user_id = self.repository.create_account(normalized, password_hash)
        _logger.info("Registered account user_id=%s", user_id)
        return self.tokens.issue(user_id)

    def login(self, email: str, password: str) -> str:
        """Verify credentials and return a session token."""
        credentials = self.repository.get_credentials(_normalize_email(email))
        if credentials is None or not self.passwords.verify(
            password or "", credentials.password_hash
        ):
            raise InvalidCredentialsError("Invalid credentials")
        return self.tokens.issue(credentials.user_id)

    def logout(self, token: str) -> None:
        """Revoke a session token; remote failures are logged, not raised."""
        try:
            claims = self.tokens.decode(token)
        except InvalidCredentialsError:
            return
        try:
            self.repository.revoke_session(claims.token_id, claims.expires_at)
        except Exception:
            _logger.warning(
                "Failed to revoke session user_id=%s", claims.user_id, exc_info=True
            )

    def authenticate(self, token: str) -> str:
        """Resolve a session token to a user id."""
        claims = self.tokens.decode(token)
        try:
            revoked = self.repository.is_session_revoked(claims.token_id)
        except Exception as exc:
            raise StorageError("Could not verify session") from exc
        if revoked:
            raise InvalidCredentialsError("Session has been revoked")
        return claims.user_id


def _normalize_email(email: str) -> str:
    return (email or "").strip().lower()
