"""Supabase-backed accounts, profiles and session revocations."""

from dataclasses import dataclass
from datetime import UTC, datetime

from postgrest.exceptions import APIError
from supabase import Client

from nutriai.adapters.records import (
    PROFILE_FIELDS,
    profile_from_record,
    profile_to_record,
)
from nutriai.domain.errors import AlreadyExistsError, StorageError
from nutriai.domain.profile import UserProfile
from nutriai.services.accounts import AccountCredentials
from nutriai.services.persistence import UserRepository

UNIQUE_VIOLATION = "23505"


@dataclass
class SupabaseUserRepository(UserRepository):
    """Supabase implementation for user accounts and profiles."""

    client: Client

    def create_account(self, email: str, password_hash: str) -> str:
        """Insert a user row with an empty profile and return its id."""
        row = {"email": email, "password_hash": password_hash}
        row.update(profile_to_record(UserProfile()))
        try:
            response = self.client.table("users").insert(row).execute()
        except APIError as exc:
            if exc.code == UNIQUE_VIOLATION:
                raise AlreadyExistsError("Email already registered") from exc
            raise StorageError(f"Failed to create account: {exc.message}") from exc
        if not response.data:
            raise StorageError("Failed to create account in Supabase")
        return str(response.data[0]["id"])

    def get_credentials(self, email: str) -> AccountCredentials | None:
        """Return the stored password hash for an email."""
        response = (
            self.client.table("users")
            .select("id, email, password_hash")
            .eq("email", email)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        return AccountCredentials(
            user_id=str(row["id"]),
            email=str(row["email"]),
            password_hash=str(row["password_hash"]),
        )

    def get_profile(self, user_id: str) -> UserProfile | None:
        """Return the profile columns of a user row."""
        response = (
            self.client.table("users")
            .select(", ".join(PROFILE_FIELDS.values()))
            .eq("id", user_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return profile_from_record(response.data[0])

    def save_profile(self, user_id: str, profile: UserProfile) -> None:
        """Overwrite all profile columns of a user row."""
        response = (
            self.client.table("users")
            .update(profile_to_record(profile))
            .eq("id", user_id)
            .execute()
        )
        if not response.data:
            raise StorageError("Profile row not found")

    def revoke_session(self, token_id: str, expires_at: datetime) -> None:
        """Record a revoked session token id."""
        self.client.table("revoked_sessions").upsert(
            {
                "jti": token_id,
                "expiresAt": expires_at.isoformat(),
                "revokedAt": datetime.now(tz=UTC).isoformat(),
            }
        ).execute()

    def is_session_revoked(self, token_id: str) -> bool:
        """Return True when the token id is in the revocation table."""
        response = (
            self.client.table("revoked_sessions")
            .select("jti")
            .eq("jti", token_id)
            .limit(1)
            .execute()
        )
        return bool(response.data)

