"""Firestore-backed accounts, profiles and session revocations."""

from dataclasses import dataclass
from datetime import UTC, datetime

from google.api_core import exceptions as gcp_exceptions
from google.cloud import firestore

from nutriai.adapters.records import profile_from_record, profile_to_record
from nutriai.domain.errors import AlreadyExistsError, StorageError
from nutriai.domain.profile import UserProfile
from nutriai.services.accounts import AccountCredentials
from nutriai.services.persistence import UserRepository


@dataclass
class FirestoreUserRepository(UserRepository):
    """Firestore implementation for user accounts and profiles.

    Profiles live in `users/{user_id}`; `accounts/{email}` maps an email to
    its user id and password hash so that email uniqueness is enforced by
    document creation.
    """

    client: firestore.Client

    def create_account(self, email: str, password_hash: str) -> str:
        """Reserve the email and write the empty profile in one batch."""
        user_ref = self.client.collection("users").document()
        document = profile_to_record(UserProfile())
        document.update({"email": email, "createdAt": firestore.SERVER_TIMESTAMP})
        batch = self.client.batch()
        batch.create(
            self.client.collection("accounts").document(email),
            {"userId": user_ref.id, "passwordHash": password_hash},
        )
        batch.set(user_ref, document)
        try:
            batch.commit()
        except gcp_exceptions.AlreadyExists as exc:
            raise AlreadyExistsError("Email already registered") from exc
        except gcp_exceptions.GoogleAPICallError as exc:
            raise StorageError(f"Failed to create account: {exc.message}") from exc
        return user_ref.id

    def get_credentials(self, email: str) -> AccountCredentials | None:
        """Return the stored password hash for an email."""
        snapshot = self.client.collection("accounts").document(email).get()
        if not snapshot.exists:
            return None
        data = snapshot.to_dict() or {}
        return AccountCredentials(
            user_id=str(data["userId"]),
            email=email,
            password_hash=str(data["passwordHash"]),
        )

    def get_profile(self, user_id: str) -> UserProfile | None:
        """Return the profile stored on the user document."""
        snapshot = self.client.collection("users").document(user_id).get()
        if not snapshot.exists:
            return None
        return profile_from_record(snapshot.to_dict() or {})

    def save_profile(self, user_id: str, profile: UserProfile) -> None:
        """Merge all profile fields into the user document."""
        self.client.collection("users").document(user_id).set(
            profile_to_record(profile), merge=True
        )

    def revoke_session(self, token_id: str, expires_at: datetime) -> None:
        """Record a revoked session token id."""
        self.client.collection("revoked_sessions").document(token_id).set(
            {"expiresAt": expires_at, "revokedAt": datetime.now(tz=UTC)}
        )

    def is_session_revoked(self, token_id: str) -> bool:
        """Return True when a revocation document exists."""
        snapshot = self.client.collection("revoked_sessions").document(token_id).get()
        return snapshot.exists
