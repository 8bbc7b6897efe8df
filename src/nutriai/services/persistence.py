"""Uniform persistence contract over an interchangeable storage backend."""

from dataclasses import dataclass
from typing import Protocol

from nutriai.domain.diary import MealEntry
from nutriai.domain.profile import UserProfile
from nutriai.services.accounts import AccountRepository, AccountService
from nutriai.services.diary import (
    DEFAULT_MAX_PAYLOAD_BYTES,
    DiaryRepository,
    DiaryService,
)
from nutriai.services.mood_board import MoodBoardRepository
from nutriai.services.profiles import ProfileRepository, ProfileService
from nutriai.services.sessions import SessionTokenCodec


class UserRepository(AccountRepository, ProfileRepository, Protocol):
    """Accounts and profiles live in the same user record."""


@dataclass(frozen=True)
class StorageBackend:
    """Repositories of one storage technology, chosen once at startup."""

    name: str
    users: UserRepository
    diary: DiaryRepository
    mood_board: MoodBoardRepository


@dataclass
class PersistenceFacade:
    """Single entry point for auth, profile and diary storage."""

    backend_name: str
    accounts: AccountService
    profiles: ProfileService
    diary: DiaryService

    @classmethod
    def create(
        cls,
        backend: StorageBackend,
        tokens: SessionTokenCodec,
        max_payload_bytes: int = DEFAULT_MAX_PAYLOAD_BYTES,
    ) -> "PersistenceFacade":
        """Build the facade for a storage backend."""
        return cls(
            backend_name=backend.name,
            accounts=AccountService(repository=backend.users, tokens=tokens),
            profiles=ProfileService(repository=backend.users),
            diary=DiaryService(
                repository=backend.diary, max_payload_bytes=max_payload_bytes
            ),
        )

    def register(self, email: str, password: str) -> str:
        """Create an account and return a session token."""
        return self.accounts.register(email, password)

    def login(self, email: str, password: str) -> str:
        """Return a session token for valid credentials."""
        return self.accounts.login(email, password)

    def logout(self, token: str) -> None:
        """End a session; never fails."""
        self.accounts.logout(token)

    def authenticate(self, token: str) -> str:
        """Return the user id for a session token."""
        return self.accounts.authenticate(token)

    def get_profile(self, user_id: str) -> UserProfile:
        """Return the profile or empty defaults."""
        return self.profiles.get_profile(user_id)

    def save_profile(self, user_id: str, profile: UserProfile) -> UserProfile:
        """Recompute targets, save and return the profile."""
        return self.profiles.save_profile(user_id, profile)

    def list_diary_entries(self, user_id: str) -> list[MealEntry]:
        """Return entries newest first; empty on failure."""
        return self.diary.list_entries(user_id)

    def create_diary_entry(self, user_id: str, entry: MealEntry) -> str:
        """Persist a meal and return its id."""
        return self.diary.create_entry(user_id, entry)
