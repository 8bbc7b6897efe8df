"""User profile service."""

import logging
from dataclasses import dataclass, replace
from typing import Protocol

from nutriai.domain.errors import StorageError, ValidationError
from nutriai.domain.profile import HEALTH_FOCUSES, UserProfile
from nutriai.services.energy import compute_energy_targets

_logger = logging.getLogger(__name__)


class ProfileRepository(Protocol):
    """Persistence interface for user profiles."""

    def get_profile(self, user_id: str) -> UserProfile | None:
        """Return the stored profile, if present."""

    def save_profile(self, user_id: str, profile: UserProfile) -> None:
        """Replace the stored profile."""


@dataclass
class ProfileService:
    """Service for reading and saving profiles."""

    repository: ProfileRepository

    def get_profile(self, user_id: str) -> UserProfile:
        """Return the profile, or empty defaults when it cannot be read."""
        try:
            profile = self.repository.get_profile(user_id)
        except Exception:
            _logger.exception("Failed to load profile user_id=%s", user_id)
            return UserProfile()
        return profile or UserProfile()

    def save_profile(self, user_id: str, profile: UserProfile) -> UserProfile:
        """Recompute energy targets and persist the whole profile."""
        if profile.health_focus not in HEALTH_FOCUSES:
            raise ValidationError(f"Unknown health focus: {profile.health_focus}")
        targets = compute_energy_targets(profile)
        updated = replace(
            profile, tdee=targets.tdee, target_calories=targets.target_calories
        )
        try:
            self.repository.save_profile(user_id, updated)
        except StorageError:
            raise
        except Exception as exc:
            raise StorageError("Failed to save profile") from exc
        return updated
