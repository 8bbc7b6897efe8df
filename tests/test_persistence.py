"""Tests for the persistence facade."""

import pytest

from nutriai.domain.diary import MealEntry
from nutriai.domain.errors import InvalidCredentialsError, StorageError
from nutriai.domain.profile import UserProfile


def test_full_user_flow(persistence) -> None:
    token = persistence.register("ann@example.com", "secret1")
    user_id = persistence.authenticate(token)

    assert persistence.get_profile(user_id) == UserProfile()

    saved = persistence.save_profile(
        user_id, UserProfile(age=30, height=175, weight=70)
    )
    assert saved.target_calories == 2056

    entry_id = persistence.create_diary_entry(
        user_id,
        MealEntry(
            id=None,
            date="2024-05-10",
            type="Dinner",
            title="Soup",
            description="",
            calories=300,
            time="19:00",
            image_url="",
        ),
    )
    assert [e.id for e in persistence.list_diary_entries(user_id)] == [entry_id]

    persistence.logout(token)
    with pytest.raises(InvalidCredentialsError):
        persistence.authenticate(token)


def test_oversized_entry_uses_configured_limit(persistence) -> None:
    persistence.diary.max_payload_bytes = 10

    with pytest.raises(StorageError):
        persistence.create_diary_entry(
            "1",
            MealEntry(
                id=None,
                date="2024-05-10",
                type="Snack",
                title="Apple",
                description="",
                calories=80,
                time="",
                image_url="",
            ),
        )
    assert persistence.list_diary_entries("1") == []


def test_backend_name(persistence) -> None:
    assert persistence.backend_name == "memory"
