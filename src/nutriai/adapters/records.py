"""Field mapping shared by the storage adapters."""

import json
from dataclasses import asdict

from nutriai.domain.diary import Ingredient
from nutriai.domain.profile import UserProfile

PROFILE_FIELDS = {
    "nickname": "nickname",
    "gender": "gender",
    "age": "age",
    "height": "height",
    "weight": "weight",
    "activity_level": "activityLevel",
    "goal": "goal",
    "tdee": "tdee",
    "target_calories": "targetCalories",
    "health_focus": "healthFocus",
}


def profile_to_record(profile: UserProfile) -> dict[str, object]:
    """Map a profile to stored camelCase fields."""
    values = asdict(profile)
    return {stored: values[attr] for attr, stored in PROFILE_FIELDS.items()}


def profile_from_record(record: dict[str, object]) -> UserProfile:
    """Build a profile from stored fields, using defaults for blanks."""
    defaults = UserProfile()
    return UserProfile(
        nickname=str(record.get("nickname") or defaults.nickname),
        gender=str(record.get("gender") or defaults.gender),
        age=int(record.get("age") or 0),
        height=float(record.get("height") or 0),
        weight=float(record.get("weight") or 0),
        activity_level=str(record.get("activityLevel") or defaults.activity_level),
        goal=str(record.get("goal") or defaults.goal),
        tdee=int(record.get("tdee") or 0),
        target_calories=int(record.get("targetCalories") or 0),
        health_focus=str(record.get("healthFocus") or defaults.health_focus),
    )


def parse_ingredients(raw: object) -> list[Ingredient]:
    """Parse ingredients stored as JSON text or as a list."""
    raw = _load_json_list(raw)
    return [
        Ingredient(
            name=str(item.get("name", "")),
            portion=str(item.get("portion", "")),
            calories=int(item.get("calories") or 0),
            protein=float(item.get("protein") or 0),
            carbs=float(item.get("carbs") or 0),
            fat=float(item.get("fat") or 0),
        )
        for item in raw
        if isinstance(item, dict)
    ]


def parse_liked_by(raw: object) -> list[str]:
    """Parse likers stored as JSON text or as a list, dropping repeats."""
    return [str(user_id) for user_id in dict.fromkeys(_load_json_list(raw))]


def _load_json_list(raw: object) -> list[object]:
    if isinstance(raw, str):
        try:
            raw = json.loads(raw) if raw else []
        except json.JSONDecodeError:
            return []
    return raw if isinstance(raw, list) else []
