"""Energy target calculation (Mifflin-St Jeor)."""

import math

from nutriai.domain.errors import ValidationError
from nutriai.domain.profile import EnergyTargets, UserProfile

ACTIVITY_MULTIPLIERS = {
    "sedentary": 1.2,
    "light": 1.375,
    "moderate": 1.55,
    "active": 1.725,
}
DEFAULT_ACTIVITY_MULTIPLIER = 1.2
GOAL_ADJUSTMENTS = {
    "deficit": -500,
    "maintain": 0,
    "surplus": 300,
}


def compute_energy_targets(profile: UserProfile) -> EnergyTargets:
    """Return TDEE and the goal-adjusted calorie target for a profile."""
    _validate_biometrics(profile)
    bmr = 10 * profile.weight + 6.25 * profile.height - 5 * profile.age
    bmr += 5 if profile.gender == "Male" else -161
    multiplier = ACTIVITY_MULTIPLIERS.get(
        profile.activity_level, DEFAULT_ACTIVITY_MULTIPLIER
    )
    tdee = round_half_up(bmr * multiplier)
    return EnergyTargets(
        tdee=tdee,
        target_calories=tdee + GOAL_ADJUSTMENTS.get(profile.goal, 0),
    )


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up."""
    return math.floor(value + 0.5)


def _validate_biometrics(profile: UserProfile) -> None:
    for name in ("weight", "height", "age"):
        value = getattr(profile, name)
        if value is None or value <= 0:
            raise ValidationError(f"incomplete biometric data: {name} must be > 0")
    for name in ("gender", "activity_level", "goal"):
        if not getattr(profile, name):
            raise ValidationError(f"incomplete biometric data: {name} is required")
