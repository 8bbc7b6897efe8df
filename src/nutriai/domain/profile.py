"""Domain models for user profiles."""

from dataclasses import dataclass

GENDERS = ("Male", "Female")
ACTIVITY_LEVELS = ("sedentary", "light", "moderate", "active")
GOALS = ("deficit", "maintain", "surplus")
HEALTH_FOCUSES = (
    "general",
    "weight_loss",
    "muscle_gain",
    "diabetes",
    "hypertension",
    "kidney",
    "heart",
)


@dataclass(frozen=True)
class UserProfile:
    """Biometric profile with derived energy targets."""

    nickname: str = ""
    gender: str = "Male"
    age: int = 0
    height: float = 0
    weight: float = 0
    activity_level: str = "moderate"
    goal: str = "deficit"
    tdee: int = 0
    target_calories: int = 0
    health_focus: str = "general"


@dataclass(frozen=True)
class EnergyTargets:
    """Daily energy expenditure and the goal-adjusted calorie target."""

    tdee: int
    target_calories: int
