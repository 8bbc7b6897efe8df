"""Domain models for the food diary."""

from dataclasses import dataclass, field
from datetime import date

MEAL_TYPES = ("Breakfast", "Lunch", "Dinner", "Snack")


@dataclass(frozen=True)
class Ingredient:
    """Single food item with macros; portion is free text."""

    name: str
    portion: str
    calories: int
    protein: float
    carbs: float
    fat: float


@dataclass(frozen=True)
class MealEntry:
    """Logged meal. The id is assigned by the storage backend."""

    id: str | None
    date: str
    type: str
    title: str
    description: str
    calories: int
    time: str
    image_url: str
    ingredients: list[Ingredient] = field(default_factory=list)


@dataclass(frozen=True)
class DailyStats:
    """Calories consumed against the daily target."""

    consumed: int
    target: int
    remaining: int
    percentage: int


@dataclass(frozen=True)
class TrendPoint:
    """Calories for one day of the rolling trend."""

    day: date
    label: str
    calories: int


@dataclass(frozen=True)
class DiaryGroups:
    """Entries grouped by date with the dates ordered newest first."""

    dates: list[str]
    entries: dict[str, list[MealEntry]]
    totals: dict[str, int]
