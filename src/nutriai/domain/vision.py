"""Models for AI nutrition results."""

import math

from pydantic import BaseModel, Field, field_validator


class NutritionEstimate(BaseModel):
    """Estimated macros for a food portion."""

    calories: int = Field(default=0, ge=0)
    protein: float = Field(default=0.0, ge=0.0)
    carbs: float = Field(default=0.0, ge=0.0)
    fat: float = Field(default=0.0, ge=0.0)

    @field_validator("calories", mode="before")
    @classmethod
    def _round_calories(cls, value: object) -> object:
        if isinstance(value, float):
            return math.floor(value + 0.5)
        return value


class AnalyzedIngredient(NutritionEstimate):
    """Single food item detected in a photo."""

    name: str
    portion: str = ""
