"""Nutritional target models."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class MacroTargets:
    """Daily macronutrient targets in grams."""

    protein: int
    carbs: int
    fats: int
    fiber: int


@dataclass(frozen=True)
class MealDistribution:
    """Calories assigned to each meal slot of the day."""

    breakfast: int
    lunch: int
    snacks: int
    dinner: int

    def total(self) -> int:
        """Return the summed calories across all meal slots."""
        return self.breakfast + self.lunch + self.snacks + self.dinner


@dataclass(frozen=True)
class NutritionalNeeds:
    """Energy and macro targets derived from a profile."""

    bmr: int
    tdee: int
    target_calories: int
    macro_targets: MacroTargets
    meal_distribution: MealDistribution
    last_calculated: datetime | None = None
