"""Models for meal plans produced by the language model."""

from pydantic import BaseModel, ConfigDict, Field


class _ModelPayload(BaseModel):
    """Base for model-produced payloads keyed in camelCase."""

    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)


class NutritionalInfo(_ModelPayload):
    """Display strings for a meal's nutrition facts."""

    calories: str
    protein: str
    carbs: str
    fat: str
    fiber: str


class Meal(_ModelPayload):
    """Single meal with recipe and nutrition facts."""

    meal_type: str = Field(alias="mealType")
    meal: str
    recipe: str
    ingredients: list[str]
    nutritional_info: NutritionalInfo = Field(alias="nutritionalInfo")
    serving_size: str = Field(alias="servingSize")
    meal_time: str = Field(alias="mealTime")


class ReplacementMeal(Meal):
    """Meal proposed in a change record; the slot comes from the change."""

    meal_type: str | None = Field(default=None, alias="mealType")


class DayPlan(_ModelPayload):
    """Meals planned for one day of the week."""

    day: str
    meals: list[Meal]


class MealPlan(_ModelPayload):
    """Weekly meal plan, Sunday through Saturday."""

    week: list[DayPlan]

    def day(self, name: str) -> DayPlan | None:
        """Return the plan for a weekday name, if present."""
        for day_plan in self.week:
            if day_plan.day.lower() == name.lower():
                return day_plan
        return None


class NutritionalGoals(_ModelPayload):
    """Targets the model restates alongside its modifications."""

    bmr: float
    tdee: float
    target_calories: float = Field(alias="targetCalories")
    macro_targets: dict[str, float] = Field(alias="macroTargets")


class MealChange(_ModelPayload):
    """Replacement of one meal in the plan."""

    day: str
    meal_type: str = Field(alias="mealType")
    current_meal: str = Field(alias="currentMeal")
    new_meal: ReplacementMeal = Field(alias="newMeal")


class Modifications(_ModelPayload):
    """Body of a modification result."""

    reasoning: str
    focus_areas: list[str] = Field(alias="focusAreas")
    nutritional_goals: NutritionalGoals = Field(alias="nutritionalGoals")
    changes: list[MealChange]


class ModificationResult(_ModelPayload):
    """Structured answer to a meal modification request."""

    modifications: Modifications
