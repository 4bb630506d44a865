"""Nutritional needs calculation (Mifflin-St Jeor)."""

import math

from nutrition_assistant.domain.errors import InvalidProfile
from nutrition_assistant.domain.nutrition import (
    MacroTargets,
    MealDistribution,
    NutritionalNeeds,
)
from nutrition_assistant.domain.profile import PersonProfile

ACTIVITY_MULTIPLIERS: dict[str, float] = {
    "sedentary": 1.2,
    "light": 1.375,
    "moderate": 1.55,
    "active": 1.725,
    "very active": 1.9,
}
DEFAULT_ACTIVITY_MULTIPLIER = ACTIVITY_MULTIPLIERS["moderate"]

LOSS_FACTOR = 0.85
GAIN_FACTOR = 1.10

PROTEIN_G_PER_KG = 1.2
CARBS_SHARE = 0.45
FATS_SHARE = 0.30
FIBER_G = 25
KCAL_PER_G_PROTEIN = 4
KCAL_PER_G_CARBS = 4
KCAL_PER_G_FAT = 9

MEAL_SHARES: dict[str, float] = {
    "breakfast": 0.25,
    "lunch": 0.30,
    "snacks": 0.15,
    "dinner": 0.30,
}

_MALE = "male"
_OTHER_GENDERS = {"female", "other"}


def compute_nutritional_needs(profile: PersonProfile) -> NutritionalNeeds:
    """Derive BMR, TDEE, calorie, macro and meal targets for a profile.

    ``last_calculated`` is left unset; callers stamp it when they persist.
    """
    _validate(profile)
    bmr = round_half_up(_basal_metabolic_rate(profile))
    tdee = round_half_up(bmr * activity_multiplier(profile.activity_level))
    target_calories = round_half_up(tdee * goal_factor(profile.goal))

    macro_targets = MacroTargets(
        protein=round_half_up(profile.weight * PROTEIN_G_PER_KG),
        carbs=round_half_up(target_calories * CARBS_SHARE / KCAL_PER_G_CARBS),
        fats=round_half_up(target_calories * FATS_SHARE / KCAL_PER_G_FAT),
        fiber=FIBER_G,
    )
    meal_distribution = MealDistribution(
        **{
            slot: round_half_up(target_calories * share)
            for slot, share in MEAL_SHARES.items()
        }
    )
    return NutritionalNeeds(
        bmr=bmr,
        tdee=tdee,
        target_calories=target_calories,
        macro_targets=macro_targets,
        meal_distribution=meal_distribution,
    )


def activity_multiplier(activity_level: str | None) -> float:
    """Return the TDEE multiplier for an activity level, defaulting to moderate."""
    if not activity_level:
        return DEFAULT_ACTIVITY_MULTIPLIER
    return ACTIVITY_MULTIPLIERS.get(
        activity_level.strip().lower(), DEFAULT_ACTIVITY_MULTIPLIER
    )


def goal_factor(goal: str | None) -> float:
    """Return the calorie adjustment implied by a free-text goal."""
    lowered = (goal or "").lower()
    if "loss" in lowered:
        return LOSS_FACTOR
    if "gain" in lowered:
        return GAIN_FACTOR
    return 1.0


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up."""
    return math.floor(value + 0.5)


def _basal_metabolic_rate(profile: PersonProfile) -> float:
    base = 10 * profile.weight + 6.25 * profile.height - 5 * profile.age
    if _normalize_gender(profile.gender) == _MALE:
        return base + 5
    return base - 161


def _validate(profile: PersonProfile) -> None:
    for label, value in (
        ("weight", profile.weight),
        ("height", profile.height),
        ("age", profile.age),
    ):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise InvalidProfile(f"{label} must be a number, got {value!r}")
        if not math.isfinite(value) or value <= 0:
            raise InvalidProfile(f"{label} must be positive, got {value!r}")
    gender = _normalize_gender(profile.gender)
    if gender != _MALE and gender not in _OTHER_GENDERS:
        raise InvalidProfile(f"Unrecognized gender: {profile.gender!r}")


def _normalize_gender(gender: object) -> str:
    if not isinstance(gender, str):
        return ""
    return gender.strip().lower()
