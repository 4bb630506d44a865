"""Domain models describing the person a plan is built for."""

from dataclasses import dataclass
from datetime import date

from nutrition_assistant.domain.meal_plan import MealPlan


@dataclass(frozen=True)
class Medication:
    """A medication and the schedule cue it is taken with."""

    name: str
    timing: str
    dosage: str
    with_food: bool = False


@dataclass(frozen=True)
class WeeklyReport:
    """Self-reported well-being scores for one week (1-5 scale)."""

    date: date
    overall_feeling: int
    energy_levels: int
    sleep_quality: int
    stress_levels: int
    diet_adherence: int
    physical_activity: int
    digestive_health: int
    challenges: str | None = None
    improvements: str | None = None
    notes: str | None = None


@dataclass(frozen=True)
class PersonProfile:
    """Snapshot of a person's biometrics, preferences and stored context."""

    age: float
    weight: float
    height: float
    gender: str
    name: str | None = None
    health_issues: str | None = None
    allergies: str | None = None
    cuisines: str | None = None
    goal: str | None = None
    activity_level: str | None = None
    dietary_restrictions: str | None = None
    meal_preferences: str | None = None
    medications: tuple[Medication, ...] = ()
    meal_plan: MealPlan | None = None
    weekly_reports: tuple[WeeklyReport, ...] = ()


@dataclass(frozen=True)
class ProfileUpdate:
    """Partial profile changes; ``None`` leaves the current value in place."""

    age: float | None = None
    weight: float | None = None
    height: float | None = None
    gender: str | None = None
    name: str | None = None
    health_issues: str | None = None
    allergies: str | None = None
    cuisines: str | None = None
    goal: str | None = None
    activity_level: str | None = None
    dietary_restrictions: str | None = None
    meal_preferences: str | None = None
    medications: tuple[Medication, ...] | None = None
