"""Pydantic models for the HTTP request and response payloads."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from nutrition_assistant.domain.meal_plan import MealPlan
from nutrition_assistant.domain.nutrition import NutritionalNeeds
from nutrition_assistant.domain.profile import (
    Medication,
    PersonProfile,
    ProfileUpdate,
    WeeklyReport,
)


class _Payload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class MedicationPayload(_Payload):
    """Medication record; completeness is checked by the service layer."""

    name: str | None = None
    timing: str | None = None
    dosage: str | None = None
    with_food: bool = Field(default=False, alias="withFood")

    def to_domain(self) -> Medication:
        return Medication(
            name=self.name or "",
            timing=self.timing or "",
            dosage=self.dosage or "",
            with_food=self.with_food,
        )


class WeeklyReportPayload(_Payload):
    """Weekly well-being report payload."""

    report_date: date = Field(alias="date")
    overall_feeling: int = Field(alias="overallFeeling")
    energy_levels: int = Field(alias="energyLevels")
    sleep_quality: int = Field(alias="sleepQuality")
    stress_levels: int = Field(alias="stressLevels")
    diet_adherence: int = Field(alias="dietAdherence")
    physical_activity: int = Field(alias="physicalActivity")
    digestive_health: int = Field(alias="digestiveHealth")
    challenges: str | None = None
    improvements: str | None = None
    notes: str | None = None

    def to_domain(self) -> WeeklyReport:
        values = self.model_dump(exclude={"report_date"})
        return WeeklyReport(date=self.report_date, **values)


class ProfilePayload(_Payload):
    """Full profile as stored by the caller."""

    age: float
    weight: float
    height: float
    gender: str
    name: str | None = None
    health_issues: str | None = Field(default=None, alias="healthIssues")
    allergies: str | None = None
    cuisines: str | None = None
    goal: str | None = None
    activity_level: str | None = Field(default=None, alias="activityLevel")
    dietary_restrictions: str | None = Field(
        default=None, alias="dietaryRestrictions"
    )
    meal_preferences: str | None = Field(default=None, alias="mealPreferences")
    medications: list[MedicationPayload] = Field(default_factory=list)
    meal_plan: MealPlan | None = Field(default=None, alias="mealPlan")
    weekly_reports: list[WeeklyReportPayload] = Field(
        default_factory=list, alias="weeklyReports"
    )

    def to_domain(self) -> PersonProfile:
        return PersonProfile(
            age=self.age,
            weight=self.weight,
            height=self.height,
            gender=self.gender,
            name=self.name,
            health_issues=self.health_issues,
            allergies=self.allergies,
            cuisines=self.cuisines,
            goal=self.goal,
            activity_level=self.activity_level,
            dietary_restrictions=self.dietary_restrictions,
            meal_preferences=self.meal_preferences,
            medications=tuple(item.to_domain() for item in self.medications),
            meal_plan=self.meal_plan,
            weekly_reports=tuple(item.to_domain() for item in self.weekly_reports),
        )


class ProfileChangesPayload(_Payload):
    """Requested profile changes for plan regeneration."""

    age: float | None = None
    weight: float | None = None
    height: float | None = None
    gender: str | None = None
    name: str | None = None
    health_issues: str | None = Field(default=None, alias="healthIssues")
    allergies: str | None = None
    cuisines: str | None = None
    goal: str | None = None
    activity_level: str | None = Field(default=None, alias="activityLevel")
    dietary_restrictions: str | None = Field(
        default=None, alias="dietaryRestrictions"
    )
    meal_preferences: str | None = Field(default=None, alias="mealPreferences")
    medications: list[MedicationPayload] | None = None

    def to_domain(self) -> ProfileUpdate:
        values = self.model_dump(exclude={"medications"})
        medications = (
            tuple(item.to_domain() for item in self.medications)
            if self.medications is not None
            else None
        )
        return ProfileUpdate(**values, medications=medications)


class RegeneratePlanRequest(_Payload):
    """Profile plus the changes to fold in before regenerating."""

    profile: ProfilePayload
    changes: ProfileChangesPayload


class ChatRequest(_Payload):
    """Chat message together with the sender's profile."""

    profile: ProfilePayload
    message: str
    weekday: str | None = None


def needs_to_payload(needs: NutritionalNeeds) -> dict[str, object]:
    """Serialize nutritional needs with camelCase keys."""
    return {
        "bmr": needs.bmr,
        "tdee": needs.tdee,
        "targetCalories": needs.target_calories,
        "macroTargets": {
            "protein": needs.macro_targets.protein,
            "carbs": needs.macro_targets.carbs,
            "fats": needs.macro_targets.fats,
            "fiber": needs.macro_targets.fiber,
        },
        "mealDistribution": {
            "breakfast": needs.meal_distribution.breakfast,
            "lunch": needs.meal_distribution.lunch,
            "snacks": needs.meal_distribution.snacks,
            "dinner": needs.meal_distribution.dinner,
        },
        "lastCalculated": _isoformat(needs.last_calculated),
    }


def _isoformat(value: datetime | None) -> str | None:
    return value.isoformat() if value else None
