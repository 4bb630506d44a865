"""Meal plan generation use cases."""

import logging
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from nutrition_assistant.domain.errors import (
    CompletionError,
    GenerationFailed,
    InvalidMedication,
    MalformedModelOutput,
    SchemaViolation,
)
from nutrition_assistant.domain.meal_plan import MealPlan
from nutrition_assistant.domain.nutrition import NutritionalNeeds
from nutrition_assistant.domain.profile import Medication, PersonProfile, ProfileUpdate
from nutrition_assistant.services.completion import CompletionClient
from nutrition_assistant.services.nutrition import compute_nutritional_needs
from nutrition_assistant.services.plan_parser import parse_meal_plan
from nutrition_assistant.services.prompts import build_initial_plan_messages

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

_logger = logging.getLogger(__name__)

_REQUIRED_MEDICATION_FIELDS = ("name", "timing", "dosage")


@dataclass(frozen=True)
class GeneratedPlan:
    """A generated weekly plan together with the targets it was built for."""

    meal_plan: MealPlan
    nutritional_needs: NutritionalNeeds


@dataclass
class MealPlanService:
    """Generates and regenerates weekly meal plans via the completion service."""

    client: CompletionClient
    model: str
    clock: "Callable[[], datetime]" = lambda: datetime.now(tz=UTC)

    async def generate_initial_plan(self, profile: PersonProfile) -> GeneratedPlan:
        """Compute targets, request a plan and parse it."""
        needs = replace(
            compute_nutritional_needs(profile), last_calculated=self.clock()
        )
        messages = build_initial_plan_messages(profile, needs)
        try:
            raw = await self.client.complete(model=self.model, messages=messages)
            meal_plan = parse_meal_plan(raw)
        except (CompletionError, MalformedModelOutput, SchemaViolation) as exc:
            _logger.exception("Meal plan generation failed")
            raise GenerationFailed(f"Failed to generate meal plan: {exc}") from exc
        _logger.info(
            "Generated meal plan: days=%s target_calories=%s",
            len(meal_plan.week),
            needs.target_calories,
        )
        return GeneratedPlan(meal_plan=meal_plan, nutritional_needs=needs)

    async def regenerate_plan(
        self, profile: PersonProfile, change_request: ProfileUpdate
    ) -> GeneratedPlan:
        """Fold requested changes into the profile and generate a new plan."""
        if change_request.medications is not None:
            validate_medications(change_request.medications)
        updated = apply_profile_update(profile, change_request)
        return await self.generate_initial_plan(updated)


def validate_medications(medications: "Iterable[Medication]") -> tuple[Medication, ...]:
    """Reject the whole batch if any record lacks a name, timing or dosage."""
    validated = tuple(medications)
    for index, medication in enumerate(validated):
        missing = [
            field_name
            for field_name in _REQUIRED_MEDICATION_FIELDS
            if not str(getattr(medication, field_name) or "").strip()
        ]
        if missing:
            raise InvalidMedication(index=index, fields=missing)
    return validated


def apply_profile_update(
    profile: PersonProfile, update: ProfileUpdate
) -> PersonProfile:
    """Return a copy of the profile with every non-``None`` update field applied."""
    changes = {
        field_name: value
        for field_name, value in vars(update).items()
        if value is not None
    }
    return replace(profile, **changes)
