"""Extraction of structured meal data from free-form model output.

Models occasionally wrap their JSON in prose. The recovery policy is to take
everything from the first ``{`` to the last ``}`` inclusive and parse that.
"""

import json
from typing import TypeVar

from pydantic import BaseModel, ValidationError

from nutrition_assistant.domain.errors import MalformedModelOutput, SchemaViolation
from nutrition_assistant.domain.meal_plan import MealPlan, ModificationResult

PLAN_KEY = "week"
MODIFICATION_KEY = "modifications"

_ModelT = TypeVar("_ModelT", bound=BaseModel)


def extract_json_object(raw_text: str) -> dict[str, object]:
    """Return the JSON object spanning the first ``{`` to the last ``}``."""
    start = raw_text.find("{")
    end = raw_text.rfind("}")
    if start == -1 or end < start:
        raise MalformedModelOutput("No JSON object found in model output")
    try:
        payload = json.loads(raw_text[start : end + 1])
    except json.JSONDecodeError as exc:
        raise MalformedModelOutput(f"Model output is not valid JSON: {exc}") from exc
    return payload


def parse_meal_plan(raw_text: str) -> MealPlan:
    """Parse a weekly meal plan from model output."""
    return _parse(raw_text, PLAN_KEY, MealPlan)


def parse_modification_result(raw_text: str) -> ModificationResult:
    """Parse a meal modification result from model output."""
    return _parse(raw_text, MODIFICATION_KEY, ModificationResult)


def _parse(raw_text: str, required_key: str, model: type[_ModelT]) -> _ModelT:
    payload = extract_json_object(raw_text)
    if required_key not in payload:
        raise SchemaViolation(
            f"Model output is missing required key '{required_key}'",
            missing_key=required_key,
        )
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise SchemaViolation(
            f"Model output does not match the {model.__name__} shape: {exc}"
        ) from exc
