"""Shared test fixtures."""

import json
from dataclasses import dataclass, field
from datetime import UTC, date, datetime

import pytest

from nutrition_assistant.config import Settings
from nutrition_assistant.containers import AppContainer
from nutrition_assistant.domain.errors import CompletionError
from nutrition_assistant.domain.profile import Medication, PersonProfile, WeeklyReport
from nutrition_assistant.services.chat import ChatService
from nutrition_assistant.services.completion import ChatMessage, CompletionClient
from nutrition_assistant.services.documents import DocumentTextExtractor
from nutrition_assistant.services.meal_plans import MealPlanService

FIXED_NOW = datetime(2024, 3, 4, 9, 30, tzinfo=UTC)


def sample_meal(
    meal_type: str = "Breakfast", name: str = "Oatmeal"
) -> dict[str, object]:
    return {
        "mealType": meal_type,
        "meal": name,
        "recipe": "Simmer oats in milk for five minutes.",
        "ingredients": ["oats", "milk", "banana"],
        "nutritionalInfo": {
            "calories": "350 kcal",
            "protein": "12 g",
            "carbs": "55 g",
            "fat": "8 g",
            "fiber": "6 g",
        },
        "servingSize": "1 bowl",
        "mealTime": "8:00 AM",
    }


def sample_plan() -> dict[str, object]:
    days = ["Sunday", "Monday", "Tuesday", "Wednesday"]
    days += ["Thursday", "Friday", "Saturday"]
    return {
        "week": [
            {
                "day": day,
                "meals": [
                    sample_meal("Breakfast", f"{day} oatmeal"),
                    sample_meal("Lunch", f"{day} lentil soup"),
                ],
            }
            for day in days
        ]
    }


def sample_modification() -> dict[str, object]:
    return {
        "modifications": {
            "reasoning": "Lower sodium for blood pressure.",
            "focusAreas": ["sodium", "fiber"],
            "nutritionalGoals": {
                "bmr": 1443,
                "tdee": 2237,
                "targetCalories": 1901,
                "macroTargets": {"protein": 84, "carbs": 214, "fats": 63, "fiber": 25},
            },
            "changes": [
                {
                    "day": "Tuesday",
                    "mealType": "Lunch",
                    "currentMeal": "Tuesday lentil soup",
                    "newMeal": sample_meal(name="Steamed fish with greens"),
                }
            ],
        }
    }


@dataclass
class FakeCompletionClient(CompletionClient):
    """Fake completion client returning queued responses and recording calls."""

    responses: list[str] = field(default_factory=list)
    error: Exception | None = None
    calls: list[dict[str, object]] = field(default_factory=list)

    async def complete(
        self,
        *,
        model: str,
        messages: list[ChatMessage],
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> str:
        self.calls.append(
            {
                "model": model,
                "messages": messages,
                "temperature": temperature,
                "max_tokens": max_tokens,
            }
        )
        if self.error is not None:
            raise self.error
        if not self.responses:
            raise CompletionError("No queued response")
        return self.responses.pop(0)


@dataclass
class FakeDocumentTextExtractor(DocumentTextExtractor):
    """Fake extractor returning a fixed text."""

    text: str | None = "Hemoglobin A1c: 7.2%"
    seen: list[tuple[bytes, str]] = field(default_factory=list)

    def extract_text(self, content: bytes, content_type: str) -> str | None:
        self.seen.append((content, content_type))
        return self.text


@pytest.fixture
def settings() -> Settings:
    return Settings(openai_api_key="test-key")


@pytest.fixture
def profile() -> PersonProfile:
    return PersonProfile(
        name="Alice",
        age=65,
        weight=70,
        height=170,
        gender="male",
        health_issues="hypertension",
        allergies="peanuts",
        cuisines="Mediterranean",
        goal="weight loss",
        activity_level="moderate",
        dietary_restrictions="low sodium",
        meal_preferences="soft foods",
        medications=(
            Medication(name="Metformin", timing="8 AM", dosage="500mg", with_food=True),
        ),
        weekly_reports=tuple(
            WeeklyReport(
                date=date(2024, 1, week),
                overall_feeling=4,
                energy_levels=3,
                sleep_quality=4,
                stress_levels=2,
                diet_adherence=5,
                physical_activity=3,
                digestive_health=4,
                notes=f"week {week}",
            )
            for week in range(1, 6)
        ),
    )


@pytest.fixture
def completion_client() -> FakeCompletionClient:
    return FakeCompletionClient()


@pytest.fixture
def document_extractor() -> FakeDocumentTextExtractor:
    return FakeDocumentTextExtractor()


@pytest.fixture
def container(
    settings: Settings,
    completion_client: FakeCompletionClient,
    document_extractor: FakeDocumentTextExtractor,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        meal_plan_service=MealPlanService(
            client=completion_client,
            model=settings.openai_model,
            clock=lambda: FIXED_NOW,
        ),
        chat_service=ChatService(
            client=completion_client,
            model=settings.openai_model,
            clock=lambda: FIXED_NOW,
        ),
        document_extractor=document_extractor,
        close_resources=close_resources,
    )


def as_model_output(payload: dict[str, object], prose: bool = True) -> str:
    body = json.dumps(payload)
    if prose:
        return f"Here is the plan you asked for:\n{body}\nEnjoy your meals!"
    return body
