"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from nutrition_assistant.adapters.document_text_extractor import (
    FileDocumentTextExtractor,
)
from nutrition_assistant.adapters.openai_completion_client import (
    OpenAICompletionClient,
)
from nutrition_assistant.config import Settings
from nutrition_assistant.services.chat import ChatService
from nutrition_assistant.services.documents import DocumentTextExtractor
from nutrition_assistant.services.intents import KeywordIntentRouter
from nutrition_assistant.services.meal_plans import MealPlanService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    meal_plan_service: MealPlanService
    chat_service: ChatService
    document_extractor: DocumentTextExtractor
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    completion_client = OpenAICompletionClient.create(
        api_key=resolved_settings.openai_api_key,
        base_url=resolved_settings.openai_base_url,
    )
    meal_plan_service = MealPlanService(
        client=completion_client,
        model=resolved_settings.openai_model,
    )
    chat_service = ChatService(
        client=completion_client,
        model=resolved_settings.openai_model,
        router=KeywordIntentRouter(),
        temperature=resolved_settings.chat_temperature,
        chat_max_tokens=resolved_settings.chat_max_tokens,
        analysis_max_tokens=resolved_settings.analysis_max_tokens,
    )

    async def close_resources() -> None:
        await completion_client.close()

    return AppContainer(
        settings=resolved_settings,
        meal_plan_service=meal_plan_service,
        chat_service=chat_service,
        document_extractor=FileDocumentTextExtractor(),
        close_resources=close_resources,
    )
