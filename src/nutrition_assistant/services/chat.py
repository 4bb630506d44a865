"""Chat message handling: routing plus the per-intent handlers."""

import logging
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from nutrition_assistant.domain.chat import (
    ChatReply,
    DocumentAnalysis,
    GeneralChat,
    MealModification,
)
from nutrition_assistant.domain.errors import (
    CompletionError,
    EmptyMessage,
    GenerationFailed,
    MalformedModelOutput,
    SchemaViolation,
)
from nutrition_assistant.domain.profile import PersonProfile
from nutrition_assistant.services.completion import ChatMessage, CompletionClient
from nutrition_assistant.services.intents import IntentRouter, KeywordIntentRouter
from nutrition_assistant.services.nutrition import compute_nutritional_needs
from nutrition_assistant.services.plan_parser import parse_modification_result
from nutrition_assistant.services.prompts import (
    build_document_analysis_messages,
    build_general_chat_messages,
    build_modification_messages,
)

if TYPE_CHECKING:
    from collections.abc import Callable

_logger = logging.getLogger(__name__)


def local_weekday(moment: datetime) -> str:
    """Return the weekday name of a timestamp in the server's local time."""
    return moment.astimezone().strftime("%A")


@dataclass
class ChatService:
    """Routes chat messages and produces replies from the completion service."""

    client: CompletionClient
    model: str
    router: IntentRouter = field(default_factory=KeywordIntentRouter)
    temperature: float = 0.7
    chat_max_tokens: int = 800
    analysis_max_tokens: int = 1000
    clock: "Callable[[], datetime]" = lambda: datetime.now(tz=UTC)

    async def handle_message(
        self,
        profile: PersonProfile,
        message: str,
        weekday: str | None = None,
    ) -> ChatReply:
        """Classify a message and dispatch it to the matching handler."""
        cleaned = (message or "").strip()
        if not cleaned:
            raise EmptyMessage("Message is required")

        intent = self.router.classify(cleaned)
        if isinstance(intent, DocumentAnalysis):
            return await self.analyze_document(intent.text, profile)
        if isinstance(intent, MealModification):
            return await self.modify_meals(profile, intent.text)
        if isinstance(intent, GeneralChat):
            return await self.answer(profile, intent.text, weekday)
        raise TypeError(f"Unsupported chat intent: {intent!r}")

    async def analyze_document(
        self, extracted_text: str, profile: PersonProfile | None = None
    ) -> ChatReply:
        """Ask the model for a structured report on a medical document."""
        messages = build_document_analysis_messages(extracted_text, profile)
        text = await self._complete(
            messages,
            temperature=self.temperature,
            max_tokens=self.analysis_max_tokens,
            action="document analysis",
        )
        return ChatReply(type="imageAnalysis", text=text)

    async def modify_meals(
        self, profile: PersonProfile, request_text: str
    ) -> ChatReply:
        """Ask the model for meal replacements that respect current targets."""
        needs = compute_nutritional_needs(profile)
        messages = build_modification_messages(profile, needs, request_text)
        raw = await self._complete(
            messages, temperature=None, max_tokens=None, action="meal modification"
        )
        try:
            result = parse_modification_result(raw)
        except (MalformedModelOutput, SchemaViolation) as exc:
            _logger.exception("Meal modification output could not be parsed")
            raise GenerationFailed(
                f"Failed to process meal modification: {exc}"
            ) from exc
        return ChatReply(
            type="mealModification",
            modification=result,
            nutritional_needs=replace(needs, last_calculated=self.clock()),
        )

    async def answer(
        self, profile: PersonProfile, message: str, weekday: str | None = None
    ) -> ChatReply:
        """Answer a general question with the profile, plan and reports as context."""
        resolved_weekday = weekday or local_weekday(self.clock())
        messages = build_general_chat_messages(profile, message, resolved_weekday)
        text = await self._complete(
            messages,
            temperature=self.temperature,
            max_tokens=self.chat_max_tokens,
            action="chat",
        )
        return ChatReply(type="chat", text=text)

    async def _complete(
        self,
        messages: list[ChatMessage],
        *,
        temperature: float | None,
        max_tokens: int | None,
        action: str,
    ) -> str:
        try:
            return await self.client.complete(
                model=self.model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except CompletionError as exc:
            _logger.exception("Completion failed for %s", action)
            raise GenerationFailed(f"Failed to generate {action}: {exc}") from exc
