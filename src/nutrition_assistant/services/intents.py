"""Chat intent classification."""

import logging
from dataclasses import dataclass
from typing import Protocol

from nutrition_assistant.domain.chat import (
    ChatIntent,
    DocumentAnalysis,
    GeneralChat,
    MealModification,
)

DOCUMENT_ANALYSIS_MARKER = "Analyze this medical document:"
MODIFICATION_KEYWORDS = ("change meal", "modify meal")

_logger = logging.getLogger(__name__)


class IntentRouter(Protocol):
    """Interface for turning a chat message into an intent."""

    def classify(self, message: str) -> ChatIntent:
        """Return the intent for a raw chat message."""


@dataclass
class KeywordIntentRouter(IntentRouter):
    """Substring-based router; first matching rule wins."""

    document_marker: str = DOCUMENT_ANALYSIS_MARKER
    modification_keywords: tuple[str, ...] = MODIFICATION_KEYWORDS

    def classify(self, message: str) -> ChatIntent:
        """Classify a message as document analysis, meal change or chat."""
        intent: ChatIntent
        if message.startswith(self.document_marker):
            intent = DocumentAnalysis(message[len(self.document_marker) :].strip())
        elif any(keyword in message.lower() for keyword in self.modification_keywords):
            intent = MealModification(message)
        else:
            intent = GeneralChat(message)
        _logger.info("Routed chat message: intent=%s", type(intent).__name__)
        return intent
