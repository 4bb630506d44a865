"""Chat intent and reply models."""

from dataclasses import dataclass
from typing import Literal

from nutrition_assistant.domain.meal_plan import ModificationResult
from nutrition_assistant.domain.nutrition import NutritionalNeeds


@dataclass(frozen=True)
class DocumentAnalysis:
    """Request to analyze text extracted from a medical document."""

    text: str


@dataclass(frozen=True)
class MealModification:
    """Request to change meals in the current plan."""

    text: str


@dataclass(frozen=True)
class GeneralChat:
    """Free-form question about the person's diet or health."""

    text: str


ChatIntent = DocumentAnalysis | MealModification | GeneralChat

ReplyType = Literal["imageAnalysis", "mealModification", "chat"]


@dataclass(frozen=True)
class ChatReply:
    """Result of handling one chat message."""

    type: ReplyType
    text: str | None = None
    modification: ModificationResult | None = None
    nutritional_needs: NutritionalNeeds | None = None
