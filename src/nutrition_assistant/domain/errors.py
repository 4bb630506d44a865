"""Error taxonomy for the nutrition assistant."""


class NutritionAssistantError(Exception):
    """Base class for all domain errors."""


class InvalidProfile(NutritionAssistantError):
    """Raised when biometric input cannot produce nutritional targets."""


class InvalidMedication(NutritionAssistantError):
    """Raised when a medication record in an update is incomplete."""

    def __init__(self, index: int, fields: list[str]) -> None:
        self.index = index
        self.fields = fields
        super().__init__(
            f"Medication at index {index} is missing required fields: "
            f"{', '.join(fields)}"
        )


class EmptyMessage(NutritionAssistantError):
    """Raised when a chat message has no content."""


class MalformedModelOutput(NutritionAssistantError):
    """Raised when no JSON object can be read from model output."""


class SchemaViolation(NutritionAssistantError):
    """Raised when model JSON lacks the expected structure."""

    def __init__(self, message: str, missing_key: str | None = None) -> None:
        self.missing_key = missing_key
        super().__init__(message)


class CompletionError(NutritionAssistantError):
    """Raised when the external completion service fails."""


class GenerationFailed(NutritionAssistantError):
    """Raised when a generation step fails at the service or parsing stage."""
