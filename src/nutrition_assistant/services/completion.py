"""Contract for the external text-completion service."""

from dataclasses import dataclass
from typing import Literal, Protocol

Role = Literal["system", "user", "assistant"]


@dataclass(frozen=True)
class ChatMessage:
    """Single message sent to the completion service."""

    role: Role
    content: str


class CompletionClient(Protocol):
    """Interface for chat-style text completion."""

    async def complete(
        self,
        *,
        model: str,
        messages: list[ChatMessage],
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> str:
        """Return the completion text; raise CompletionError on failure."""
