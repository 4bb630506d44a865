"""OpenAI-compatible chat completions client."""

from dataclasses import dataclass

import httpx
import openai
from openai import AsyncOpenAI

from nutrition_assistant.domain.errors import CompletionError
from nutrition_assistant.services.completion import ChatMessage, CompletionClient


@dataclass
class OpenAICompletionClient(CompletionClient):
    """Completion client backed by the Chat Completions API."""

    client: AsyncOpenAI

    @classmethod
    def create(cls, api_key: str, base_url: str) -> "OpenAICompletionClient":
        """Create a client for an OpenAI-compatible endpoint."""
        return cls(
            client=AsyncOpenAI(
                api_key=api_key,
                base_url=base_url,
                http_client=httpx.AsyncClient(),
            )
        )

    async def complete(
        self,
        *,
        model: str,
        messages: list[ChatMessage],
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> str:
        """Call the Chat Completions API and return the trimmed message text."""
        request_payload: dict[str, object] = {
            "model": model,
            "messages": [
                {"role": message.role, "content": message.content}
                for message in messages
            ],
        }
        if temperature is not None:
            request_payload["temperature"] = temperature
        if max_tokens is not None:
            request_payload["max_tokens"] = max_tokens

        try:
            response = await self.client.chat.completions.create(**request_payload)
        except openai.OpenAIError as exc:
            raise CompletionError(f"Completion request failed: {exc}") from exc
        choices = response.choices or []
        content = choices[0].message.content if choices else None
        if not content or not content.strip():
            raise CompletionError("Completion service returned an empty response")
        return content.strip()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.client.close()
