"""Anthropic LLM provider adapter.

Wraps the ``anthropic`` async client to implement :class:`ILLMProvider`
using the Messages streaming API.

Differences from the OpenAI adapter:
    - The system prompt is a separate ``system`` parameter, not a message
    - The conversation must open with a user turn, so leading assistant
      messages are dropped
    - Text deltas come from ``stream.text_stream``
"""

from __future__ import annotations

from collections.abc import AsyncIterator

import anthropic
import structlog

from src.config.settings import Settings
from src.interfaces.llm_provider import ILLMProvider
from src.models.chat import ChatMessage
from src.utils.errors import LLMError

logger = structlog.get_logger(logger_name=__name__)


class AnthropicLLMProvider(ILLMProvider):
    """LLM provider backed by the Anthropic Claude API."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        self._api_key = settings.anthropic_api_key
        self._client = anthropic.AsyncAnthropic(
            api_key=self._api_key or "unset",
            timeout=settings.llm_timeout,
            max_retries=0,
        )
        self._model = settings.anthropic_model

    # ------------------------------------------------------------------
    # ILLMProvider implementation
    # ------------------------------------------------------------------

    async def stream(
        self,
        system_prompt: str,
        messages: list[ChatMessage],
        temperature: float = 0.5,
        max_tokens: int = 1024,
    ) -> AsyncIterator[str]:
        chunks = 0
        try:
            async with self._client.messages.stream(
                model=self._model,
                system=system_prompt,
                messages=self._build_messages(messages),
                temperature=temperature,
                max_tokens=max_tokens,
            ) as response:
                async for text in response.text_stream:
                    if text:
                        chunks += 1
                        yield text
        except anthropic.APIError as exc:
            raise LLMError(
                message=f"Anthropic API error: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc
        finally:
            logger.info("anthropic_stream_closed", model=self._model, chunks=chunks)

    async def complete(
        self,
        system_prompt: str,
        messages: list[ChatMessage],
        temperature: float = 0.5,
        max_tokens: int = 1024,
    ) -> str:
        parts = [
            chunk
            async for chunk in self.stream(system_prompt, messages, temperature, max_tokens)
        ]
        return "".join(parts)

    def is_available(self) -> bool:
        return bool(self._api_key)

    async def validate_credentials(self) -> bool:
        """Send a 1-token request to confirm the key is accepted."""
        if not self.is_available():
            return False
        try:
            await self._client.messages.create(
                model=self._model,
                max_tokens=1,
                messages=[{"role": "user", "content": "ping"}],
            )
            return True
        except anthropic.APIError:
            return False

    def get_provider_name(self) -> str:
        return "anthropic"

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _build_messages(messages: list[ChatMessage]) -> list[dict[str, str]]:
        turns = [{"role": m.role, "content": m.content} for m in messages]
        while turns and turns[0]["role"] != "user":
            turns.pop(0)
        return turns
