"""Abstract base class for LLM service providers.

Chat answers are streamed: :meth:`ILLMProvider.stream` is an async iterator
of text deltas, consumed chunk by chunk by the HTTP layer.  Closing the
iterator early (client disconnect) must release the upstream connection so
generation stops.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator

from src.models.chat import ChatMessage


# Concrete implementations: OpenAILLMProvider, AnthropicLLMProvider
# Located in: src/providers/llm/
class ILLMProvider(ABC):
    """Contract for the language models that answer brand chat requests."""

    @abstractmethod
    def stream(
        self,
        system_prompt: str,
        messages: list[ChatMessage],
        temperature: float = 0.5,
        max_tokens: int = 1024,
    ) -> AsyncIterator[str]:
        """Stream a chat completion as text chunks.

        Parameters
        ----------
        system_prompt:
            System instructions, already containing the assembled context.
        messages:
            Conversation history followed by the latest user message.
        temperature:
            Sampling temperature.
        max_tokens:
            Upper bound on generated tokens.

        Yields
        ------
        str
            Non-empty text deltas in generation order.  The iterator is
            finite and cannot be restarted.

        Raises
        ------
        src.utils.errors.LLMError
            If the call fails to start or the stream breaks.
        """

    @abstractmethod
    async def complete(
        self,
        system_prompt: str,
        messages: list[ChatMessage],
        temperature: float = 0.5,
        max_tokens: int = 1024,
    ) -> str:
        """Return the full completion text (non-streaming convenience)."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier, e.g. ``"openai-compatible"``."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if credentials are configured (no network call)."""

    @abstractmethod
    async def validate_credentials(self) -> bool:
        """Perform a lightweight API call to confirm the credentials are accepted."""
