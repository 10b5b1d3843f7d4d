"""OpenAI-compatible LLM provider adapter.

Wraps the ``openai`` async client to implement :class:`ILLMProvider`.
When ``openai_base_url`` is set (TogetherAI by default) the same client
talks to any OpenAI-compatible host, so one adapter covers TogetherAI,
Fireworks, Groq, a local Ollama ``/v1`` endpoint, or OpenAI itself.
"""

from __future__ import annotations

from collections.abc import AsyncIterator

import openai
import structlog

from src.config.settings import Settings
from src.interfaces.llm_provider import ILLMProvider
from src.models.chat import ChatMessage
from src.utils.errors import LLMError

logger = structlog.get_logger(logger_name=__name__)


class OpenAILLMProvider(ILLMProvider):
    """LLM provider backed by an OpenAI-compatible chat completions API.

    Defaults to ``mistralai/Mistral-7B-Instruct-v0.1`` on TogetherAI.
    The client is built with ``max_retries=0``: a failed chat turn is
    reported, never silently re-run.
    """

    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        self._api_key = settings.openai_api_key

        client_kwargs: dict = {
            "api_key": self._api_key or "unset",
            "timeout": openai.Timeout(settings.llm_timeout, connect=5.0),
            "max_retries": 0,
        }
        if settings.openai_base_url:
            client_kwargs["base_url"] = settings.openai_base_url

        self._client = openai.AsyncOpenAI(**client_kwargs)
        self._model = settings.openai_chat_model or "gpt-4o-mini"
        self._provider_label = "openai-compatible" if settings.openai_base_url else "openai"

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
        """Stream chat-completion deltas.

        The upstream HTTP stream is closed in ``finally``, so closing this
        generator early (client disconnect) stops generation.
        """
        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=self._build_messages(system_prompt, messages),
                temperature=temperature,
                max_tokens=max_tokens,
                stream=True,
            )
        except openai.APIError as exc:
            raise LLMError(
                message=f"{self._provider_label} API error: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        chunks = 0
        try:
            async for event in response:
                if not event.choices:
                    continue
                delta = event.choices[0].delta.content
                if delta:
                    chunks += 1
                    yield delta
        except openai.APIError as exc:
            raise LLMError(
                message=f"{self._provider_label} stream interrupted: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc
        finally:
            await response.close()
            logger.info(
                "openai_stream_closed",
                model=self._model,
                provider=self._provider_label,
                chunks=chunks,
            )

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
        """Return ``True`` if an API key is configured (doesn't verify it works)."""
        return bool(self._api_key)

    async def validate_credentials(self) -> bool:
        """List models to confirm the key is accepted without inference cost."""
        if not self.is_available():
            return False
        try:
            await self._client.models.list()
            return True
        except openai.APIError:
            return False

    def get_provider_name(self) -> str:
        """Return 'openai' or 'openai-compatible' depending on configuration."""
        return self._provider_label

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _build_messages(system_prompt: str, messages: list[ChatMessage]) -> list[dict[str, str]]:
        return [
            {"role": "system", "content": system_prompt},
            *({"role": m.role, "content": m.content} for m in messages),
        ]
