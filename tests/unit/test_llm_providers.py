"""Unit tests for LLM provider adapters: OpenAI-compatible and Anthropic."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import anthropic
import httpx
import openai
import pytest

from src.config.settings import Settings
from src.models.chat import ChatMessage
from src.providers.llm.anthropic_provider import AnthropicLLMProvider
from src.providers.llm.openai_provider import OpenAILLMProvider
from src.utils.errors import LLMError


# ======================================================================
# Shared helpers
# ======================================================================


def _settings(**overrides) -> Settings:
    defaults = {
        "openai_api_key": "sk-test",
        "openai_base_url": "https://api.together.xyz/v1",
        "openai_chat_model": "mistralai/Mistral-7B-Instruct-v0.1",
        "anthropic_api_key": "test-anthropic",
        "anthropic_model": "claude-sonnet-4-20250514",
    }
    defaults.update(overrides)
    return Settings(**defaults)


def _request() -> httpx.Request:
    return httpx.Request("POST", "https://example.invalid/v1/chat")


_MESSAGES = [
    ChatMessage(role="assistant", content="Welcome!"),
    ChatMessage(role="user", content="What is our tagline?"),
]


class _FakeOpenAIStream:
    """Async-iterable stand-in for ``openai.AsyncStream``."""

    def __init__(self, deltas: list[str | None], error: Exception | None = None) -> None:
        self._deltas = deltas
        self._error = error
        self.closed = False

    def __aiter__(self):
        return self._events()

    async def _events(self):
        for delta in self._deltas:
            event = MagicMock()
            event.choices = [MagicMock(delta=MagicMock(content=delta))]
            yield event
        if self._error is not None:
            raise self._error

    async def close(self) -> None:
        self.closed = True


class _FakeAnthropicStream:
    """Async context manager stand-in for ``AsyncMessageStreamManager``."""

    def __init__(self, texts: list[str], error: Exception | None = None) -> None:
        self._texts = texts
        self._error = error
        self.exited = False

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info) -> bool:
        self.exited = True
        return False

    @property
    def text_stream(self):
        return self._iter()

    async def _iter(self):
        for text in self._texts:
            yield text
        if self._error is not None:
            raise self._error


# ======================================================================
# OpenAI-compatible LLM Provider
# ======================================================================


class TestOpenAILLMProvider:
    def _provider(self, mock_client: MagicMock, **overrides) -> OpenAILLMProvider:
        with patch(
            "src.providers.llm.openai_provider.openai.AsyncOpenAI",
            return_value=mock_client,
        ):
            return OpenAILLMProvider(_settings(**overrides))

    def test_provider_name(self) -> None:
        assert self._provider(MagicMock()).get_provider_name() == "openai-compatible"
        assert self._provider(MagicMock(), openai_base_url="").get_provider_name() == "openai"

    def test_is_available(self) -> None:
        assert self._provider(MagicMock()).is_available() is True
        assert self._provider(MagicMock(), openai_api_key="").is_available() is False

    @pytest.mark.asyncio
    async def test_stream_yields_non_empty_deltas(self) -> None:
        fake_stream = _FakeOpenAIStream(["Be ", None, "", "bold."])
        mock_client = MagicMock()
        mock_client.chat.completions.create = AsyncMock(return_value=fake_stream)
        provider = self._provider(mock_client)

        chunks = [c async for c in provider.stream("SYS", _MESSAGES, temperature=0.5, max_tokens=64)]

        assert chunks == ["Be ", "bold."]
        assert fake_stream.closed is True
        kwargs = mock_client.chat.completions.create.call_args.kwargs
        assert kwargs["stream"] is True
        assert kwargs["temperature"] == 0.5
        assert kwargs["max_tokens"] == 64
        assert kwargs["model"] == "mistralai/Mistral-7B-Instruct-v0.1"
        assert kwargs["messages"] == [
            {"role": "system", "content": "SYS"},
            {"role": "assistant", "content": "Welcome!"},
            {"role": "user", "content": "What is our tagline?"},
        ]

    @pytest.mark.asyncio
    async def test_start_error_wrapped(self) -> None:
        mock_client = MagicMock()
        mock_client.chat.completions.create = AsyncMock(
            side_effect=openai.APIConnectionError(request=_request())
        )
        provider = self._provider(mock_client)

        with pytest.raises(LLMError) as exc_info:
            [c async for c in provider.stream("SYS", _MESSAGES)]
        assert exc_info.value.provider_name == "openai-compatible"

    @pytest.mark.asyncio
    async def test_mid_stream_error_wrapped_and_stream_closed(self) -> None:
        fake_stream = _FakeOpenAIStream(
            ["partial"], error=openai.APIConnectionError(request=_request())
        )
        mock_client = MagicMock()
        mock_client.chat.completions.create = AsyncMock(return_value=fake_stream)
        provider = self._provider(mock_client)

        received = []
        with pytest.raises(LLMError, match="interrupted"):
            async for chunk in provider.stream("SYS", _MESSAGES):
                received.append(chunk)

        assert received == ["partial"]
        assert fake_stream.closed is True

    @pytest.mark.asyncio
    async def test_early_close_closes_upstream(self) -> None:
        fake_stream = _FakeOpenAIStream(["one", "two", "three"])
        mock_client = MagicMock()
        mock_client.chat.completions.create = AsyncMock(return_value=fake_stream)
        provider = self._provider(mock_client)

        gen = provider.stream("SYS", _MESSAGES)
        assert await gen.__anext__() == "one"
        await gen.aclose()

        assert fake_stream.closed is True

    @pytest.mark.asyncio
    async def test_complete_joins_stream(self) -> None:
        mock_client = MagicMock()
        mock_client.chat.completions.create = AsyncMock(
            return_value=_FakeOpenAIStream(["Hello", " there"])
        )
        provider = self._provider(mock_client)

        assert await provider.complete("SYS", _MESSAGES) == "Hello there"

    @pytest.mark.asyncio
    async def test_validate_credentials(self) -> None:
        mock_client = MagicMock()
        mock_client.models.list = AsyncMock(return_value=[])
        assert await self._provider(mock_client).validate_credentials() is True

        mock_client.models.list = AsyncMock(
            side_effect=openai.APIConnectionError(request=_request())
        )
        assert await self._provider(mock_client).validate_credentials() is False

    @pytest.mark.asyncio
    async def test_validate_credentials_without_key(self) -> None:
        provider = self._provider(MagicMock(), openai_api_key="")
        assert await provider.validate_credentials() is False


# ======================================================================
# Anthropic LLM Provider
# ======================================================================


class TestAnthropicLLMProvider:
    def _provider(self, mock_client: MagicMock, **overrides) -> AnthropicLLMProvider:
        with patch(
            "src.providers.llm.anthropic_provider.anthropic.AsyncAnthropic",
            return_value=mock_client,
        ):
            return AnthropicLLMProvider(_settings(**overrides))

    def test_provider_name(self) -> None:
        assert self._provider(MagicMock()).get_provider_name() == "anthropic"

    def test_is_available(self) -> None:
        assert self._provider(MagicMock()).is_available() is True
        assert self._provider(MagicMock(), anthropic_api_key="").is_available() is False

    @pytest.mark.asyncio
    async def test_stream_passes_system_separately(self) -> None:
        fake_stream = _FakeAnthropicStream(["Just ", "do it."])
        mock_client = MagicMock()
        mock_client.messages.stream = MagicMock(return_value=fake_stream)
        provider = self._provider(mock_client)

        chunks = [c async for c in provider.stream("SYS", _MESSAGES, temperature=0.2)]

        assert chunks == ["Just ", "do it."]
        assert fake_stream.exited is True
        kwargs = mock_client.messages.stream.call_args.kwargs
        assert kwargs["system"] == "SYS"
        assert kwargs["temperature"] == 0.2
        # The conversation must open with a user turn.
        assert kwargs["messages"] == [{"role": "user", "content": "What is our tagline?"}]

    @pytest.mark.asyncio
    async def test_stream_error_wrapped(self) -> None:
        fake_stream = _FakeAnthropicStream(
            ["x"], error=anthropic.APIConnectionError(request=_request())
        )
        mock_client = MagicMock()
        mock_client.messages.stream = MagicMock(return_value=fake_stream)
        provider = self._provider(mock_client)

        with pytest.raises(LLMError) as exc_info:
            [c async for c in provider.stream("SYS", _MESSAGES)]
        assert exc_info.value.provider_name == "anthropic"

    @pytest.mark.asyncio
    async def test_complete_joins_stream(self) -> None:
        mock_client = MagicMock()
        mock_client.messages.stream = MagicMock(return_value=_FakeAnthropicStream(["a", "b"]))
        assert await self._provider(mock_client).complete("SYS", _MESSAGES) == "ab"

    @pytest.mark.asyncio
    async def test_validate_credentials(self) -> None:
        mock_client = MagicMock()
        mock_client.messages.create = AsyncMock(return_value=MagicMock())
        assert await self._provider(mock_client).validate_credentials() is True

        mock_client.messages.create = AsyncMock(
            side_effect=anthropic.APIConnectionError(request=_request())
        )
        assert await self._provider(mock_client).validate_credentials() is False
