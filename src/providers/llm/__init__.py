"""LLM provider implementations.

    OpenAILLMProvider    -- any OpenAI-compatible chat endpoint
                            (TogetherAI Mistral-7B-Instruct by default)
    AnthropicLLMProvider -- Claude via the Messages streaming API

main.py prefers Anthropic when ANTHROPIC_API_KEY is set, otherwise the
OpenAI-compatible provider.
"""

from src.providers.llm.anthropic_provider import AnthropicLLMProvider
from src.providers.llm.openai_provider import OpenAILLMProvider

__all__ = ["AnthropicLLMProvider", "OpenAILLMProvider"]
