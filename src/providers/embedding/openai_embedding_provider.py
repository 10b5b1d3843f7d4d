"""OpenAI-compatible embedding provider adapter.

Wraps the ``openai`` async client to implement :class:`IEmbeddingProvider`.
Works against real OpenAI or any OpenAI-compatible host (TogetherAI by
default) via ``openai_base_url``.

Each text is sent as its own ``/embeddings`` request and the requests run
concurrently, bounded by ``embedding_concurrency``.  A batch fails as a
whole: the first failing request cancels the rest and raises
:class:`EmbeddingError`.
"""

from __future__ import annotations

import asyncio

import openai
import structlog

from src.config.settings import Settings
from src.interfaces.embedding_provider import IEmbeddingProvider
from src.utils.concurrency import throttled_gather
from src.utils.errors import EmbeddingError

logger = structlog.get_logger(logger_name=__name__)

# Known embedding model dimensions.
_MODEL_DIMENSIONS: dict[str, int] = {
    "text-embedding-3-small": 1536,
    "text-embedding-3-large": 3072,
    "text-embedding-ada-002": 1536,
    "BAAI/bge-base-en-v1.5": 768,
    "BAAI/bge-large-en-v1.5": 1024,
    "togethercomputer/m2-bert-80M-8k-retrieval": 768,
    "WhereIsAI/UAE-Large-V1": 1024,
    "intfloat/multilingual-e5-large-instruct": 1024,
}


class OpenAIEmbeddingProvider(IEmbeddingProvider):
    """Embedding provider backed by an OpenAI-compatible embeddings API.

    Uses ``BAAI/bge-large-en-v1.5`` (1024 dims) on TogetherAI by default.
    Models missing from the dimension table fall back to the configured
    ``embedding_dimension``.
    """

    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        self._api_key = settings.openai_api_key

        # No SDK retries: every call in this service is single-attempt.
        client_kwargs: dict = {"api_key": self._api_key or "unset", "max_retries": 0}
        if settings.openai_base_url:
            client_kwargs["base_url"] = settings.openai_base_url

        self._client = openai.AsyncOpenAI(**client_kwargs)
        self._model = settings.openai_embedding_model or "BAAI/bge-large-en-v1.5"
        self._dimension = _MODEL_DIMENSIONS.get(self._model, settings.embedding_dimension)
        self._semaphore = asyncio.Semaphore(max(1, settings.embedding_concurrency))
        self._provider_label = (
            "openai-compatible_embedding" if settings.openai_base_url else "openai_embedding"
        )

    # ------------------------------------------------------------------
    # IEmbeddingProvider implementation
    # ------------------------------------------------------------------

    async def embed(self, texts: list[str]) -> list[list[float]]:
        """Embed each text with its own request, concurrently; all-or-nothing."""
        if not texts:
            return []

        try:
            embeddings = await throttled_gather(
                [self._embed_one(text) for text in texts],
                semaphore=self._semaphore,
            )
        except openai.APIError as exc:
            raise EmbeddingError(
                message=f"{self._provider_label} API error: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        logger.info(
            "embedding_batch",
            model=self._model,
            provider=self._provider_label,
            batch_size=len(texts),
        )
        return embeddings

    async def embed_single(self, text: str) -> list[float]:
        """Generate an embedding vector for a single text string."""
        result = await self.embed([text])
        return result[0]

    def get_dimension(self) -> int:
        return self._dimension

    def get_provider_name(self) -> str:
        return self._provider_label

    def is_available(self) -> bool:
        """Return ``True`` if an API key is configured."""
        return bool(self._api_key)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    async def _embed_one(self, text: str) -> list[float]:
        response = await self._client.embeddings.create(input=text, model=self._model)
        if not response.data:
            raise EmbeddingError(
                message=f"{self._provider_label} returned no embedding",
                provider_name=self.get_provider_name(),
            )
        vector = list(response.data[0].embedding)
        if len(vector) != self._dimension:
            raise EmbeddingError(
                message=(
                    f"{self._provider_label} returned a {len(vector)}-dim vector; "
                    f"expected {self._dimension}"
                ),
                provider_name=self.get_provider_name(),
            )
        return vector
