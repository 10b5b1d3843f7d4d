"""Abstract base class for text-embedding service providers.

Defines the contract for turning text into fixed-length vectors.  The
default implementation talks to an OpenAI-compatible ``/embeddings``
endpoint (TogetherAI serving ``BAAI/bge-large-en-v1.5``); any backend that
honours this contract can be swapped in at ``src/main.py``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


# Concrete implementation: OpenAIEmbeddingProvider (src/providers/embedding/)
class IEmbeddingProvider(ABC):
    """Contract for text-embedding services used by the profile and chat paths."""

    @abstractmethod
    async def embed(self, texts: list[str]) -> list[list[float]]:
        """Generate embedding vectors for a batch of texts.

        Implementations issue one request per text, concurrently, and fail
        the batch as a whole: if any single request errors, the first error
        propagates and no partial result is returned.

        Parameters
        ----------
        texts:
            Text strings to embed.  An empty list returns an empty list.

        Returns
        -------
        list[list[float]]
            Embedding vectors corresponding positionally to *texts*.  Each
            inner list has length equal to :meth:`get_dimension`.

        Raises
        ------
        src.utils.errors.EmbeddingError
            If any embedding request fails.
        """

    @abstractmethod
    async def embed_single(self, text: str) -> list[float]:
        """Embed one text; equivalent to ``(await embed([text]))[0]``.

        Raises
        ------
        src.utils.errors.EmbeddingError
            If the embedding request fails.
        """

    @abstractmethod
    def get_dimension(self) -> int:
        """Return the fixed dimensionality of the vectors this provider produces.

        Must match the dimension of the vector-store collection.
        Example: ``1024`` for ``BAAI/bge-large-en-v1.5``.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier, e.g. ``"openai-compatible_embedding"``."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if the provider is configured (credentials present)."""
