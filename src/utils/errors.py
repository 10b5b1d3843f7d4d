"""Custom exception hierarchy for BrandKit.

All application exceptions inherit from :class:`BrandKitError`, which
carries an optional ``provider_name`` so error handlers can identify which
external service (e.g. "openai_embedding", "chromadb", "anthropic") caused
the failure.

The hierarchy follows the failure taxonomy of the profile and chat paths:

    BrandKitError  (base -- caught at the request boundary)
    +-- RAGError                   (embedding or vector-store failure)
    |   +-- EmbeddingError         (embedding provider call failed)
    |   +-- VectorStoreError       (vector database unreachable / rejected call)
    +-- RetrievalUnavailableError  (chat query could not be embedded)
    +-- LLMError                   (language-model call failed)
    +-- ConfigurationError         (startup / missing config)

``EmbeddingError`` is the one failure with two policies: the profile save
path degrades to a zero vector, while the chat path converts it into
``RetrievalUnavailableError`` and aborts the request.
"""


class BrandKitError(Exception):
    """Base exception for all BrandKit errors.

    Every subclass carries a human-readable ``message`` and an optional
    ``provider_name`` identifying which external service triggered the
    error.  The ``__str__`` method prefixes the provider name in brackets
    for structured log output, e.g. ``[chromadb] Collection not found``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# RAG errors (embedding + vector store)
# ---------------------------------------------------------------------------

class RAGError(BrandKitError):
    """Raised when a RAG operation fails (embedding or vector store)."""

    def __init__(
        self,
        message: str = "RAG operation failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class EmbeddingError(RAGError):
    """Raised when the embedding provider fails to produce a vector."""

    def __init__(
        self,
        message: str = "Embedding generation failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class VectorStoreError(RAGError):
    """Raised when the vector database is unreachable or rejects a call.

    Never retried automatically; surfaced to the caller as a server error.
    """

    def __init__(
        self,
        message: str = "Vector store is unavailable",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Chat errors
# ---------------------------------------------------------------------------

class RetrievalUnavailableError(BrandKitError):
    """Raised when the chat query cannot be embedded for retrieval.

    The chat path never answers without semantic context: a query with no
    real embedding would silently retrieve irrelevant snippets.
    """

    def __init__(
        self,
        message: str = "retrieval unavailable",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class LLMError(BrandKitError):
    """Raised when an LLM API call fails or its stream breaks."""

    def __init__(
        self,
        message: str = "LLM API call failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Configuration errors
# ---------------------------------------------------------------------------

class ConfigurationError(BrandKitError):
    """Raised when configuration is invalid or missing at startup."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
