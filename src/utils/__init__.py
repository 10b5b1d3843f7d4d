"""Utility modules for BrandKit.

- **errors** -- exception hierarchy rooted at BrandKitError; providers wrap
  SDK exceptions in these types so callers never import SDKs to catch.
- **logging** -- structlog setup: coloured console in development,
  structured JSON in production.
- **concurrency** -- semaphore-bounded gather for fan-out embedding calls.
- **text** -- truncation with an ellipsis marker and camelCase key labels.
"""

from src.utils.concurrency import throttled_gather
from src.utils.errors import (
    BrandKitError,
    ConfigurationError,
    EmbeddingError,
    LLMError,
    RAGError,
    RetrievalUnavailableError,
    VectorStoreError,
)
from src.utils.logging import configure_logging, get_logger
from src.utils.text import humanize_key, truncate

__all__ = [
    "BrandKitError",
    "ConfigurationError",
    "EmbeddingError",
    "LLMError",
    "RAGError",
    "RetrievalUnavailableError",
    "VectorStoreError",
    "configure_logging",
    "get_logger",
    "humanize_key",
    "throttled_gather",
    "truncate",
]
