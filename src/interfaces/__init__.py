"""Public interface definitions for all external service providers.

Every external service (embedding API, vector database, language model) is
accessed only through the abstract base classes in this package.  Concrete
adapters live in ``src/providers/`` and are injected at startup in
``src/main.py``; tests inject in-memory fakes.

    Interface              ->  Concrete implementations (src/providers/)
    ------------------------------------------------------------------
    IEmbeddingProvider     ->  OpenAIEmbeddingProvider
    IVectorStoreProvider   ->  ChromaDBProvider
    ILLMProvider           ->  OpenAILLMProvider, AnthropicLLMProvider
"""

from src.interfaces.embedding_provider import IEmbeddingProvider
from src.interfaces.llm_provider import ILLMProvider
from src.interfaces.vector_store_provider import IVectorStoreProvider

__all__ = [
    "IEmbeddingProvider",
    "ILLMProvider",
    "IVectorStoreProvider",
]
