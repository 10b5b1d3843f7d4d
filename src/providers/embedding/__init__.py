"""Embedding provider implementations.

Embeddings turn the serialized brand profile, guideline passages and chat
queries into vectors for the vector store's cosine-similarity search.

    OpenAIEmbeddingProvider -- any OpenAI-compatible /embeddings endpoint
                               (TogetherAI BAAI/bge-large-en-v1.5 by default,
                               1024 dims).
"""

from src.providers.embedding.openai_embedding_provider import OpenAIEmbeddingProvider

__all__ = ["OpenAIEmbeddingProvider"]
