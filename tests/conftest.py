"""Shared pytest fixtures for the BrandKit test suite."""

from __future__ import annotations

import hashlib
import struct
from collections.abc import AsyncIterator
from pathlib import Path
from typing import Any

import pytest

from src.interfaces.embedding_provider import IEmbeddingProvider
from src.interfaces.llm_provider import ILLMProvider
from src.interfaces.vector_store_provider import IVectorStoreProvider
from src.models.chat import ChatMessage
from src.models.rag import RetrievedSnippet, VectorRecord
from src.services.profile_repository import ProfileRepository
from src.utils.errors import EmbeddingError, LLMError, VectorStoreError

_EMBEDDING_DIM = 8


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


# ---------------------------------------------------------------------------
# In-memory provider fakes
# ---------------------------------------------------------------------------


def _hash_to_vector(text: str, dim: int = _EMBEDDING_DIM) -> list[float]:
    """Generate a deterministic unit-length vector by hashing *text*."""
    digest = hashlib.sha256(text.encode("utf-8")).digest()
    raw = digest
    while len(raw) < dim * 4:
        raw += hashlib.sha256(raw).digest()
    # Unsigned ints keep every component finite; NaN bit patterns are
    # possible when unpacking arbitrary bytes as floats.
    values = [v - 2**31 for v in struct.unpack(f"<{dim}I", raw[: dim * 4])]
    magnitude = max(sum(v * v for v in values) ** 0.5, 1e-10)
    return [v / magnitude for v in values]


class MockEmbeddingProvider(IEmbeddingProvider):
    """Deterministic embedding provider; ``fail=True`` makes every call raise."""

    def __init__(self, dimension: int = _EMBEDDING_DIM, fail: bool = False) -> None:
        self._dimension = dimension
        self.fail = fail
        self.calls: list[str] = []

    async def embed(self, texts: list[str]) -> list[list[float]]:
        self.calls.extend(texts)
        if self.fail:
            raise EmbeddingError(message="embedding backend down", provider_name="mock-embedding")
        return [_hash_to_vector(t, self._dimension) for t in texts]

    async def embed_single(self, text: str) -> list[float]:
        return (await self.embed([text]))[0]

    def get_dimension(self) -> int:
        return self._dimension

    def get_provider_name(self) -> str:
        return "mock-embedding"

    def is_available(self) -> bool:
        return True


class MockVectorStore(IVectorStoreProvider):
    """Insertion-ordered in-memory store with cosine-style scoring."""

    def __init__(self) -> None:
        self.records: dict[str, tuple[list[float], dict[str, Any]]] = {}
        self.fail_lookup = False
        self.scans = 0

    async def find_by_marker(self, marker: str, page_size: int = 100) -> VectorRecord | None:
        if self.fail_lookup:
            raise VectorStoreError(message="scan failed", provider_name="mock-store")
        self.scans += 1
        for record_id, (vector, payload) in self.records.items():
            if payload.get("type") == marker:
                return VectorRecord(id=record_id, vector=list(vector), payload=dict(payload))
        return None

    async def upsert(self, record_id: str, vector: list[float], payload: dict[str, Any]) -> None:
        self.records[record_id] = (list(vector), dict(payload))

    async def delete(self, record_id: str) -> None:
        self.records.pop(record_id, None)

    async def query(
        self,
        vector: list[float],
        top_k: int = 6,
        exclude_marker: str | None = None,
    ) -> list[RetrievedSnippet]:
        scored = []
        for stored, payload in self.records.values():
            if exclude_marker is not None and payload.get("type") == exclude_marker:
                continue
            dot = sum(a * b for a, b in zip(vector, stored, strict=False))
            scored.append(
                RetrievedSnippet(content=payload.get("content", ""), score=max(0.0, min(1.0, dot)))
            )
        scored.sort(key=lambda s: s.score, reverse=True)
        return scored[:top_k]

    async def count(self) -> int:
        return len(self.records)

    def get_provider_name(self) -> str:
        return "mock-store"

    def is_available(self) -> bool:
        return True


class MockLLMProvider(ILLMProvider):
    """Streams a fixed list of chunks.

    ``fail_on_start`` raises before the first chunk; ``fail_after`` raises
    after that many chunks have been yielded.  ``closed`` records whether
    the stream's cleanup ran.
    """

    def __init__(
        self,
        chunks: list[str] | None = None,
        fail_on_start: bool = False,
        fail_after: int | None = None,
    ) -> None:
        self.chunks = chunks if chunks is not None else ["Hello", ", ", "world"]
        self.fail_on_start = fail_on_start
        self.fail_after = fail_after
        self.system_prompt: str | None = None
        self.messages: list[ChatMessage] = []
        self.closed = False
        self.yielded = 0

    async def stream(
        self,
        system_prompt: str,
        messages: list[ChatMessage],
        temperature: float = 0.5,
        max_tokens: int = 1024,
    ) -> AsyncIterator[str]:
        self.system_prompt = system_prompt
        self.messages = list(messages)
        try:
            if self.fail_on_start:
                raise LLMError(message="model unavailable", provider_name="mock-llm")
            for chunk in self.chunks:
                if self.fail_after is not None and self.yielded >= self.fail_after:
                    raise LLMError(message="stream broke", provider_name="mock-llm")
                self.yielded += 1
                yield chunk
        finally:
            self.closed = True

    async def complete(
        self,
        system_prompt: str,
        messages: list[ChatMessage],
        temperature: float = 0.5,
        max_tokens: int = 1024,
    ) -> str:
        return "".join([c async for c in self.stream(system_prompt, messages)])

    def get_provider_name(self) -> str:
        return "mock-llm"

    def is_available(self) -> bool:
        return True

    async def validate_credentials(self) -> bool:
        return True


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def embedding_provider() -> MockEmbeddingProvider:
    return MockEmbeddingProvider()


@pytest.fixture
def vector_store() -> MockVectorStore:
    return MockVectorStore()


@pytest.fixture
def llm_provider() -> MockLLMProvider:
    return MockLLMProvider()


@pytest.fixture
def profile_repository(
    embedding_provider: MockEmbeddingProvider,
    vector_store: MockVectorStore,
) -> ProfileRepository:
    return ProfileRepository(
        embedding_provider=embedding_provider,
        vector_store=vector_store,
        dimension=_EMBEDDING_DIM,
    )
