"""Abstract base class for vector-store service providers.

A deliberately narrow interface over an external similarity-search
database: paginated scan by payload marker, upsert by id, delete by id,
and top-k similarity query.  The profile repository builds its
single-record contract on top of these four operations.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from src.models.rag import RetrievedSnippet, VectorRecord


# Concrete implementation: ChromaDBProvider (src/providers/vector_store/)
class IVectorStoreProvider(ABC):
    """Contract for the vector store backing profiles and guideline snippets.

    Methods are async so network-backed stores do not block the event loop.
    Every backend failure is raised as
    :class:`~src.utils.errors.VectorStoreError`.
    """

    @abstractmethod
    async def find_by_marker(self, marker: str, page_size: int = 100) -> VectorRecord | None:
        """Return the first record whose payload ``type`` equals *marker*.

        The store has no unique index on payload fields, so this pages
        through the collection (*page_size* records per page) and scans
        each page linearly.  The returned record includes its vector.

        Returns
        -------
        VectorRecord | None
            The first match, or ``None`` if no record carries the marker.
        """

    @abstractmethod
    async def upsert(self, record_id: str, vector: list[float], payload: dict[str, Any]) -> None:
        """Create or replace the record with id *record_id*.

        Parameters
        ----------
        record_id:
            Point identifier.  An existing record with this id is replaced
            entirely (vector and payload).
        vector:
            Embedding vector; length must equal the collection dimension.
        payload:
            ``content`` is the record text; remaining keys are metadata.
            Values may be scalars, lists or dicts.
        """

    @abstractmethod
    async def delete(self, record_id: str) -> None:
        """Delete the record with id *record_id* (no error if absent)."""

    @abstractmethod
    async def query(
        self,
        vector: list[float],
        top_k: int = 6,
        exclude_marker: str | None = None,
    ) -> list[RetrievedSnippet]:
        """Return up to *top_k* records nearest to *vector*, most similar first.

        Records whose payload ``type`` equals *exclude_marker* are skipped.
        """

    @abstractmethod
    async def count(self) -> int:
        """Return the number of records in the collection."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier, e.g. ``"chromadb"``."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if the collection is reachable."""
