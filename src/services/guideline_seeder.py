"""Loads generic brand-guideline passages into the vector collection.

These are the snippets chat retrieval falls back on when the user has not
declared a profile, and that supplement the profile when they have.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

import structlog

from src.interfaces.embedding_provider import IEmbeddingProvider
from src.interfaces.vector_store_provider import IVectorStoreProvider
from src.models.rag import GuidelineDocument
from src.utils.logging import get_logger

logger: structlog.BoundLogger = get_logger(__name__)

GUIDELINE_MARKER = "brand_guideline"


class GuidelineSeeder:
    """Embeds guideline documents and stores each under a fresh id."""

    def __init__(
        self,
        embedding_provider: IEmbeddingProvider,
        vector_store: IVectorStoreProvider,
    ) -> None:
        self._embedding = embedding_provider
        self._store = vector_store

    async def seed(self, documents: list[GuidelineDocument]) -> list[str]:
        """Embed all *documents* in one batch and upsert them; return the new ids.

        The batch embeds as a whole: if any document fails to embed nothing
        is written.
        """
        if not documents:
            return []
        vectors = await self._embedding.embed([doc.content for doc in documents])
        created_at = datetime.now(timezone.utc).isoformat()

        ids: list[str] = []
        for doc, vector in zip(documents, vectors, strict=True):
            record_id = str(uuid.uuid4())
            await self._store.upsert(
                record_id,
                vector,
                {
                    "content": doc.content,
                    "type": GUIDELINE_MARKER,
                    "category": doc.category,
                    "createdAt": created_at,
                },
            )
            ids.append(record_id)

        logger.info("guidelines_seeded", count=len(ids))
        return ids
