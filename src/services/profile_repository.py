"""Repository for the single user-defined brand profile.

The profile lives in the same vector collection as the generic guideline
snippets, tagged with ``type == PROFILE_MARKER``.  There is no index on the
marker: every lookup pages through the collection until it finds the first
tagged record.

Concurrency note
----------------
``save`` is lookup-then-upsert with no locking.  Two saves racing on an
empty store can both miss the lookup and create two profile records; reads
then return whichever the scan meets first.  The condition is left
observable rather than masked (see DESIGN.md for the fix options).
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

import structlog

from src.interfaces.embedding_provider import IEmbeddingProvider
from src.interfaces.vector_store_provider import IVectorStoreProvider
from src.models.brand import PROFILE_MARKER, BrandAttributes, BrandProfile
from src.models.rag import VectorRecord
from src.utils.errors import BrandKitError
from src.utils.logging import get_logger
from src.utils.text import truncate

logger: structlog.BoundLogger = get_logger(__name__)

_CONTENT_HEADER = "User Brand Variables:\n"
_MAX_VALUE_CHARS = 500
_MAX_CONTENT_CHARS = 2000


class ProfileRepository:
    """Reads and writes the singleton brand profile record.

    Parameters
    ----------
    embedding_provider:
        Embeds the serialized profile text on save.
    vector_store:
        Collection holding the profile record alongside guideline snippets.
    dimension:
        Vector length used for the zero-vector fallback when embedding fails.
    """

    def __init__(
        self,
        embedding_provider: IEmbeddingProvider,
        vector_store: IVectorStoreProvider,
        dimension: int,
    ) -> None:
        self._embedding = embedding_provider
        self._store = vector_store
        self._dimension = dimension

    async def save(self, attributes: BrandAttributes) -> str:
        """Create or replace the profile and return its record id.

        Embedding failure is not fatal: the record is stored with a zero
        vector and ``hasEmbedding = False`` so the values are still
        retrievable through :meth:`get`.

        Raises
        ------
        src.utils.errors.VectorStoreError
            If the upsert itself fails.
        """
        content = self.serialize(attributes)

        try:
            vector = await self._embedding.embed_single(content)
        except BrandKitError as exc:
            logger.warning(
                "profile_embedding_fallback",
                error=str(exc),
                dimension=self._dimension,
            )
            vector = [0.0] * self._dimension
        has_embedding = any(v != 0 for v in vector)

        try:
            existing = await self._store.find_by_marker(PROFILE_MARKER)
        except BrandKitError as exc:
            logger.warning("profile_lookup_failed", error=str(exc))
            existing = None
        record_id = existing.id if existing else str(uuid.uuid4())

        await self._store.upsert(
            record_id,
            vector,
            {
                "content": content,
                "type": PROFILE_MARKER,
                "variables": attributes.to_mapping(),
                "updatedAt": datetime.now(timezone.utc).isoformat(),
                "hasEmbedding": has_embedding,
            },
        )
        logger.info(
            "profile_saved",
            record_id=record_id,
            replaced=existing is not None,
            has_embedding=has_embedding,
            content_length=len(content),
        )
        return record_id

    async def get(self) -> BrandAttributes:
        """Return the stored attributes, or an empty set when no profile exists."""
        record = await self._store.find_by_marker(PROFILE_MARKER)
        if record is None:
            return BrandAttributes()
        return BrandAttributes.from_stored(record.payload.get("variables"))

    async def load(self) -> BrandProfile | None:
        """Return the full stored record view, or ``None``."""
        record = await self._store.find_by_marker(PROFILE_MARKER)
        if record is None:
            return None
        return self._to_profile(record)

    async def reset(self) -> bool:
        """Delete the profile; return whether a record was found."""
        record = await self._store.find_by_marker(PROFILE_MARKER)
        if record is None:
            logger.info("profile_reset_noop")
            return False
        await self._store.delete(record.id)
        logger.info("profile_reset", record_id=record.id)
        return True

    @staticmethod
    def serialize(attributes: BrandAttributes) -> str:
        """Render the length-bounded text that is embedded and stored as ``content``."""
        lines = [
            f"{key}: {truncate(value, _MAX_VALUE_CHARS)}"
            for key, value in attributes.non_empty_items()
        ]
        return truncate(_CONTENT_HEADER + "\n".join(lines), _MAX_CONTENT_CHARS)

    @staticmethod
    def _to_profile(record: VectorRecord) -> BrandProfile:
        payload = record.payload
        updated_at = None
        raw_updated = payload.get("updatedAt")
        if isinstance(raw_updated, str):
            try:
                updated_at = datetime.fromisoformat(raw_updated)
            except ValueError:
                logger.warning("profile_timestamp_unparseable", value=raw_updated)
        vector = record.vector or []
        return BrandProfile(
            id=record.id,
            attributes=BrandAttributes.from_stored(payload.get("variables")),
            content=str(payload.get("content", "")),
            vector=vector,
            has_embedding=bool(payload.get("hasEmbedding", any(v != 0 for v in vector))),
            updated_at=updated_at,
        )
