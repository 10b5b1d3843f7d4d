"""ChromaDB vector store provider adapter.

Wraps a ChromaDB collection to implement :class:`IVectorStoreProvider`.
Uses a local ``PersistentClient`` by default, or an ``HttpClient`` when a
Chroma server host is configured.  Cosine distance; embeddings are always
computed by our own :class:`IEmbeddingProvider` and passed in explicitly.

Payload mapping
---------------
Chroma stores one document string plus flat scalar metadata per record.
``payload["content"]`` becomes the document.  Scalar payload fields are
stored as metadata as-is; dict/list fields are JSON-encoded and their names
recorded in the comma-separated ``_json_fields`` metadata key so reads can
restore them.
"""

from __future__ import annotations

import json
import os
from typing import Any

# Keep Chroma's anonymous telemetry off regardless of client version.
os.environ["ANONYMIZED_TELEMETRY"] = "False"

import chromadb
import structlog
from chromadb.config import Settings as ChromaSettings

from src.interfaces.vector_store_provider import IVectorStoreProvider
from src.models.rag import RetrievedSnippet, VectorRecord
from src.utils.errors import VectorStoreError

logger = structlog.get_logger(logger_name=__name__)

_JSON_FIELDS_KEY = "_json_fields"


class ChromaDBProvider(IVectorStoreProvider):
    """Vector store provider backed by a single ChromaDB collection.

    Parameters
    ----------
    dimension:
        Expected vector length.  Checked against stored data at startup and
        against every upserted vector.
    persist_directory:
        Local storage path (ignored when *host* is set).
    collection_name:
        Collection holding the profile record and guideline snippets.
    host, port:
        Remote Chroma server; when *host* is empty a local persistent
        client is used.
    client:
        Pre-built Chroma client (tests pass an ``EphemeralClient``).
    """

    def __init__(
        self,
        dimension: int,
        persist_directory: str = "./data/chromadb",
        collection_name: str = "brand-variables",
        host: str = "",
        port: int = 8000,
        client: Any | None = None,
    ) -> None:
        self._dimension = dimension
        self._collection_name = collection_name
        chroma_settings = ChromaSettings(anonymized_telemetry=False)
        try:
            if client is not None:
                self._client = client
            elif host:
                self._client = chromadb.HttpClient(host=host, port=port, settings=chroma_settings)
            else:
                self._client = chromadb.PersistentClient(
                    path=persist_directory, settings=chroma_settings
                )
            # No embedding function: every vector is pre-computed, so Chroma
            # must never download or call its default model.  Collections
            # created by an older client may have one persisted, in which
            # case Chroma refuses the override and we open it as-is.
            try:
                self._collection = self._client.get_or_create_collection(
                    name=collection_name,
                    metadata={"hnsw:space": "cosine"},
                    embedding_function=None,
                )
            except ValueError:
                self._collection = self._client.get_or_create_collection(
                    name=collection_name,
                    metadata={"hnsw:space": "cosine"},
                )
        except Exception as exc:
            raise VectorStoreError(
                message=f"ChromaDB collection '{collection_name}' unavailable: {exc}",
                provider_name="chromadb",
            ) from exc

        self._validate_embedding_dimensions()

    # ------------------------------------------------------------------
    # Startup validation
    # ------------------------------------------------------------------

    def _validate_embedding_dimensions(self) -> None:
        """Verify stored vectors match the configured dimension.

        Peeks at a single stored vector.  A mismatch means every query and
        every profile save would be rejected or meaningless -- fail loud.
        """
        try:
            if self._collection.count() == 0:
                return
            sample = self._collection.peek(limit=1)
            embeddings = sample.get("embeddings") if sample else None
            if embeddings is None or len(embeddings) == 0:
                return
            stored_dim = len(embeddings[0])
        except Exception as exc:
            logger.warning("embedding_dimension_check_skipped", error=str(exc))
            return

        if stored_dim != self._dimension:
            logger.error(
                "embedding_dimension_mismatch",
                stored_dim=stored_dim,
                expected_dim=self._dimension,
                collection=self._collection_name,
            )
            raise VectorStoreError(
                message=(
                    f"Embedding dimension mismatch: collection '{self._collection_name}' "
                    f"holds {stored_dim}-dim vectors but the embedding provider produces "
                    f"{self._dimension}-dim vectors."
                ),
                provider_name="chromadb",
            )
        logger.info(
            "embedding_dimension_validated",
            dimension=stored_dim,
            collection=self._collection_name,
        )

    # ------------------------------------------------------------------
    # IVectorStoreProvider implementation
    # ------------------------------------------------------------------

    async def find_by_marker(self, marker: str, page_size: int = 100) -> VectorRecord | None:
        """Page through the collection and return the first record typed *marker*."""
        try:
            offset = 0
            scanned = 0
            while True:
                page = self._collection.get(
                    include=["metadatas"],
                    limit=page_size,
                    offset=offset,
                )
                ids = page["ids"] or []
                metadatas = page["metadatas"] or []
                for record_id, meta in zip(ids, metadatas, strict=False):
                    if meta and meta.get("type") == marker:
                        logger.debug(
                            "chromadb_marker_found",
                            marker=marker,
                            record_id=record_id,
                            scanned=scanned + 1,
                        )
                        return self._load_record(record_id)
                    scanned += 1
                if len(ids) < page_size:
                    break
                offset += page_size
        except VectorStoreError:
            raise
        except Exception as exc:
            raise VectorStoreError(
                message=f"ChromaDB scan for '{marker}' failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        logger.debug("chromadb_marker_not_found", marker=marker, scanned=scanned)
        return None

    async def upsert(self, record_id: str, vector: list[float], payload: dict[str, Any]) -> None:
        """Create or replace one record; dict/list payload fields are JSON-encoded."""
        if len(vector) != self._dimension:
            raise VectorStoreError(
                message=(
                    f"vector length {len(vector)} does not match "
                    f"collection dimension {self._dimension}"
                ),
                provider_name=self.get_provider_name(),
            )
        document, metadata = self._payload_to_chroma(payload)
        kwargs: dict[str, Any] = {
            "ids": [record_id],
            "embeddings": [list(vector)],
            "documents": [document],
        }
        if metadata:
            kwargs["metadatas"] = [metadata]
        try:
            self._collection.upsert(**kwargs)
        except Exception as exc:
            raise VectorStoreError(
                message=f"ChromaDB upsert failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc
        logger.info(
            "chromadb_upsert",
            record_id=record_id,
            record_type=metadata.get("type"),
            content_length=len(document),
        )

    async def delete(self, record_id: str) -> None:
        try:
            self._collection.delete(ids=[record_id])
        except Exception as exc:
            raise VectorStoreError(
                message=f"ChromaDB delete failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc
        logger.info("chromadb_delete", record_id=record_id)

    async def query(
        self,
        vector: list[float],
        top_k: int = 6,
        exclude_marker: str | None = None,
    ) -> list[RetrievedSnippet]:
        """Return the *top_k* nearest documents, converting cosine distance to similarity."""
        try:
            total = self._collection.count()
            if total == 0 or top_k <= 0:
                return []
            query_kwargs: dict[str, Any] = {
                "query_embeddings": [list(vector)],
                "n_results": min(top_k, total),
                "include": ["documents", "distances"],
            }
            if exclude_marker is not None:
                query_kwargs["where"] = {"type": {"$ne": exclude_marker}}
            results = self._collection.query(**query_kwargs)
        except Exception as exc:
            raise VectorStoreError(
                message=f"ChromaDB query failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        if not results["documents"] or not results["documents"][0]:
            return []

        documents = results["documents"][0]
        distances = results["distances"][0] if results["distances"] else [0.0] * len(documents)

        snippets = [
            RetrievedSnippet(content=doc or "", score=max(0.0, min(1.0, 1.0 - distance)))
            for doc, distance in zip(documents, distances, strict=True)
        ]
        snippets.sort(key=lambda s: s.score, reverse=True)

        logger.info(
            "chromadb_query",
            results_count=len(snippets),
            top_score=snippets[0].score if snippets else 0.0,
        )
        return snippets

    async def count(self) -> int:
        try:
            return self._collection.count()
        except Exception as exc:
            raise VectorStoreError(
                message=f"ChromaDB count failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

    def get_provider_name(self) -> str:
        return "chromadb"

    def is_available(self) -> bool:
        """Return ``True`` if the ChromaDB collection is accessible."""
        try:
            self._collection.count()
            return True
        except Exception:
            return False

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _load_record(self, record_id: str) -> VectorRecord | None:
        """Fetch one record with its vector, document and metadata."""
        result = self._collection.get(
            ids=[record_id],
            include=["embeddings", "documents", "metadatas"],
        )
        if not result["ids"]:
            return None
        embeddings = result.get("embeddings")
        vector = None
        if embeddings is not None and len(embeddings) > 0:
            vector = [float(v) for v in embeddings[0]]
        documents = result.get("documents") or [""]
        metadatas = result.get("metadatas") or [{}]
        payload = self._chroma_to_payload(documents[0], metadatas[0])
        return VectorRecord(id=record_id, vector=vector, payload=payload)

    @staticmethod
    def _payload_to_chroma(payload: dict[str, Any]) -> tuple[str, dict[str, str | int | float | bool]]:
        """Split a payload into Chroma's document string and flat metadata.

        ``None`` values are dropped (Chroma metadata cannot hold them).
        """
        document = str(payload.get("content", ""))
        metadata: dict[str, str | int | float | bool] = {}
        json_fields: list[str] = []
        for key, value in payload.items():
            if key == "content" or value is None:
                continue
            if isinstance(value, (dict, list)):
                metadata[key] = json.dumps(value, ensure_ascii=False)
                json_fields.append(key)
            elif isinstance(value, (str, int, float, bool)):
                metadata[key] = value
            else:
                metadata[key] = str(value)
        if json_fields:
            metadata[_JSON_FIELDS_KEY] = ",".join(json_fields)
        return document, metadata

    @staticmethod
    def _chroma_to_payload(document: str | None, metadata: dict[str, Any] | None) -> dict[str, Any]:
        """Reverse :meth:`_payload_to_chroma`."""
        meta = dict(metadata or {})
        json_fields = ChromaDBProvider._split_fields(meta.pop(_JSON_FIELDS_KEY, ""))
        payload: dict[str, Any] = {"content": document or ""}
        for key, value in meta.items():
            if key in json_fields and isinstance(value, str):
                try:
                    payload[key] = json.loads(value)
                except json.JSONDecodeError:
                    logger.warning("chromadb_payload_field_undecodable", field=key)
                    payload[key] = value
            else:
                payload[key] = value
        return payload

    @staticmethod
    def _split_fields(value: str | Any) -> list[str]:
        """Split a comma-separated field-name string back into a list."""
        if not value or not isinstance(value, str):
            return []
        return [name.strip() for name in value.split(",") if name.strip()]
