"""Retrieval data models.

``VectorRecord`` is the adapter-level view of one stored point;
``RetrievedSnippet`` is a per-query search hit and is never persisted.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class VectorRecord(BaseModel):
    """One point in the vector store: id, vector and free-form payload.

    ``payload["content"]`` holds the stored text; other keys are metadata.
    ``vector`` is ``None`` when the adapter was not asked to load it.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    vector: list[float] | None = None
    payload: dict[str, Any] = Field(default_factory=dict)


class RetrievedSnippet(BaseModel):
    """A text snippet returned by a similarity query."""

    model_config = ConfigDict(frozen=True)

    content: str
    score: float = Field(description="Cosine similarity; higher is more relevant.")


class GuidelineDocument(BaseModel):
    """A generic brand-guideline passage loaded into the collection by the seed command."""

    model_config = ConfigDict(frozen=True)

    content: str = Field(min_length=1)
    category: str = "general"
