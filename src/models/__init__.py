"""Pydantic v2 data models for BrandKit.

All models are frozen: a stored profile or retrieved snippet is a value,
never mutated in place.
"""

from src.models.brand import PROFILE_MARKER, BrandAttributes, BrandProfile
from src.models.chat import ChatMessage
from src.models.rag import GuidelineDocument, RetrievedSnippet, VectorRecord

__all__ = [
    "PROFILE_MARKER",
    "BrandAttributes",
    "BrandProfile",
    "ChatMessage",
    "GuidelineDocument",
    "RetrievedSnippet",
    "VectorRecord",
]
