"""Pydantic request/response schemas for the BrandKit API.

Request bodies validate before any handler code runs: a malformed body is
a FastAPI 422 and never touches the store or a provider.  Profile payloads
reuse :class:`BrandAttributes` directly, so the wire keys are the camelCase
attribute names (``brandName``, ``preferredTone``, ...).
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from src.models.brand import BrandAttributes
from src.models.chat import ChatMessage


class SaveProfileRequest(BaseModel):
    """Body of ``POST /profile``."""

    model_config = ConfigDict(extra="forbid")

    variables: BrandAttributes


class ChatRequest(BaseModel):
    """Body of ``POST /chat``.

    ``profileOverride`` replaces the stored profile for this request only,
    and only when it carries at least one non-empty value.
    """

    model_config = ConfigDict(populate_by_name=True)

    messages: list[ChatMessage] = Field(..., min_length=1)
    profile_override: BrandAttributes | None = Field(default=None, alias="profileOverride")


class ProfileResponse(BaseModel):
    """Body of a successful ``GET /profile``; ``variables`` is ``{}`` when none is stored."""

    success: bool = True
    variables: dict[str, str] = Field(default_factory=dict)


class SaveProfileResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    message: str
    point_id: str = Field(alias="pointId")


class ResetProfileResponse(BaseModel):
    success: bool = True
    message: str


class ProfileErrorResponse(BaseModel):
    """Error body of the ``/profile`` endpoints."""

    success: bool = False
    error: str
    details: str | None = None


class ErrorResponse(BaseModel):
    """Error body of ``/chat`` and of the error-handling middleware."""

    error: str
    details: str | None = None


class HealthResponse(BaseModel):
    """Application health check response."""

    status: str
    providers: dict[str, Any]
    profile_collection: str
