"""FastAPI routes for the BrandKit service.

# ─── API ROUTE MAP ─────────────────────────────────────────────────────
#
# Endpoint      Method  Description
# ─────────────────────────────────────────────────────────────────────
# /profile      GET     Read the stored brand profile
# /profile      POST    Create or replace the stored brand profile
# /profile      DELETE  Delete the stored brand profile
# /chat         POST    Stream a brand-consistent answer (text/plain)
# /health       GET     Provider availability
#
# Services are resolved from ``app.state`` (populated at startup in
# main.py's _build_all) through Annotated ``Depends`` helpers.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from typing import Annotated, Any

import structlog
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, StreamingResponse

from src.api.schemas import (
    ChatRequest,
    ErrorResponse,
    HealthResponse,
    ProfileErrorResponse,
    ProfileResponse,
    ResetProfileResponse,
    SaveProfileRequest,
    SaveProfileResponse,
)
from src.services.chat_pipeline import ChatPipeline
from src.services.profile_repository import ProfileRepository
from src.utils.errors import BrandKitError
from src.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Dependency injection helpers: resolve singletons from app.state
# ---------------------------------------------------------------------------


def _get_profile_repository(request: Request) -> ProfileRepository:
    """Return the profile repository from application state."""
    return request.app.state.profile_repository


def _get_chat_pipeline(request: Request) -> ChatPipeline:
    """Return the chat pipeline from application state."""
    return request.app.state.chat_pipeline


ProfileRepoDep = Annotated[ProfileRepository, Depends(_get_profile_repository)]
ChatPipelineDep = Annotated[ChatPipeline, Depends(_get_chat_pipeline)]


def _profile_error(error: str, exc: Exception) -> JSONResponse:
    body = ProfileErrorResponse(error=error, details=str(exc))
    return JSONResponse(status_code=500, content=body.model_dump())


# ---------------------------------------------------------------------------
# Profile endpoints
# ---------------------------------------------------------------------------


@router.get(
    "/profile",
    response_model=ProfileResponse,
    responses={500: {"model": ProfileErrorResponse}},
    summary="Read the stored brand profile",
)
async def get_profile(repository: ProfileRepoDep) -> ProfileResponse | JSONResponse:
    try:
        attributes = await repository.get()
    except BrandKitError as exc:
        _logger.error("profile_read_failed", error=str(exc))
        return _profile_error("Failed to retrieve brand variables", exc)
    return ProfileResponse(variables=attributes.to_mapping())


@router.post(
    "/profile",
    response_model=SaveProfileResponse,
    responses={500: {"model": ProfileErrorResponse}},
    summary="Create or replace the stored brand profile",
)
async def save_profile(
    body: SaveProfileRequest,
    repository: ProfileRepoDep,
) -> SaveProfileResponse | JSONResponse:
    try:
        point_id = await repository.save(body.variables)
    except BrandKitError as exc:
        _logger.error("profile_save_failed", error=str(exc))
        return _profile_error("Failed to save brand variables", exc)
    return SaveProfileResponse(message="Brand variables saved successfully", point_id=point_id)


@router.delete(
    "/profile",
    response_model=ResetProfileResponse,
    responses={500: {"model": ProfileErrorResponse}},
    summary="Delete the stored brand profile",
)
async def reset_profile(repository: ProfileRepoDep) -> ResetProfileResponse | JSONResponse:
    try:
        found = await repository.reset()
    except BrandKitError as exc:
        _logger.error("profile_reset_failed", error=str(exc))
        return _profile_error("Failed to reset brand variables", exc)
    message = (
        "Brand variables reset successfully" if found else "No brand variables found to reset"
    )
    return ResetProfileResponse(message=message)


# ---------------------------------------------------------------------------
# Chat endpoint
# ---------------------------------------------------------------------------


@router.post(
    "/chat",
    response_class=StreamingResponse,
    response_model=None,
    responses={
        200: {"content": {"text/plain": {}}},
        500: {"model": ErrorResponse},
    },
    summary="Stream a brand-consistent chat answer",
)
async def chat(body: ChatRequest, pipeline: ChatPipelineDep) -> StreamingResponse | JSONResponse:
    """Stream the answer as plain-text chunks.

    Failures before the first chunk become a 500 JSON body; after that the
    status is already sent and the stream simply ends.
    """
    try:
        chunks = await pipeline.start(body.messages, body.profile_override)
    except BrandKitError as exc:
        _logger.error(
            "chat_failed",
            error_type=type(exc).__name__,
            error=str(exc),
            message_count=len(body.messages),
        )
        payload = ErrorResponse(error="Failed to process request", details=str(exc))
        return JSONResponse(status_code=500, content=payload.model_dump())
    return StreamingResponse(chunks, media_type="text/plain; charset=utf-8")


# ---------------------------------------------------------------------------
# System endpoints
# ---------------------------------------------------------------------------


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Application health check",
)
async def health_check(request: Request) -> HealthResponse:
    """Return provider availability and the collection in use."""
    state = request.app.state
    providers: dict[str, Any] = {
        "embedding": state.embedding_provider.is_available(),
        "vector_store": state.vector_store.is_available(),
        "llm": state.llm_provider.is_available(),
    }
    status = "healthy" if all(providers.values()) else "degraded"
    return HealthResponse(
        status=status,
        providers=providers,
        profile_collection=state.settings.chromadb_collection,
    )
