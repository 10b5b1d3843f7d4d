"""BrandKit FastAPI application entry point.

Wires together providers, services, and routes via dependency injection.
Loads configuration from ``.env`` and ``config/config.yaml`` and configures
structured logging.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

import structlog
import uvicorn
from fastapi import FastAPI

from src.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
)
from src.api.routes import router as api_router
from src.config.loader import load_config
from src.config.settings import Settings
from src.interfaces.embedding_provider import IEmbeddingProvider
from src.interfaces.llm_provider import ILLMProvider
from src.interfaces.vector_store_provider import IVectorStoreProvider
from src.providers.embedding.openai_embedding_provider import OpenAIEmbeddingProvider
from src.providers.llm.anthropic_provider import AnthropicLLMProvider
from src.providers.llm.openai_provider import OpenAILLMProvider
from src.providers.vector_store.chromadb_provider import ChromaDBProvider
from src.services.chat_pipeline import ChatPipeline
from src.services.context_assembler import ContextAssembler
from src.services.profile_repository import ProfileRepository
from src.utils.logging import configure_logging, get_logger

_VERSION = "0.1.0"

# ---------------------------------------------------------------------------
# Module-level settings & logging
# ---------------------------------------------------------------------------

settings = Settings()
config = load_config(settings=settings)

configure_logging(
    log_level=settings.log_level,
    json_output=(settings.app_env == "production"),
    component="api",
)
_logger: structlog.BoundLogger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Provider selection
# ---------------------------------------------------------------------------


def _build_llm_provider(app_settings: Settings) -> ILLMProvider:
    """Anthropic when its key is set, otherwise the OpenAI-compatible provider.

    The OpenAI-compatible provider is returned even without a key so the
    app still starts; ``/health`` reports it unavailable and chat requests
    fail with a provider error.
    """
    if app_settings.anthropic_api_key:
        return AnthropicLLMProvider(settings=app_settings)
    if not app_settings.openai_api_key:
        _logger.warning("llm_provider_unconfigured", fallback="openai-compatible")
    return OpenAILLMProvider(settings=app_settings)


def _build_embedding_provider(app_settings: Settings) -> IEmbeddingProvider:
    provider = OpenAIEmbeddingProvider(settings=app_settings)
    if not provider.is_available():
        _logger.warning(
            "embedding_provider_unconfigured",
            provider=provider.get_provider_name(),
        )
    return provider


def _build_vector_store(app_settings: Settings, dimension: int) -> IVectorStoreProvider:
    return ChromaDBProvider(
        dimension=dimension,
        persist_directory=app_settings.chromadb_persist_dir,
        collection_name=app_settings.chromadb_collection,
        host=app_settings.chromadb_host,
        port=app_settings.chromadb_port,
    )


# ---------------------------------------------------------------------------
# Full DI assembly for the FastAPI application
# ---------------------------------------------------------------------------


def _build_all(app_settings: Settings, app_config: dict[str, Any]) -> dict[str, Any]:
    """Construct every provider and service instance for the application.

    Returns a flat dict of named components to be stored on ``app.state``.

    Raises
    ------
    src.utils.errors.VectorStoreError
        If the collection cannot be opened or holds vectors of another
        dimension.
    """
    embedding_provider = _build_embedding_provider(app_settings)
    dimension = embedding_provider.get_dimension()
    vector_store = _build_vector_store(app_settings, dimension)
    llm_provider = _build_llm_provider(app_settings)

    profile_repository = ProfileRepository(
        embedding_provider=embedding_provider,
        vector_store=vector_store,
        dimension=dimension,
    )
    chat_cfg = app_config.get("chat", {})
    chat_pipeline = ChatPipeline(
        embedding_provider=embedding_provider,
        vector_store=vector_store,
        llm_provider=llm_provider,
        profile_repository=profile_repository,
        system_prompt=chat_cfg["system_prompt"],
        assembler=ContextAssembler(),
        top_k=chat_cfg.get("top_k", app_settings.rag_top_k),
        temperature=chat_cfg.get("temperature", app_settings.chat_temperature),
        max_tokens=chat_cfg.get("max_tokens", app_settings.chat_max_tokens),
    )

    return {
        "settings": app_settings,
        "embedding_provider": embedding_provider,
        "vector_store": vector_store,
        "llm_provider": llm_provider,
        "profile_repository": profile_repository,
        "chat_pipeline": chat_pipeline,
    }


@asynccontextmanager
async def _lifespan(application: FastAPI):  # noqa: ANN201
    """Initialise all providers and services on startup."""
    components = _build_all(settings, config)

    for key, value in components.items():
        setattr(application.state, key, value)

    _logger.info(
        "app_startup",
        version=_VERSION,
        environment=settings.app_env,
        llm=components["llm_provider"].get_provider_name(),
        embedding=components["embedding_provider"].get_provider_name(),
        collection=settings.chromadb_collection,
    )

    yield

    _logger.info("app_shutdown")


# ---------------------------------------------------------------------------
# FastAPI application factory
# ---------------------------------------------------------------------------


def create_app() -> FastAPI:
    """Build and configure the FastAPI application."""
    application = FastAPI(
        title="BrandKit API",
        version=_VERSION,
        description=(
            "Store a brand profile and chat with a model that answers in the "
            "brand's voice, grounded in the profile and retrieved guidelines."
        ),
        lifespan=_lifespan,
    )

    # -- Middleware (order matters: last added = first executed) --
    application.add_middleware(ErrorHandlingMiddleware)
    application.add_middleware(RequestLoggingMiddleware)
    configure_cors(application)

    application.include_router(api_router)
    return application


app = create_app()

# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    uvicorn.run(
        "src.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=(settings.app_env == "development"),
    )
