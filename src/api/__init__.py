"""BrandKit API layer: routes, schemas, and middleware."""

from src.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
)
from src.api.routes import router
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

__all__ = [
    "ErrorHandlingMiddleware",
    "RequestLoggingMiddleware",
    "configure_cors",
    "router",
    "ChatRequest",
    "ErrorResponse",
    "HealthResponse",
    "ProfileErrorResponse",
    "ProfileResponse",
    "ResetProfileResponse",
    "SaveProfileRequest",
    "SaveProfileResponse",
]
