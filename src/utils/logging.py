"""Structured logging setup using structlog.

Every event carries ``service="brandkit"`` and the ``component`` that
configured logging (``api`` for the HTTP server, ``cli`` for the operator
tools), so API and CLI output can share one log sink.  Values of
credential-looking keys are masked before rendering.

Rendering is a coloured ConsoleRenderer in development and a JSONRenderer
when ``APP_ENV=production`` or ``json_output=True``.  Standard-library
``logging`` (uvicorn, httpx, chromadb, the SDK clients) goes through the
same processor chain.
"""

import logging
import os
import sys
from collections.abc import MutableMapping
from typing import Any

import structlog

SERVICE_NAME = "brandkit"

# Libraries that log every request at INFO; kept at WARNING so chat
# streaming does not flood the console.
_NOISY_LOGGERS = ("httpx", "httpcore", "chromadb", "openai", "anthropic")

_SECRET_SUFFIXES = ("api_key", "apikey", "token", "authorization", "password")
_MASK = "***"


def redact_secrets(
    _logger: Any, _method: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """Mask the value of any key that names a credential."""
    for key, value in event_dict.items():
        if value and key.lower().endswith(_SECRET_SUFFIXES):
            event_dict[key] = _MASK
    return event_dict


def _service_context(component: str) -> structlog.types.Processor:
    def add_service(
        _logger: Any, _method: str, event_dict: MutableMapping[str, Any]
    ) -> MutableMapping[str, Any]:
        event_dict.setdefault("service", SERVICE_NAME)
        event_dict.setdefault("component", component)
        return event_dict

    return add_service


def configure_logging(
    log_level: str = "INFO",
    json_output: bool = False,
    component: str = "api",
) -> structlog.BoundLogger:
    """Configure structlog with environment-appropriate rendering.

    Args:
        log_level: Logging level string (DEBUG, INFO, WARNING, ERROR).
        json_output: Force JSON output. When False, JSON is still used if
                     ``APP_ENV`` is ``production``.
        component: Value of the ``component`` field on every event.

    Returns:
        A configured structlog BoundLogger.
    """
    app_env = os.environ.get("APP_ENV", "development")
    use_json = json_output or app_env == "production"

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        _service_context(component),
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        redact_secrets,
    ]

    if use_json:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())

    structlog.configure(
        processors=[*shared_processors, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(log_level.upper())
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                *shared_processors,
                renderer,
            ],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level.upper())

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return structlog.get_logger()


def get_logger(name: str) -> structlog.BoundLogger:
    """Return a structlog logger bound with *name*, configuring defaults if needed."""
    if not structlog.is_configured():
        configure_logging()

    return structlog.get_logger(logger_name=name)
