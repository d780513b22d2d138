"""
Structured logging with per-request correlation IDs.

JSON lines in production, colored console output in development.
Operator identity is bound to the request context once the session is
restored, so every event logged while handling a request carries it.
Credentials never reach the output and national ids are masked.
"""

import logging
import sys
import uuid
from contextvars import ContextVar
from typing import Any

import structlog
from structlog.types import Processor

from condo_gate.core.config import Settings, get_settings

correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="")


def get_correlation_id() -> str:
    """Correlation ID of the request being handled, or an empty string."""
    return correlation_id_var.get()


def set_correlation_id(correlation_id: str | None = None) -> str:
    """
    Set the correlation ID for the current request context.

    Args:
        correlation_id: Incoming ID to reuse. A new UUID is generated if None.

    Returns:
        str: The correlation ID in effect.
    """
    cid = correlation_id or str(uuid.uuid4())
    correlation_id_var.set(cid)
    structlog.contextvars.clear_contextvars()
    return cid


def bind_operator(user_id: str, role: str) -> None:
    """Attach the signed-in operator to every log event of this request."""
    structlog.contextvars.bind_contextvars(operator_id=user_id, operator_role=role)


SECRET_FIELDS = frozenset({"secret", "access_token", "token"})


def mask_personal_data(
    logger: logging.Logger,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """
    Structlog processor hiding credentials and national ids.

    Secrets and tokens are replaced outright. A national id keeps only its
    last two digits, enough to tell operators apart in a failed-login trail.
    """
    for key in SECRET_FIELDS & event_dict.keys():
        event_dict[key] = "***"
    national_id = event_dict.get("national_id")
    if national_id is not None:
        digits = "".join(ch for ch in str(national_id) if ch.isdigit())
        event_dict["national_id"] = "*" * max(len(digits) - 2, 0) + digits[-2:]
    return event_dict


def add_correlation_id(
    logger: logging.Logger,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Structlog processor adding ``correlation_id`` when one is set."""
    correlation_id = get_correlation_id()
    if correlation_id:
        event_dict["correlation_id"] = correlation_id
    return event_dict


def drop_color_message_key(
    logger: logging.Logger,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Structlog processor removing uvicorn's duplicate ``color_message``."""
    event_dict.pop("color_message", None)
    return event_dict


def setup_logging(settings: Settings | None = None) -> None:
    """
    Configure structlog and the standard library root logger.

    Args:
        settings: Settings to read level and format from. Defaults to the
            cached application settings.
    """
    settings = settings or get_settings()
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    common_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        add_correlation_id,
        drop_color_message_key,
        mask_personal_data,
    ]

    if settings.log_format == "json":
        processors: list[Processor] = [
            *common_processors,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(ensure_ascii=False),
        ]
    else:
        processors = [
            *common_processors,
            structlog.dev.ConsoleRenderer(colors=True),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )

    logging.getLogger("uvicorn").setLevel(logging.WARNING)
    # Request lines only while debugging; access events are logged by the app.
    logging.getLogger("uvicorn.access").setLevel(
        logging.INFO if settings.debug else logging.WARNING
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger.

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("access_registered", event_id=42, direction="Entry")
    """
    return structlog.get_logger(name)
