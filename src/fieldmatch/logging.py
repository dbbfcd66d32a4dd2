"""Structlog configuration for package-wide logging."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog

from fieldmatch.settings import Settings, get_settings

if TYPE_CHECKING:
    from structlog.typing import EventDict, Processor

_LOGGING_CONFIGURED = False

# Third-party loggers that flood INFO while downloading or loading models.
_NOISY_LOGGERS = ("sentence_transformers", "huggingface_hub", "urllib3", "filelock")


def _rename_event_key(
    logger: logging.Logger,  # noqa: ARG001
    method_name: str,  # noqa: ARG001
    event_dict: EventDict,
) -> EventDict:
    """Expose the structlog event under a `message` key.

    Args:
        logger: The logger instance (unused).
        method_name: The logging method name (unused).
        event_dict: The original event dictionary.

    Returns:
        The event dictionary with "message" instead of "event".
    """
    if "event" in event_dict:
        event_dict["message"] = event_dict.pop("event")
    return event_dict


def _build_handlers(log_file: str | None) -> list[logging.Handler]:
    """Build stdlib handlers for stderr and the optional log file.

    Args:
        log_file (str | None): Optional log file path.

    Returns:
        list[logging.Handler]: Handlers passed to `logging.basicConfig`.
    """
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(path, encoding="utf-8"))
    return handlers


def configure_logging(*, settings: Settings | None = None, force: bool = False) -> None:
    """Configure structlog and stdlib logging once for the package.

    Args:
        settings (Settings | None): Settings to read levels and outputs from.
        force (bool): Reconfigure even when logging was already configured.
    """
    global _LOGGING_CONFIGURED  # noqa: PLW0603

    if _LOGGING_CONFIGURED and not force:
        return

    config = settings or get_settings()
    log_level = getattr(logging, config.log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        handlers=_build_handlers(config.log_file),
        force=force,
    )
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))

    renderer: Any = structlog.processors.JSONRenderer(ensure_ascii=False)
    if not config.log_json:
        renderer = structlog.dev.ConsoleRenderer()

    processors: list[Processor] = [
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
        _rename_event_key,
        structlog.processors.format_exc_info,
        renderer,
    ]
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    _LOGGING_CONFIGURED = True


def get_logger(name: str = "fieldmatch") -> structlog.BoundLogger:
    """Return a package logger, configuring logging lazily.

    Args:
        name (str): Logger name.

    Returns:
        structlog.BoundLogger: Bound logger.
    """
    if not _LOGGING_CONFIGURED:
        configure_logging()
    return structlog.get_logger(name)
