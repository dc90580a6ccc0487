"""Logging setup for the client.

Every log record goes through one structlog processor chain. It adds the
ambient session context, masks credentials, and stamps the level and
time. The chain then hands the record to stdlib handlers. The console
renders for humans or as JSON. The optional log file is always JSON.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog
from structlog.types import EventDict, Processor

from learnwithme.core.context import get_context


if TYPE_CHECKING:
    from learnwithme.config.settings import Settings


# Key fragments whose string values never reach a log sink in clear text
_CREDENTIAL_MARKERS = ("password", "passwd", "secret", "token", "authorization", "credentials")

# Values up to this length are replaced entirely
_FULLY_HIDDEN_UP_TO = 4

_QUIET_LIBRARIES = ("httpx", "httpcore")


def _is_credential(key: Any) -> bool:
    lowered = str(key).lower()
    return any(marker in lowered for marker in _CREDENTIAL_MARKERS)


def _mask(value: str) -> str:
    if len(value) <= _FULLY_HIDDEN_UP_TO:
        return "***"
    hidden = len(value) - _FULLY_HIDDEN_UP_TO
    return f"{value[:2]}{'*' * hidden}{value[-2:]}"


def _scrub(key: Any, value: Any) -> Any:
    if isinstance(value, dict):
        return {inner_key: _scrub(inner_key, inner) for inner_key, inner in value.items()}
    if isinstance(value, list | tuple):
        return type(value)(_scrub(key, item) for item in value)
    if isinstance(value, str) and _is_credential(key):
        return _mask(value)
    return value


def filter_sensitive_data(
    logger: logging.Logger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Partially mask credential values, including inside nested payloads.

    ``"hunter22"`` under a ``password`` key is logged as ``"hu****22"``.
    """
    return {key: _scrub(key, value) for key, value in event_dict.items()}


def add_context_processor(
    logger: logging.Logger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Fill in user_id, course_id and operation unless the call already set them."""
    for key, value in get_context().items():
        event_dict.setdefault(key, value)
    return event_dict


def _processor_chain(settings: "Settings") -> list[Processor]:
    chain: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        add_context_processor,
        filter_sensitive_data,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if settings.log_include_caller_info:
        callsite = structlog.processors.CallsiteParameter
        chain.append(
            structlog.processors.CallsiteParameterAdder(
                parameters=[callsite.FILENAME, callsite.LINENO, callsite.FUNC_NAME]
            )
        )
    return chain


def _formatter(renderer: Processor, chain: list[Processor]) -> logging.Formatter:
    return structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=chain)


def _console_handler(settings: "Settings", chain: list[Processor]) -> logging.Handler:
    renderer: Processor
    if settings.log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=sys.stdout.isatty(),
            exception_formatter=structlog.dev.plain_traceback,
        )
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(_formatter(renderer, chain))
    return handler


def _file_handler(settings: "Settings", chain: list[Processor]) -> logging.Handler:
    directory = Path(settings.log_dir)
    directory.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        directory / f"{settings.app_name}.log",
        maxBytes=settings.log_file_max_bytes,
        backupCount=settings.log_file_backup_count,
        encoding="utf-8",
    )
    handler.setFormatter(_formatter(structlog.processors.JSONRenderer(), chain))
    return handler


def configure_structlog(settings: "Settings") -> None:
    """Route structlog and stdlib logging through the shared chain.

    Replaces any handlers already on the root logger, so calling it twice
    does not duplicate output.
    """
    level = logging.getLevelName(settings.log_level.upper())
    chain = _processor_chain(settings)

    handlers = [_console_handler(settings, chain)]
    if settings.log_to_file:
        handlers.append(_file_handler(settings, chain))

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)
    for handler in handlers:
        handler.setLevel(level)
        root.addHandler(handler)

    structlog.configure(
        processors=[*chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    for name in _QUIET_LIBRARIES:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
