# Core infrastructure
from learnwithme.core.context import (
    OperationContext,
    clear_context,
    get_context,
    get_course_id,
    get_operation,
    get_user_id,
    set_user_id,
)
from learnwithme.core.logging import configure_structlog, get_logger
from learnwithme.core.notifications import LoggingNotifier, Notifier


__all__ = [
    "LoggingNotifier",
    "Notifier",
    "OperationContext",
    "clear_context",
    "configure_structlog",
    "get_context",
    "get_course_id",
    "get_logger",
    "get_operation",
    "get_user_id",
    "set_user_id",
]
