"""User-facing acknowledgements raised by the state containers.

Stores report action-level outcomes (enroll, create, update, complete)
through a ``Notifier``. The presentation layer supplies one that shows a
modal dialog; the default only logs.
"""

from typing import Protocol

import structlog


logger = structlog.get_logger(__name__)


class Notifier(Protocol):
    """Receives modal acknowledgements for the user."""

    def alert(self, title: str, message: str) -> None: ...


class LoggingNotifier:
    """Notifier used when no presentation layer is attached."""

    def alert(self, title: str, message: str) -> None:
        logger.info("user_alert", title=title, alert_message=message)
