"""Session and operation context using contextvars.

Values set here are picked up by the logging processors, so every log
line emitted while a store operation runs carries the signed-in user and
the course being worked on without passing them around explicitly.
"""

from contextvars import ContextVar
from typing import Any


user_id_var: ContextVar[str | None] = ContextVar("user_id", default=None)
course_id_var: ContextVar[str | None] = ContextVar("course_id", default=None)
operation_var: ContextVar[str | None] = ContextVar("operation", default=None)


def get_user_id() -> str | None:
    """Get the signed-in user ID."""
    return user_id_var.get()


def set_user_id(user_id: str | None) -> None:
    """Set the signed-in user ID (None on logout)."""
    user_id_var.set(str(user_id) if user_id is not None else None)


def get_course_id() -> str | None:
    """Get the course ID of the running operation."""
    return course_id_var.get()


def get_operation() -> str | None:
    """Get the name of the running operation."""
    return operation_var.get()


def get_context() -> dict[str, Any]:
    """Get all non-empty context variables as a dictionary."""
    context: dict[str, Any] = {}

    user_id = get_user_id()
    if user_id:
        context["user_id"] = user_id

    course_id = get_course_id()
    if course_id:
        context["course_id"] = course_id

    operation = get_operation()
    if operation:
        context["operation"] = operation

    return context


def clear_context() -> None:
    """Clear all context variables."""
    user_id_var.set(None)
    course_id_var.set(None)
    operation_var.set(None)


class OperationContext:
    """Context manager scoping a store operation.

    Usage:
        with OperationContext("enroll", course_id=course_id):
            logger.info("enrolling")  # includes operation and course_id
    """

    def __init__(self, operation: str, course_id: str | None = None) -> None:
        self.operation = operation
        self.course_id = course_id
        self._tokens: dict[str, Any] = {}

    def __enter__(self) -> "OperationContext":
        """Enter context and set variables."""
        self._tokens["operation"] = operation_var.set(self.operation)
        if self.course_id is not None:
            self._tokens["course_id"] = course_id_var.set(self.course_id)
        return self

    def __exit__(self, *_: object) -> None:
        """Exit context and restore previous values."""
        for var_name, token in self._tokens.items():
            if var_name == "operation":
                operation_var.reset(token)
            elif var_name == "course_id":
                course_id_var.reset(token)
