"""Tagged error taxonomy for backend calls.

Every failure leaving ``learnwithme.api`` is an ``ApiError`` carrying an
``ApiErrorKind``. Callers branch on the kind, never on message text.
"""

from enum import Enum
from typing import Any


class ApiErrorKind(str, Enum):
    """Stable failure categories."""

    VALIDATION = "validation"  # rejected before any request
    UNAUTHENTICATED = "unauthenticated"  # no session token for an auth call
    REQUEST_REJECTED = "request_rejected"  # HTTP 4xx
    TRANSPORT = "transport"  # connection, timeout, HTTP 5xx
    NOT_FOUND = "not_found"  # expected absence (not enrolled, no record)
    CONFLICT = "conflict"  # duplicate enrollment
    SERVER = "server"  # any other GraphQL error

    @property
    def is_transient(self) -> bool:
        """Whether an automatic retry may succeed."""
        return self is ApiErrorKind.TRANSPORT


class ApiError(Exception):
    """Failure of a backend call or of its client-side preconditions."""

    def __init__(
        self,
        message: str,
        kind: ApiErrorKind = ApiErrorKind.SERVER,
        *,
        status_code: int | None = None,
        graphql_errors: list[dict[str, Any]] | None = None,
    ) -> None:
        self.message = message
        self.kind = kind
        self.status_code = status_code
        self.graphql_errors = graphql_errors or []
        super().__init__(message)

    @property
    def code(self) -> str:
        return self.kind.value

    @property
    def server_message(self) -> str | None:
        """First message reported by the GraphQL server, if any."""
        if self.graphql_errors:
            return self.graphql_errors[0].get("message") or None
        return None

    def __repr__(self) -> str:
        return f"<ApiError {self.kind.value} status={self.status_code} {self.message!r}>"


class InvalidInputError(ApiError):
    """Missing or malformed input caught before any request."""

    def __init__(self, message: str) -> None:
        super().__init__(message, ApiErrorKind.VALIDATION)


class NotAuthenticatedError(ApiError):
    """Authenticated call attempted without a session."""

    def __init__(self, message: str = "You need to be logged in") -> None:
        super().__init__(message, ApiErrorKind.UNAUTHENTICATED)


# ==============================================================================
# User-facing messages
# ==============================================================================

MSG_INVALID_REQUEST = "Invalid request. Please check your inputs."
MSG_CONNECTIVITY = "Network connection issue. Please check your internet connection."


def describe_failure(
    error: ApiError,
    fallback: str,
    server_fallback: str = "Server error",
) -> str:
    """Pick the user-facing message for a failed call.

    Priority: client-side check, rejected request, connectivity, the
    server's own message, then ``fallback``.
    """
    if error.kind in (ApiErrorKind.VALIDATION, ApiErrorKind.UNAUTHENTICATED):
        return error.message
    if error.kind is ApiErrorKind.REQUEST_REJECTED:
        return MSG_INVALID_REQUEST
    if error.kind is ApiErrorKind.TRANSPORT:
        return MSG_CONNECTIVITY
    if error.graphql_errors:
        return error.server_message or server_fallback
    return fallback
