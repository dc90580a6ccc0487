"""GraphQL client for the Learn With Me backend.

Thin wrapper over ``httpx.AsyncClient`` that:
- Sends every operation as a network-only POST (no client-side cache)
- Attaches the session bearer token to authenticated calls
- Supports the GraphQL multipart request format for file variables
- Classifies every failure into an ``ApiErrorKind`` in one place
"""

import json
from collections.abc import Callable
from typing import Any

import httpx
import structlog

from learnwithme.config.settings import Settings

from .errors import ApiError, ApiErrorKind, NotAuthenticatedError


logger = structlog.get_logger(__name__)

TokenProvider = Callable[[], str | None]

# Machine-readable codes (``errors[].extensions.code``) honoured first
_CONFLICT_CODES = frozenset({"CONFLICT", "DUPLICATE_KEY", "ALREADY_ENROLLED"})
_NOT_FOUND_CODES = frozenset({"NOT_FOUND", "NOT_ENROLLED"})
_REJECTED_CODES = frozenset(
    {"BAD_USER_INPUT", "BAD_REQUEST", "GRAPHQL_VALIDATION_FAILED"}
)
_UNAUTHENTICATED_CODES = frozenset({"UNAUTHENTICATED", "UNAUTHORIZED"})

# Fallback for backends that only send human-readable text
_CONFLICT_PHRASES = ("already enrolled", "duplicate key", "duplicate entry")
_NOT_FOUND_PHRASES = ("not enrolled", "not found")


def classify_graphql_error(error: dict[str, Any]) -> ApiErrorKind:
    """Map one GraphQL error object to an error kind."""
    extensions = error.get("extensions") or {}
    code = str(extensions.get("code") or "").upper()

    if code in _CONFLICT_CODES:
        return ApiErrorKind.CONFLICT
    if code in _NOT_FOUND_CODES:
        return ApiErrorKind.NOT_FOUND
    if code in _REJECTED_CODES:
        return ApiErrorKind.REQUEST_REJECTED
    if code in _UNAUTHENTICATED_CODES:
        return ApiErrorKind.UNAUTHENTICATED

    message = str(error.get("message") or "").lower()
    if any(phrase in message for phrase in _CONFLICT_PHRASES):
        return ApiErrorKind.CONFLICT
    if any(phrase in message for phrase in _NOT_FOUND_PHRASES):
        return ApiErrorKind.NOT_FOUND

    return ApiErrorKind.SERVER


class GraphQLClient:
    """Executes GraphQL operations against the configured endpoint."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        url: str,
        token_provider: TokenProvider | None = None,
    ) -> None:
        self._http = http
        self.url = url
        self._token_provider = token_provider or (lambda: None)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        token_provider: TokenProvider | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "GraphQLClient":
        """Create a client owning its own ``httpx.AsyncClient``."""
        http = httpx.AsyncClient(
            timeout=settings.request_timeout_seconds,
            transport=transport,
        )
        return cls(http, settings.api_url, token_provider)

    async def aclose(self) -> None:
        await self._http.aclose()

    def _headers(self, *, authenticated: bool) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if authenticated:
            token = self._token_provider()
            if not token:
                raise NotAuthenticatedError
            headers["Authorization"] = f"Bearer {token}"
        return headers

    async def execute(
        self,
        document: str,
        variables: dict[str, Any] | None = None,
        *,
        operation_name: str | None = None,
        authenticated: bool = False,
    ) -> dict[str, Any]:
        """Execute an operation and return its ``data`` object.

        Raises:
            ApiError: On any transport, HTTP, or GraphQL failure.
        """
        headers = self._headers(authenticated=authenticated)
        payload: dict[str, Any] = {"query": document, "variables": variables or {}}
        if operation_name:
            payload["operationName"] = operation_name

        logger.debug("graphql_request", operation_name=operation_name)

        try:
            response = await self._http.post(self.url, json=payload, headers=headers)
        except httpx.TimeoutException as e:
            logger.warning("graphql_timeout", operation_name=operation_name)
            raise ApiError("Request timed out", ApiErrorKind.TRANSPORT) from e
        except httpx.RequestError as e:
            logger.warning(
                "graphql_transport_error",
                operation_name=operation_name,
                error=str(e),
            )
            raise ApiError(f"Network error: {e}", ApiErrorKind.TRANSPORT) from e

        return self._parse_response(response, operation_name)

    async def execute_multipart(
        self,
        document: str,
        variables: dict[str, Any],
        files: dict[str, tuple[str, bytes, str]],
        *,
        operation_name: str,
        authenticated: bool = False,
    ) -> dict[str, Any]:
        """Execute an operation with file variables.

        ``files`` maps a variable path (``"variables.profileImage"``) to a
        ``(filename, content, content_type)`` tuple.
        """
        headers = self._headers(authenticated=authenticated)
        variables = dict(variables)
        file_map: dict[str, list[str]] = {}
        parts: dict[str, tuple[str, bytes, str]] = {}
        for index, (path, upload) in enumerate(files.items()):
            file_map[str(index)] = [path]
            parts[str(index)] = upload
            variables[path.removeprefix("variables.")] = None

        operations = {"query": document, "variables": variables}
        headers["x-apollo-operation-name"] = operation_name
        headers["apollo-require-preflight"] = "true"

        logger.debug(
            "graphql_multipart_request",
            operation_name=operation_name,
            file_count=len(parts),
        )

        try:
            response = await self._http.post(
                self.url,
                data={"operations": json.dumps(operations), "map": json.dumps(file_map)},
                files=parts,
                headers=headers,
            )
        except httpx.TimeoutException as e:
            raise ApiError("Request timed out", ApiErrorKind.TRANSPORT) from e
        except httpx.RequestError as e:
            raise ApiError(f"Network error: {e}", ApiErrorKind.TRANSPORT) from e

        return self._parse_response(response, operation_name)

    def _parse_response(
        self,
        response: httpx.Response,
        operation_name: str | None,
    ) -> dict[str, Any]:
        try:
            body = response.json()
        except ValueError:
            body = None

        errors: list[dict[str, Any]] = []
        if isinstance(body, dict) and isinstance(body.get("errors"), list):
            errors = body["errors"]

        if response.is_client_error:
            logger.warning(
                "graphql_request_rejected",
                operation_name=operation_name,
                status_code=response.status_code,
            )
            raise ApiError(
                f"Response not successful: Received status code {response.status_code}",
                ApiErrorKind.REQUEST_REJECTED,
                status_code=response.status_code,
                graphql_errors=errors,
            )

        if response.is_server_error:
            logger.warning(
                "graphql_server_unavailable",
                operation_name=operation_name,
                status_code=response.status_code,
            )
            raise ApiError(
                f"Response not successful: Received status code {response.status_code}",
                ApiErrorKind.TRANSPORT,
                status_code=response.status_code,
                graphql_errors=errors,
            )

        if not isinstance(body, dict):
            raise ApiError(
                "Invalid response from server",
                ApiErrorKind.SERVER,
                status_code=response.status_code,
            )

        if errors:
            kind = classify_graphql_error(errors[0])
            message = errors[0].get("message") or "Server error"
            logger.info(
                "graphql_error",
                operation_name=operation_name,
                kind=kind.value,
                error=message,
            )
            raise ApiError(
                message,
                kind,
                status_code=response.status_code,
                graphql_errors=errors,
            )

        data = body.get("data")
        if not isinstance(data, dict):
            raise ApiError(
                "Response carried no data",
                ApiErrorKind.SERVER,
                status_code=response.status_code,
            )
        return data
