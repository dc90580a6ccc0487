"""Backend API access: GraphQL client, documents, and error taxonomy."""

from .client import GraphQLClient, classify_graphql_error
from .errors import (
    ApiError,
    ApiErrorKind,
    InvalidInputError,
    NotAuthenticatedError,
    describe_failure,
)


__all__ = [
    "ApiError",
    "ApiErrorKind",
    "GraphQLClient",
    "InvalidInputError",
    "NotAuthenticatedError",
    "classify_graphql_error",
    "describe_failure",
]
