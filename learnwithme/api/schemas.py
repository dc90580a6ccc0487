"""Base models for backend payloads and file uploads."""

import asyncio
from pathlib import Path
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from .errors import ApiError, ApiErrorKind


ModelT = TypeVar("ModelT", bound=BaseModel)


class ApiModel(BaseModel):
    """Accepts the backend's camelCase / ``_id`` names, exposes snake_case.

    Dump with ``by_alias=True`` to produce backend-shaped dictionaries.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class UploadFile(BaseModel):
    """Local file sent as a GraphQL ``Upload`` variable."""

    path: Path
    content_type: str = "image/jpeg"

    @property
    def filename(self) -> str:
        return self.path.name or "photo.jpg"

    async def read_part(self) -> tuple[str, bytes, str]:
        """Read the file off the event loop as a ``(filename, content, type)`` part.

        Raises:
            OSError: If the file cannot be read.
        """
        content = await asyncio.to_thread(self.path.read_bytes)
        return self.filename, content, self.content_type


def parse_payload(model: type[ModelT], payload: Any, field: str) -> ModelT:
    """Validate one response field, turning malformed data into ``ApiError``."""
    if payload is None:
        raise ApiError(f"Response is missing '{field}'", ApiErrorKind.SERVER)
    try:
        return model.model_validate(payload)
    except PydanticValidationError as e:
        raise ApiError(
            f"Malformed '{field}' in response", ApiErrorKind.SERVER
        ) from e


def parse_payload_list(model: type[ModelT], payload: Any, field: str) -> list[ModelT]:
    if payload is None:
        return []
    if not isinstance(payload, list):
        raise ApiError(f"Malformed '{field}' in response", ApiErrorKind.SERVER)
    return [parse_payload(model, item, field) for item in payload]
