"""Pydantic schemas for authentication payloads."""

from enum import Enum
from pydantic import BaseModel, Field

from learnwithme.api.schemas import ApiModel, UploadFile


class UserRole(str, Enum):
    """Account roles known to the backend."""

    STUDENT = "STUDENT"
    INSTRUCTOR = "INSTRUCTOR"
    ADMIN = "ADMIN"


class User(ApiModel):
    """Account returned by sign-up (and optionally by login)."""

    id: str = Field(alias="_id")
    name: str
    email: str
    role: UserRole = UserRole.STUDENT
    profile_image_url: str | None = None
    points: int = 0


class TokenPair(BaseModel):
    """Login result. Field names match the backend's snake_case output."""

    access_token: str
    refresh_token: str
    user: User | None = None


class ProfileImage(UploadFile):
    """Local image file attached to a sign-up request."""
