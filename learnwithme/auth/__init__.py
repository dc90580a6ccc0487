"""Authentication: form validation, login/sign-up calls, session state."""

from .schemas import ProfileImage, TokenPair, User, UserRole
from .service import AuthService
from .session import AuthSession


__all__ = [
    "AuthService",
    "AuthSession",
    "ProfileImage",
    "TokenPair",
    "User",
    "UserRole",
]
