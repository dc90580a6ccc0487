"""Authentication state container.

Holds the token pair for the running session and exposes it to the
API client as the bearer token source. Operations never raise: failures
land in ``error`` and the call returns ``False``.
"""

from typing import Any

import structlog
from jose import JWTError, jwt

from learnwithme.api.errors import ApiError
from learnwithme.core.context import set_user_id

from .schemas import ProfileImage, User
from .service import AuthService
from .validators import first_error, validate_email, validate_name, validate_password


logger = structlog.get_logger(__name__)


class AuthSession:
    """In-memory session: user, tokens, loading and error flags."""

    def __init__(self, service: AuthService | None = None) -> None:
        self.service = service
        self.user: User | None = None
        self.access_token: str | None = None
        self.refresh_token: str | None = None
        self.is_loading = False
        self.error: str | None = None

    def get_access_token(self) -> str | None:
        """Token source for ``GraphQLClient``."""
        return self.access_token

    @property
    def is_authenticated(self) -> bool:
        return self.access_token is not None

    @property
    def claims(self) -> dict[str, Any]:
        """Unverified access token claims (signature is the backend's job)."""
        if not self.access_token:
            return {}
        try:
            return jwt.get_unverified_claims(self.access_token)
        except JWTError:
            logger.warning("access_token_undecodable")
            return {}

    @property
    def user_id(self) -> str | None:
        claims = self.claims
        user_id = claims.get("userId") or claims.get("sub")
        if user_id:
            return str(user_id)
        return self.user.id if self.user else None

    async def login(self, email: str, password: str) -> bool:
        """Sign in and keep the token pair for the session."""
        message = first_error(validate_email(email), validate_password(password))
        if message:
            self.error = message
            return False

        self.is_loading = True
        self.error = None
        try:
            tokens = await self._require_service().login(email, password)
        except ApiError as e:
            logger.warning("login_failed", error=e.message, kind=e.kind.value)
            self.error = e.server_message or e.message or "Login failed"
            self.is_loading = False
            return False

        self.access_token = tokens.access_token
        self.refresh_token = tokens.refresh_token
        self.user = tokens.user
        self.is_loading = False
        set_user_id(self.user_id)
        return True

    async def register(
        self,
        name: str,
        email: str,
        password: str,
        profile_image: ProfileImage | None = None,
    ) -> bool:
        """Create an account. The user still has to log in afterwards."""
        message = first_error(
            validate_name(name), validate_email(email), validate_password(password)
        )
        if message:
            self.error = message
            return False

        self.is_loading = True
        self.error = None
        try:
            user = await self._require_service().register(
                name, email, password, profile_image
            )
        except ApiError as e:
            logger.warning("registration_failed", error=e.message, kind=e.kind.value)
            self.error = e.server_message or e.message or "Registration failed"
            self.is_loading = False
            return False

        self.user = user
        self.is_loading = False
        return True

    def logout(self) -> None:
        self.user = None
        self.access_token = None
        self.refresh_token = None
        self.error = None
        set_user_id(None)

    def _require_service(self) -> AuthService:
        if self.service is None:
            raise RuntimeError("AuthSession has no AuthService attached")
        return self.service
