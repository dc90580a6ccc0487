"""Authentication calls: login and sign-up."""

import structlog

from learnwithme.api import operations
from learnwithme.api.client import GraphQLClient
from learnwithme.api.errors import InvalidInputError
from learnwithme.api.schemas import parse_payload

from .schemas import ProfileImage, TokenPair, User, UserRole


logger = structlog.get_logger(__name__)


class AuthService:
    """Wraps the login and signup mutations."""

    def __init__(self, client: GraphQLClient) -> None:
        self.client = client

    async def login(self, email: str, password: str) -> TokenPair:
        """Exchange credentials for an access/refresh token pair.

        Raises:
            ApiError: If the backend rejects the credentials or is unreachable.
        """
        data = await self.client.execute(
            operations.LOGIN_MUTATION,
            {"email": email, "password": password},
            operation_name="Login",
        )
        tokens = parse_payload(TokenPair, data.get("login"), "login")
        logger.info("login_succeeded", email=email)
        return tokens

    async def register(
        self,
        name: str,
        email: str,
        password: str,
        profile_image: ProfileImage | None = None,
    ) -> User:
        """Create a student account, uploading the profile image if given.

        Raises:
            ApiError: If the backend rejects the sign-up or is unreachable.
        """
        variables = {
            "input": {
                "name": name,
                "email": email,
                "password": password,
                "role": UserRole.STUDENT.value,
            }
        }

        if profile_image is not None:
            try:
                part = await profile_image.read_part()
            except OSError as e:
                raise InvalidInputError("Profile image could not be read") from e

            data = await self.client.execute_multipart(
                operations.SIGNUP_MUTATION,
                variables,
                {"variables.profileImage": part},
                operation_name="Signup",
            )
        else:
            data = await self.client.execute(
                operations.SIGNUP_MUTATION,
                variables,
                operation_name="Signup",
            )

        user = parse_payload(User, data.get("signup"), "signup")
        logger.info(
            "user_registered",
            email=email,
            with_profile_image=profile_image is not None,
        )
        return user
