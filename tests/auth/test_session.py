"""Tests for the authentication session and service."""

import pytest

from learnwithme.auth.schemas import ProfileImage, UserRole
from learnwithme.core.context import get_user_id
from tests.utils.fakes import data, graphql_error, make_access_token


def login_reply(user_id: str = "user-42") -> dict:
    return data(
        login={
            "access_token": make_access_token(user_id),
            "refresh_token": "refresh-token",
        }
    )


def signup_reply() -> dict:
    return data(
        signup={
            "_id": "user-42",
            "name": "Ada",
            "email": "ada@example.com",
            "role": "STUDENT",
            "profileImageUrl": None,
            "points": 0,
        }
    )


class TestLogin:
    """Tests for AuthSession.login."""

    @pytest.mark.asyncio
    async def test_login_stores_tokens(self, app, backend):
        backend.on("Login", login_reply())

        ok = await app.session.login("ada@example.com", "secret")

        assert ok is True
        assert app.session.is_authenticated is True
        assert app.session.refresh_token == "refresh-token"
        assert app.session.user_id == "user-42"
        assert get_user_id() == "user-42"
        assert app.session.is_loading is False
        assert backend.calls("Login")[0].variables == {
            "email": "ada@example.com",
            "password": "secret",
        }

    @pytest.mark.asyncio
    async def test_token_is_used_for_later_calls(self, app, backend):
        backend.on("Login", login_reply())
        backend.on("IsEnrolled", data(isEnrolledInCourse=True))
        await app.session.login("ada@example.com", "secret")

        await app.progress.service.is_enrolled("course-1")

        header = backend.calls("IsEnrolled")[0].headers["authorization"]
        assert header == f"Bearer {app.session.access_token}"

    @pytest.mark.asyncio
    async def test_invalid_input_skips_request(self, app, backend):
        ok = await app.session.login("not-an-email", "secret")

        assert ok is False
        assert app.session.error == "Please enter a valid email address"
        assert backend.requests == []

    @pytest.mark.asyncio
    async def test_rejected_credentials(self, app, backend):
        backend.on("Login", graphql_error("Invalid credentials"))

        ok = await app.session.login("ada@example.com", "wrong-password")

        assert ok is False
        assert app.session.error == "Invalid credentials"
        assert app.session.is_authenticated is False
        assert app.session.is_loading is False

    @pytest.mark.asyncio
    async def test_logout_clears_session_and_progress(self, app, backend):
        backend.on("Login", login_reply())
        await app.session.login("ada@example.com", "secret")

        app.logout()

        assert app.session.is_authenticated is False
        assert app.session.user_id is None
        assert app.progress.current_progress is None
        assert get_user_id() is None

    def test_undecodable_token_has_no_claims(self, app):
        app.session.access_token = "not-a-jwt"

        assert app.session.claims == {}
        assert app.session.user_id is None


class TestRegister:
    """Tests for AuthSession.register."""

    @pytest.mark.asyncio
    async def test_register_without_image(self, app, backend):
        backend.on("Signup", signup_reply())

        ok = await app.session.register("Ada", "ada@example.com", "secret")

        assert ok is True
        assert app.session.user.role is UserRole.STUDENT
        assert app.session.is_authenticated is False
        assert backend.calls("Signup")[0].variables == {
            "input": {
                "name": "Ada",
                "email": "ada@example.com",
                "password": "secret",
                "role": "STUDENT",
            }
        }

    @pytest.mark.asyncio
    async def test_register_with_image_uses_multipart(self, app, backend, tmp_path):
        image = tmp_path / "avatar.jpg"
        image.write_bytes(b"\xff\xd8fake-jpeg")
        backend.on("Signup", signup_reply())

        ok = await app.session.register(
            "Ada", "ada@example.com", "secret", ProfileImage(path=image)
        )

        assert ok is True
        request = backend.calls("Signup")[0]
        assert request.headers["apollo-require-preflight"] == "true"
        assert b'filename="avatar.jpg"' in request.content

    @pytest.mark.asyncio
    async def test_unreadable_image(self, app, backend, tmp_path):
        ok = await app.session.register(
            "Ada", "ada@example.com", "secret", ProfileImage(path=tmp_path / "gone.jpg")
        )

        assert ok is False
        assert app.session.error == "Profile image could not be read"
        assert backend.requests == []

    @pytest.mark.asyncio
    async def test_validation_order(self, app):
        ok = await app.session.register("", "bad", "1")

        assert ok is False
        assert app.session.error == "Name is required"

    @pytest.mark.asyncio
    async def test_duplicate_email(self, app, backend):
        backend.on("Signup", graphql_error("Email already registered"))

        ok = await app.session.register("Ada", "ada@example.com", "secret")

        assert ok is False
        assert app.session.error == "Email already registered"
