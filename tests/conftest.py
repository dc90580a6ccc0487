import pytest

from learnwithme.app import LearnWithMe
from learnwithme.config.settings import Settings
from learnwithme.core.context import clear_context
from tests.utils.fakes import (
    FakeBackend,
    RecordingNotifier,
    RecordingSleep,
    make_access_token,
)


@pytest.fixture(autouse=True)
def _reset_context():
    yield
    clear_context()


@pytest.fixture
def settings() -> Settings:
    """Settings with defaults only (no .env, no environment overrides)."""
    return Settings(_env_file=None, api_url="http://backend.test/graphql")


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def app(settings, backend, sleep, notifier) -> LearnWithMe:
    """Application wired to the fake backend, signed out."""
    return LearnWithMe(
        settings=settings,
        notifier=notifier,
        transport=backend.transport,
        sleep=sleep,
    )


@pytest.fixture
def signed_in_app(app: LearnWithMe) -> LearnWithMe:
    """Application with a session token for ``user-1``."""
    app.session.access_token = make_access_token()
    return app
