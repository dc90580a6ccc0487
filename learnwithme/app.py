"""LearnWithMe client - application container.

Builds the API client, services, and state containers once and wires
them together. A presentation layer holds one ``LearnWithMe`` instance
for the lifetime of the app.
"""

import asyncio

import httpx
import structlog

from learnwithme.api.client import GraphQLClient
from learnwithme.auth.service import AuthService
from learnwithme.auth.session import AuthSession
from learnwithme.config import Settings, get_settings
from learnwithme.core.context import clear_context
from learnwithme.core.logging import configure_structlog
from learnwithme.core.notifications import LoggingNotifier, Notifier
from learnwithme.courses.service import CourseService
from learnwithme.courses.store import CourseCatalogStore, Sleep
from learnwithme.progress.playback import PlaybackProgressReporter
from learnwithme.progress.service import ProgressService
from learnwithme.progress.store import ProgressTracker


logger = structlog.get_logger(__name__)


class LearnWithMe:
    """Application state container."""

    def __init__(
        self,
        settings: Settings | None = None,
        notifier: Notifier | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Sleep = asyncio.sleep,
        configure_logging: bool = False,
    ) -> None:
        self.settings = settings or get_settings()
        if configure_logging:
            configure_structlog(self.settings)

        self.notifier = notifier or LoggingNotifier()
        self._sleep = sleep

        self.session = AuthSession()
        self.client = GraphQLClient.from_settings(
            self.settings,
            token_provider=self.session.get_access_token,
            transport=transport,
        )
        self.session.service = AuthService(self.client)

        self.catalog = CourseCatalogStore(
            CourseService(self.client),
            settings=self.settings,
            notifier=self.notifier,
            sleep=sleep,
        )
        self.progress = ProgressTracker(
            ProgressService(self.client, lambda: self.session.user_id),
            self.catalog,
            settings=self.settings,
            notifier=self.notifier,
        )

        logger.info(
            "app_initialized",
            app_name=self.settings.app_name,
            version=self.settings.app_version,
            environment=self.settings.environment,
            api_url=self.settings.api_url,
        )

    def open_video(self, course_id: str, video_id: str) -> PlaybackProgressReporter:
        """Reporter for a video of the course currently being viewed."""
        duration = None
        details = self.catalog.course_details
        if details is not None and details.id == course_id:
            video = details.find_video(video_id)
            if video is not None:
                duration = video.duration_seconds

        return PlaybackProgressReporter(
            self.progress,
            course_id,
            video_id,
            duration_seconds=duration,
            sleep=self._sleep,
        )

    def logout(self) -> None:
        self.session.logout()
        self.progress.clear()
        clear_context()

    async def aclose(self) -> None:
        await self.catalog.aclose()
        await self.client.aclose()
        logger.info("app_closed")

    async def __aenter__(self) -> "LearnWithMe":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
