"""Tests for the application container."""

import pytest

from learnwithme import LearnWithMe
from tests.utils.fakes import course_payload, data


class TestLearnWithMe:
    """Tests for wiring and lifecycle."""

    def test_wires_shared_client(self, app: LearnWithMe) -> None:
        assert app.session.service is not None
        assert app.session.service.client is app.client
        assert app.catalog.service.client is app.client
        assert app.progress.service.client is app.client
        assert app.progress.catalog is app.catalog

    @pytest.mark.asyncio
    async def test_open_video_uses_course_duration(self, app, backend):
        backend.on(
            "GetCourseDetails",
            data(course=course_payload("course-1", videos=1, video_minutes=12)),
        )
        await app.catalog.fetch_course_details("course-1")

        reporter = app.open_video("course-1", "course-1-video-1")

        assert reporter.duration_seconds == 720
        assert reporter.interval_seconds == 10.0

    def test_open_video_for_unloaded_course(self, app) -> None:
        reporter = app.open_video("course-9", "video-1")
        assert reporter.duration_seconds is None

    @pytest.mark.asyncio
    async def test_context_manager_closes(self, settings, backend, sleep):
        async with LearnWithMe(
            settings=settings, transport=backend.transport, sleep=sleep
        ) as app:
            assert app.client is not None

        assert app.client._http.is_closed
