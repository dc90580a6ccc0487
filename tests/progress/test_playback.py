"""Tests for periodic playback progress reporting."""

import asyncio
from unittest.mock import AsyncMock, Mock

import pytest

from learnwithme.progress.playback import PlaybackProgressReporter
from learnwithme.progress.schemas import VideoProgress
from learnwithme.progress.store import ProgressTracker


class TickingSleep:
    """Sleep that returns only when the test calls ``tick``."""

    def __init__(self) -> None:
        self.calls: list[float] = []
        self._ticks: asyncio.Queue[None] = asyncio.Queue()

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)
        await self._ticks.get()

    def tick(self) -> None:
        self._ticks.put_nowait(None)


async def settle() -> None:
    for _ in range(5):
        await asyncio.sleep(0)


@pytest.fixture
def mock_tracker(settings):
    """Mock ProgressTracker."""
    tracker = Mock(spec=ProgressTracker)
    tracker.settings = settings
    tracker.update_video_progress = AsyncMock(return_value=None)
    tracker.video_progress = Mock(return_value=None)
    return tracker


@pytest.fixture
def ticker() -> TickingSleep:
    return TickingSleep()


@pytest.fixture
def reporter(mock_tracker, ticker) -> PlaybackProgressReporter:
    return PlaybackProgressReporter(
        mock_tracker, "course-1", "video-1", duration_seconds=600, sleep=ticker
    )


class TestPeriodicReports:
    """Tests for the background report loop."""

    @pytest.mark.asyncio
    async def test_reports_latest_position_each_interval(
        self, reporter, mock_tracker, ticker
    ):
        # Arrange
        await reporter.start()
        reporter.on_progress(12.5)

        # Act
        ticker.tick()
        await settle()

        # Assert
        mock_tracker.update_video_progress.assert_awaited_once_with(
            "course-1", "video-1", 12.5, duration_seconds=600
        )
        assert ticker.calls[0] == 10.0

        await reporter.stop()

    @pytest.mark.asyncio
    async def test_skips_while_paused(self, reporter, mock_tracker, ticker):
        await reporter.start()
        reporter.on_progress(30)
        reporter.pause()

        ticker.tick()
        await settle()

        mock_tracker.update_video_progress.assert_not_awaited()

        reporter.resume()
        ticker.tick()
        await settle()

        assert mock_tracker.update_video_progress.await_count == 1
        await reporter.stop()

    @pytest.mark.asyncio
    async def test_skips_before_playback_moves(self, reporter, mock_tracker, ticker):
        await reporter.start()

        ticker.tick()
        await settle()

        mock_tracker.update_video_progress.assert_not_awaited()
        await reporter.stop()
        mock_tracker.update_video_progress.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_start_twice_keeps_one_loop(self, reporter, ticker):
        await reporter.start()
        await reporter.start()
        await settle()

        assert len(ticker.calls) == 1
        await reporter.stop()


class TestLifecycle:
    """Tests for stop, on_end and resume position."""

    @pytest.mark.asyncio
    async def test_stop_sends_final_report(self, reporter, mock_tracker):
        await reporter.start()
        reporter.on_progress(95)

        await reporter.stop()

        assert reporter.is_running is False
        mock_tracker.update_video_progress.assert_awaited_once_with(
            "course-1", "video-1", 95, duration_seconds=600
        )

    @pytest.mark.asyncio
    async def test_stop_lets_running_report_finish(
        self, reporter, mock_tracker, ticker
    ):
        """Stopping mid-report waits for that update instead of cancelling it."""
        # Arrange
        release = asyncio.Event()
        outcomes: list[str] = []

        async def slow_update(*args, **kwargs):
            try:
                await release.wait()
            except asyncio.CancelledError:
                outcomes.append("cancelled")
                raise
            outcomes.append("finished")

        mock_tracker.update_video_progress = AsyncMock(side_effect=slow_update)
        await reporter.start()
        reporter.on_progress(42)
        ticker.tick()
        await settle()
        assert mock_tracker.update_video_progress.await_count == 1

        # Act
        stopping = asyncio.create_task(reporter.stop())
        await settle()
        assert not stopping.done()
        release.set()
        await stopping

        # Assert
        assert outcomes == ["finished", "finished"]
        assert mock_tracker.update_video_progress.await_count == 2
        assert reporter.is_running is False

    @pytest.mark.asyncio
    async def test_on_end_marks_completed(self, reporter, mock_tracker):
        reporter.on_progress(590)

        await reporter.on_end()
        await reporter.stop()

        mock_tracker.update_video_progress.assert_awaited_once_with(
            "course-1", "video-1", 600, completed=True, duration_seconds=600
        )

    @pytest.mark.asyncio
    async def test_context_manager(self, mock_tracker, ticker):
        async with PlaybackProgressReporter(
            mock_tracker, "course-1", "video-1", sleep=ticker
        ) as reporter:
            reporter.on_progress(20)

        mock_tracker.update_video_progress.assert_awaited_once_with(
            "course-1", "video-1", 20, duration_seconds=None
        )

    def test_resume_position(self, reporter, mock_tracker):
        mock_tracker.video_progress.return_value = VideoProgress(
            video_id="video-1", watched_seconds=95
        )

        assert reporter.resume_position == 95
        mock_tracker.video_progress.assert_called_once_with("video-1")

    def test_resume_position_without_record(self, reporter):
        assert reporter.resume_position == 0.0
