"""Periodic watch-position reporting for an open video.

The player feeds positions in through ``on_progress``; a background task
sends the latest one every ``progress_report_interval_seconds`` while
playback is running. Closing the video sends one last report, and the
end of playback marks the video completed.
"""

import asyncio
import contextlib
from collections.abc import Awaitable, Callable

import structlog

from .store import ProgressTracker


logger = structlog.get_logger(__name__)

Sleep = Callable[[float], Awaitable[None]]


class PlaybackProgressReporter:
    """Reports progress for one video of one course."""

    def __init__(
        self,
        tracker: ProgressTracker,
        course_id: str,
        video_id: str,
        duration_seconds: float | None = None,
        interval_seconds: float | None = None,
        sleep: Sleep = asyncio.sleep,
    ):
        self.tracker = tracker
        self.course_id = course_id
        self.video_id = video_id
        self.duration_seconds = duration_seconds
        self.interval_seconds = (
            interval_seconds
            if interval_seconds is not None
            else tracker.settings.progress_report_interval_seconds
        )
        self._sleep = sleep

        self.position_seconds = 0.0
        self.paused = False
        self.ended = False
        self._task: asyncio.Task | None = None
        self._in_flight: asyncio.Task | None = None

    @property
    def resume_position(self) -> float:
        """Stored watch position to start playback from."""
        entry = self.tracker.video_progress(self.video_id)
        return entry.watched_seconds if entry is not None else 0.0

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    # ==========================================================================
    # Player events
    # ==========================================================================

    def on_progress(self, position_seconds: float) -> None:
        self.position_seconds = max(0.0, position_seconds)

    def pause(self) -> None:
        self.paused = True

    def resume(self) -> None:
        self.paused = False

    async def on_end(self) -> None:
        """Playback reached the end: report the video as completed."""
        self.ended = True
        if self.duration_seconds:
            self.position_seconds = self.duration_seconds

        await self.tracker.update_video_progress(
            self.course_id,
            self.video_id,
            self.position_seconds,
            completed=True,
            duration_seconds=self.duration_seconds,
        )
        logger.info("playback_ended", course_id=self.course_id, video_id=self.video_id)

    # ==========================================================================
    # Lifecycle
    # ==========================================================================

    async def start(self) -> None:
        if self.is_running:
            return
        self._task = asyncio.create_task(
            self._report_loop(), name=f"playback_progress_{self.video_id}"
        )
        logger.debug("playback_reporter_started", video_id=self.video_id)

    async def stop(self) -> None:
        """Stop periodic reports and send the final position.

        Only the timer is cancelled. A report already on its way is awaited
        to completion before the final one goes out.
        """
        if self._task is not None:
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
            self._task = None

        if self._in_flight is not None:
            await self._in_flight
            self._in_flight = None

        if not self.ended and self.position_seconds > 0:
            await self.report()
        logger.debug("playback_reporter_stopped", video_id=self.video_id)

    async def report(self) -> None:
        await self.tracker.update_video_progress(
            self.course_id,
            self.video_id,
            self.position_seconds,
            duration_seconds=self.duration_seconds,
        )

    async def _report_loop(self) -> None:
        while True:
            await self._sleep(self.interval_seconds)
            if not self.paused and self.position_seconds > 0:
                # stop() cancels the loop, never a report in flight
                self._in_flight = asyncio.create_task(self.report())
                await asyncio.shield(self._in_flight)

    async def __aenter__(self) -> "PlaybackProgressReporter":
        await self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.stop()
