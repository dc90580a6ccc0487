"""Progress tracking state container.

Keeps the signed-in user's progress record for the course being studied
and derives the completion percentage shown next to it.

Every read or write dispatched for a course takes the next sequence
number for that course. A response only replaces ``current_progress``
when its number is higher than the last one applied, so a slow response
can never overwrite a newer one. Successful enrollments and video
updates are followed by a fresh read of the record.

No public coroutine raises. Enrollment and course completion failures
are shown to the user through the notifier; video progress failures are
only logged so playback is never interrupted.
"""

import structlog

from learnwithme.api.errors import ApiError, describe_failure
from learnwithme.config.settings import Settings, get_settings
from learnwithme.core.context import OperationContext
from learnwithme.core.notifications import LoggingNotifier, Notifier
from learnwithme.courses.store import CourseCatalogStore

from .models import EnrollmentState, completion_percent, reaches_completion
from .schemas import AlreadyEnrolled, CourseProgress, VideoProgress
from .service import ProgressService


logger = structlog.get_logger(__name__)

MSG_PROGRESS_UNAVAILABLE = "Failed to load course progress"
MSG_ENROLL_FAILED = "Failed to enroll in this course. Please try again."
MSG_COMPLETE_FAILED = "Failed to mark course as completed"


class ProgressTracker:
    """Current course progress, enrollment, and completion percentage."""

    def __init__(
        self,
        service: ProgressService,
        catalog: CourseCatalogStore,
        settings: Settings | None = None,
        notifier: Notifier | None = None,
    ) -> None:
        self.service = service
        self.catalog = catalog
        self.settings = settings or get_settings()
        self.notifier = notifier or LoggingNotifier()

        self.current_progress: CourseProgress | None = None
        self.error: str | None = None

        self._issued: dict[str, int] = {}
        self._applied: dict[str, int] = {}

    # ==========================================================================
    # Sequencing
    # ==========================================================================

    def _next_sequence(self, course_id: str) -> int:
        sequence = self._issued.get(course_id, 0) + 1
        self._issued[course_id] = sequence
        return sequence

    def _apply(self, course_id: str, sequence: int, progress: CourseProgress | None) -> bool:
        """Replace ``current_progress`` unless a newer response already landed."""
        if sequence <= self._applied.get(course_id, 0):
            logger.debug(
                "stale_progress_discarded",
                course_id=course_id,
                sequence=sequence,
                applied=self._applied[course_id],
            )
            return False

        self._applied[course_id] = sequence
        self.current_progress = progress
        return True

    # ==========================================================================
    # Progress Operations
    # ==========================================================================

    async def fetch_progress(self, course_id: str) -> CourseProgress | None:
        """Load the progress record for a course.

        ``None`` without an error means the user is not enrolled.
        """
        if not course_id:
            self.error = "Course ID is required"
            return None

        sequence = self._next_sequence(course_id)

        with OperationContext("fetch_progress", course_id=course_id):
            try:
                progress = await self.service.get_course_progress(course_id)
            except ApiError as e:
                logger.warning("progress_fetch_failed", kind=e.kind.value, error=e.message)
                if self._apply(course_id, sequence, None):
                    self.error = describe_failure(e, MSG_PROGRESS_UNAVAILABLE)
                return None

            if self._apply(course_id, sequence, progress):
                self.error = None
                self._attach_user_progress(course_id)

        return progress

    async def enroll(self, course_id: str) -> CourseProgress | AlreadyEnrolled | None:
        """Enroll in a course and reload its progress record."""
        if not course_id:
            self.error = "Course ID is required"
            return None

        sequence = self._next_sequence(course_id)

        with OperationContext("enroll", course_id=course_id):
            try:
                result = await self.service.enroll_in_course(course_id)
            except ApiError as e:
                logger.error("enrollment_failed", kind=e.kind.value, error=e.message)
                message = describe_failure(e, MSG_ENROLL_FAILED)
                self.error = message
                self.notifier.alert("Error", message)
                return None

            if isinstance(result, CourseProgress):
                self._apply(course_id, sequence, result)

        await self.fetch_progress(course_id)
        return result

    async def update_video_progress(
        self,
        course_id: str,
        video_id: str,
        watched_seconds: float,
        completed: bool = False,
        duration_seconds: float | None = None,
    ) -> VideoProgress | None:
        """Report the watch position of a video.

        The video counts as completed when ``completed`` is passed, when it
        was already completed, or when the position reaches the completion
        threshold of ``duration_seconds`` (looked up from the loaded course
        when not given).
        """
        if not course_id or not video_id or watched_seconds < 0:
            logger.warning(
                "video_progress_rejected",
                course_id=course_id,
                video_id=video_id,
                watched_seconds=watched_seconds,
            )
            return None

        completed = self._resolve_completion(
            course_id, video_id, watched_seconds, completed, duration_seconds
        )

        with OperationContext("update_video_progress", course_id=course_id):
            try:
                result = await self.service.update_video_progress(
                    course_id, video_id, watched_seconds, completed
                )
            except ApiError as e:
                logger.warning(
                    "video_progress_update_failed",
                    video_id=video_id,
                    kind=e.kind.value,
                    error=e.message,
                )
                return None

        await self.fetch_progress(course_id)
        return result

    async def mark_course_as_completed(self, course_id: str) -> CourseProgress | None:
        if not course_id:
            self.error = "Course ID is required"
            return None

        sequence = self._next_sequence(course_id)

        with OperationContext("mark_course_as_completed", course_id=course_id):
            try:
                progress = await self.service.mark_course_completed(course_id)
            except ApiError as e:
                logger.error("course_completion_failed", kind=e.kind.value, error=e.message)
                message = describe_failure(e, MSG_COMPLETE_FAILED)
                self.error = message
                self.notifier.alert("Error", message)
                return None

            if self._apply(course_id, sequence, progress):
                self.error = None
                self._attach_user_progress(course_id)

        self.notifier.alert("Success", "Course marked as completed")
        return progress

    # ==========================================================================
    # Derived State
    # ==========================================================================

    def calculate_overall_progress(self, course_id: str) -> int:
        """Completed videos over videos in the loaded course, as a percentage.

        0 unless both the progress record and the course details loaded
        belong to ``course_id``.
        """
        progress = self.current_progress
        if progress is None or progress.course_id != course_id:
            return 0

        details = self.catalog.course_details
        if details is None or details.id != course_id:
            return 0

        return completion_percent(
            progress.completed_video_count(),
            len(details.course_videos),
            progress.completed,
        )

    def enrollment_state(self, course_id: str) -> EnrollmentState:
        progress = self.current_progress
        if progress is None or progress.course_id != course_id:
            return EnrollmentState.NOT_ENROLLED
        if progress.completed or self.calculate_overall_progress(course_id) == 100:
            return EnrollmentState.COMPLETED
        return EnrollmentState.ENROLLED

    def video_progress(self, video_id: str) -> VideoProgress | None:
        if self.current_progress is None:
            return None
        return self.current_progress.video(video_id)

    def reset_error(self) -> None:
        self.error = None

    def clear(self) -> None:
        """Forget the loaded record (on logout)."""
        self.current_progress = None
        self.error = None
        self._issued.clear()
        self._applied.clear()

    # ==========================================================================
    # Helpers
    # ==========================================================================

    def _resolve_completion(
        self,
        course_id: str,
        video_id: str,
        watched_seconds: float,
        completed: bool,
        duration_seconds: float | None,
    ) -> bool:
        if completed:
            return True

        progress = self.current_progress
        if progress is not None and progress.course_id == course_id:
            existing = progress.video(video_id)
            if existing is not None and existing.completed:
                return True

        if duration_seconds is None:
            duration_seconds = self._video_duration(course_id, video_id)

        return reaches_completion(
            watched_seconds, duration_seconds, self.settings.video_completion_threshold
        )

    def _video_duration(self, course_id: str, video_id: str) -> float | None:
        details = self.catalog.course_details
        if details is None or details.id != course_id:
            return None
        video = details.find_video(video_id)
        return video.duration_seconds if video is not None else None

    def _attach_user_progress(self, course_id: str) -> None:
        details = self.catalog.course_details
        if details is None or details.id != course_id:
            return
        self.catalog.course_details = details.model_copy(
            update={"user_progress": self.calculate_overall_progress(course_id)}
        )
