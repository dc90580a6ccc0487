"""Course progress calls.

Handles:
- Enrollment status checks and idempotent enrollment
- Progress record reads
- Video progress writes
- Course completion
"""

from collections.abc import Callable

import structlog

from learnwithme.api import operations
from learnwithme.api.client import GraphQLClient
from learnwithme.api.errors import (
    ApiError,
    ApiErrorKind,
    InvalidInputError,
    NotAuthenticatedError,
)
from learnwithme.api.schemas import parse_payload

from .schemas import AlreadyEnrolled, CourseProgress, VideoProgress


logger = structlog.get_logger(__name__)

UserIdProvider = Callable[[], str | None]


class ProgressService:
    """Wraps the progress queries and mutations for the signed-in user."""

    def __init__(self, client: GraphQLClient, user_id_provider: UserIdProvider):
        self.client = client
        self._user_id = user_id_provider

    # ==========================================================================
    # Enrollment Operations
    # ==========================================================================

    async def is_enrolled(self, course_id: str) -> bool:
        """Ask the backend whether the signed-in user is enrolled.

        Never raises. Without a session the answer is ``False``; a failed
        check is logged and treated as not enrolled, except a conflict
        error which means the enrollment exists.
        """
        if not course_id:
            return False

        try:
            data = await self.client.execute(
                operations.IS_ENROLLED,
                {"courseId": course_id},
                operation_name="IsEnrolled",
                authenticated=True,
            )
        except NotAuthenticatedError:
            return False
        except ApiError as e:
            if e.kind is ApiErrorKind.CONFLICT:
                return True
            logger.warning(
                "enrollment_check_failed",
                course_id=course_id,
                kind=e.kind.value,
                error=e.message,
            )
            return False

        return bool(data.get("isEnrolledInCourse"))

    async def enroll_in_course(self, course_id: str) -> CourseProgress | AlreadyEnrolled:
        """Enroll the signed-in user in a course.

        Safe to call repeatedly: an existing enrollment, found either by the
        status check or by a duplicate-key error on create, yields an
        ``AlreadyEnrolled`` marker instead of a second record.

        Returns:
            The new progress record, or ``AlreadyEnrolled``

        Raises:
            InvalidInputError: If ``course_id`` is blank
            NotAuthenticatedError: If there is no signed-in user
            ApiError: If the create call fails for any other reason
        """
        if not course_id:
            raise InvalidInputError("Course ID is required")

        user_id = self._user_id()
        if not user_id:
            raise NotAuthenticatedError

        if await self.is_enrolled(course_id):
            logger.info("already_enrolled", course_id=course_id, user_id=user_id)
            return AlreadyEnrolled(course_id=course_id, user_id=user_id)

        try:
            data = await self.client.execute(
                operations.ENROLL_IN_COURSE,
                {"input": {"courseId": course_id, "userId": user_id}},
                operation_name="EnrollInCourse",
                authenticated=True,
            )
        except ApiError as e:
            if e.kind is ApiErrorKind.CONFLICT:
                logger.info(
                    "enrollment_conflict",
                    course_id=course_id,
                    user_id=user_id,
                    error=e.message,
                )
                return AlreadyEnrolled(course_id=course_id, user_id=user_id)
            raise

        progress = parse_payload(
            CourseProgress, data.get("createCourseProgress"), "createCourseProgress"
        )
        logger.info("user_enrolled", course_id=course_id, user_id=user_id)
        return progress

    # ==========================================================================
    # Progress Operations
    # ==========================================================================

    async def get_course_progress(self, course_id: str) -> CourseProgress | None:
        """Get the progress record, or ``None`` when the user is not enrolled."""
        if not course_id:
            raise InvalidInputError("Course ID is required")

        try:
            data = await self.client.execute(
                operations.GET_COURSE_PROGRESS,
                {"courseId": course_id},
                operation_name="GetUserCourseProgress",
                authenticated=True,
            )
        except ApiError as e:
            if e.kind is ApiErrorKind.NOT_FOUND:
                return None
            raise

        payload = data.get("getUserCourseProgress")
        if payload is None:
            return None
        return parse_payload(CourseProgress, payload, "getUserCourseProgress")

    async def update_video_progress(
        self,
        course_id: str,
        video_id: str,
        watched_seconds: float,
        completed: bool,
    ) -> VideoProgress:
        """Record the watch position for one video.

        ``watched_seconds`` is sent as whole seconds.
        """
        if not course_id or not video_id:
            raise InvalidInputError("Course ID and video ID are required")
        if watched_seconds < 0:
            raise InvalidInputError("Watched seconds cannot be negative")

        data = await self.client.execute(
            operations.UPDATE_VIDEO_PROGRESS,
            {
                "input": {
                    "courseId": course_id,
                    "videoId": video_id,
                    "watchedSeconds": int(watched_seconds),
                    "completed": completed,
                }
            },
            operation_name="UpdateVideoProgress",
            authenticated=True,
        )
        progress = parse_payload(
            VideoProgress, data.get("updateVideoProgress"), "updateVideoProgress"
        )

        if progress.completed:
            logger.info("video_completed", course_id=course_id, video_id=video_id)
        return progress

    async def mark_course_completed(self, course_id: str) -> CourseProgress:
        if not course_id:
            raise InvalidInputError("Course ID is required")

        data = await self.client.execute(
            operations.MARK_COURSE_COMPLETED,
            {"courseId": course_id},
            operation_name="MarkCourseAsCompleted",
            authenticated=True,
        )
        progress = parse_payload(
            CourseProgress, data.get("markCourseAsCompleted"), "markCourseAsCompleted"
        )
        logger.info("course_completed", course_id=course_id)
        return progress
