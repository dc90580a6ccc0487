"""Course catalog state container.

Holds the course list, the derived category set, and the course being
viewed. The list fetch retries transient failures on its own:

- every attempt waits a short debounce first, so overlapping callers
  do not hammer the backend
- a rejected request (HTTP 4xx) is final and is never retried
- anything else is retried up to ``course_fetch_max_retries`` times,
  ``course_fetch_retry_delay_seconds`` apart, while ``status_message``
  reports the attempt
- once retries run out the loading flag is cleared and ``error`` holds a
  message for the user

A manual retry resets the counter but does not cancel an automatic
retry that is already scheduled; both write the same attributes and the
last one to finish wins.

No public coroutine raises: failures end up in ``error`` and the call
returns an empty result.
"""

import asyncio
from collections.abc import Awaitable, Callable, Coroutine, Iterable
from typing import Any

import structlog

from learnwithme.api.errors import ApiError, ApiErrorKind, describe_failure
from learnwithme.config.settings import Settings, get_settings
from learnwithme.core.context import OperationContext
from learnwithme.core.notifications import LoggingNotifier, Notifier

from .schemas import Course, CourseImage, CourseInput, CourseUpdateInput
from .service import CourseService


logger = structlog.get_logger(__name__)

Sleep = Callable[[float], Awaitable[None]]

ALL_CATEGORIES = "All"

MSG_SERVER_VALIDATION = "Server validation error"
MSG_COURSES_UNAVAILABLE = "Unable to load courses"
MSG_COURSE_UNAVAILABLE = "Couldn't load course details"
MSG_TEACHER_COURSES_UNAVAILABLE = "Failed to load teacher courses"

_TERMINAL_KINDS = frozenset({ApiErrorKind.REQUEST_REJECTED, ApiErrorKind.VALIDATION})


def build_categories(courses: Iterable[Course]) -> list[str]:
    """``"All"`` followed by each distinct category in first-seen order."""
    categories = [ALL_CATEGORIES]
    for course in courses:
        if course.category and course.category not in categories:
            categories.append(course.category)
    return categories


class CourseCatalogStore:
    """Course list, categories, and current course details."""

    def __init__(
        self,
        service: CourseService,
        settings: Settings | None = None,
        notifier: Notifier | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self.service = service
        self.settings = settings or get_settings()
        self.notifier = notifier or LoggingNotifier()
        self._sleep = sleep

        self.courses: list[Course] = []
        self.filtered_courses: list[Course] = []
        self.course_details: Course | None = None
        self.categories: list[str] = [ALL_CATEGORIES]
        self.active_category = ALL_CATEGORIES
        self.is_loading = False
        self.error: str | None = None
        self.status_message: str | None = None
        self.retry_count = 0

        self._pending: set[asyncio.Task[Any]] = set()

    @property
    def max_retries(self) -> int:
        return self.settings.course_fetch_max_retries

    # ==========================================================================
    # Course list (with automatic retry)
    # ==========================================================================

    async def fetch_all_courses(self, manual_retry: bool = False) -> list[Course]:
        """Load every course, retrying transient failures in the background."""
        if manual_retry:
            self.retry_count = 0

        self.is_loading = True
        self.error = None

        with OperationContext("fetch_all_courses"):
            try:
                await self._sleep(self.settings.course_fetch_debounce_seconds)
                courses = await self.service.list_courses()
            except ApiError as e:
                self._handle_list_failure(e)
                return []

            self.courses = courses
            self.categories = build_categories(courses)
            if self.active_category not in self.categories:
                self.active_category = ALL_CATEGORIES
            self.filter_courses_by_category(self.active_category)
            self.retry_count = 0
            self.status_message = None
            self.is_loading = False

            logger.info("courses_loaded", count=len(courses))
            return courses

    def _handle_list_failure(self, error: ApiError) -> None:
        should_retry = (
            error.kind not in _TERMINAL_KINDS and self.retry_count < self.max_retries
        )

        if should_retry:
            self.retry_count += 1
            self.status_message = (
                f"Network issue detected. Retrying... "
                f"({self.retry_count}/{self.max_retries})"
            )
            logger.warning(
                "course_fetch_failed_retrying",
                kind=error.kind.value,
                error=error.message,
                attempt=self.retry_count,
                max_retries=self.max_retries,
            )
            self._spawn(self._retry_after_delay(), name="course_fetch_retry")
            return

        self.status_message = None
        self.error = describe_failure(
            error, MSG_COURSES_UNAVAILABLE, server_fallback=MSG_SERVER_VALIDATION
        )
        self.is_loading = False
        logger.error(
            "course_fetch_failed",
            kind=error.kind.value,
            error=error.message,
            retries=self.retry_count,
        )

    async def _retry_after_delay(self) -> None:
        await self._sleep(self.settings.course_fetch_retry_delay_seconds)
        logger.info(
            "course_fetch_auto_retry",
            attempt=self.retry_count,
            max_retries=self.max_retries,
        )
        await self.fetch_all_courses()

    # ==========================================================================
    # Single course and teacher courses
    # ==========================================================================

    async def fetch_course_details(self, course_id: str) -> Course | None:
        if not course_id:
            self.error = "Invalid course ID"
            return None

        self.is_loading = True
        self.error = None

        with OperationContext("fetch_course_details", course_id=course_id):
            try:
                course = await self.service.get_course(course_id)
            except ApiError as e:
                logger.error("course_details_failed", kind=e.kind.value, error=e.message)
                self.error = describe_failure(e, MSG_COURSE_UNAVAILABLE)
                self.is_loading = False
                return None

        self.course_details = course
        self.is_loading = False
        return course

    async def fetch_teacher_courses(self, teacher_id: str) -> list[Course]:
        if not teacher_id:
            self.error = "Invalid teacher ID"
            return []

        self.is_loading = True
        self.error = None

        try:
            courses = await self.service.list_teacher_courses(teacher_id)
        except ApiError as e:
            logger.error(
                "teacher_courses_failed",
                teacher_id=teacher_id,
                kind=e.kind.value,
                error=e.message,
            )
            self.error = MSG_TEACHER_COURSES_UNAVAILABLE
            self.is_loading = False
            return []

        self.courses = courses
        self.filtered_courses = list(courses)
        self.is_loading = False
        return courses

    # ==========================================================================
    # Course authoring
    # ==========================================================================

    async def create_course(
        self,
        course_input: CourseInput | None,
        course_image: CourseImage | None = None,
    ) -> Course | None:
        """Create a course, then refresh the list in the background."""
        if course_input is None:
            self.error = "Course data is required"
            return None

        self.is_loading = True
        self.error = None

        try:
            course = await self.service.create_course(course_input, course_image)
        except ApiError as e:
            logger.error("course_create_failed", kind=e.kind.value, error=e.message)
            message = describe_failure(
                e, "Failed to create course", server_fallback="Validation error"
            )
            self.error = message
            self.is_loading = False
            self.notifier.alert("Error", message)
            return None

        self._spawn(self.fetch_all_courses(), name="course_list_refresh")
        self.notifier.alert("Success", "Course created successfully")
        self.is_loading = False
        return course

    async def update_course(
        self,
        course_id: str,
        update_input: CourseUpdateInput | None,
    ) -> Course | None:
        """Update a course and reload it if it is the one being viewed."""
        if not course_id or update_input is None:
            self.error = "Course ID and update data are required"
            return None

        self.is_loading = True
        self.error = None

        try:
            course = await self.service.update_course(course_id, update_input)
        except ApiError as e:
            logger.error(
                "course_update_failed",
                course_id=course_id,
                kind=e.kind.value,
                error=e.message,
            )
            message = describe_failure(
                e, "Failed to update course", server_fallback="Validation error"
            )
            self.error = message
            self.is_loading = False
            self.notifier.alert("Error", message)
            return None

        if self.course_details is not None and self.course_details.id == course_id:
            await self.fetch_course_details(course_id)

        self.notifier.alert("Success", "Course updated successfully")
        self.is_loading = False
        return course

    # ==========================================================================
    # Filtering
    # ==========================================================================

    def set_active_category(self, category: str) -> None:
        self.active_category = category
        self.filter_courses_by_category(category)

    def filter_courses_by_category(self, category: str) -> None:
        if category == ALL_CATEGORIES:
            self.filtered_courses = list(self.courses)
        else:
            self.filtered_courses = [
                course for course in self.courses if course.category == category
            ]

    def reset_error(self) -> None:
        self.error = None
        self.status_message = None

    # ==========================================================================
    # Background work
    # ==========================================================================

    def _spawn(self, coro: Coroutine[Any, Any, Any], name: str) -> None:
        task = asyncio.create_task(coro, name=name)
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    @property
    def has_pending_work(self) -> bool:
        return bool(self._pending)

    async def wait_for_pending(self) -> None:
        """Wait until scheduled retries and refreshes (and any they spawn) finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending))

    async def aclose(self) -> None:
        """Cancel scheduled retries and refreshes."""
        tasks = list(self._pending)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
