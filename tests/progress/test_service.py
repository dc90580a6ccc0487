"""Tests for ProgressService backend calls."""

import httpx
import pytest

from learnwithme.api.client import GraphQLClient
from learnwithme.api.errors import ApiError, ApiErrorKind
from learnwithme.progress.schemas import AlreadyEnrolled, CourseProgress
from learnwithme.progress.service import ProgressService
from tests.utils.fakes import data, graphql_error, make_access_token, progress_payload


@pytest.fixture
def client(settings, backend) -> GraphQLClient:
    token = make_access_token()
    return GraphQLClient.from_settings(
        settings, token_provider=lambda: token, transport=backend.transport
    )


@pytest.fixture
def service(client) -> ProgressService:
    return ProgressService(client, lambda: "user-1")


class TestIsEnrolled:
    """Tests for is_enrolled."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("answer", [True, False])
    async def test_returns_backend_answer(self, service, backend, answer):
        backend.on("IsEnrolled", data(isEnrolledInCourse=answer))

        assert await service.is_enrolled("course-1") is answer
        request = backend.calls("IsEnrolled")[0]
        assert request.variables == {"courseId": "course-1"}
        assert request.headers["authorization"].startswith("Bearer ")

    @pytest.mark.asyncio
    async def test_without_session(self, settings, backend):
        client = GraphQLClient.from_settings(settings, transport=backend.transport)
        service = ProgressService(client, lambda: None)

        assert await service.is_enrolled("course-1") is False
        assert backend.requests == []

    @pytest.mark.asyncio
    async def test_conflict_means_enrolled(self, service, backend):
        backend.on("IsEnrolled", graphql_error("User already enrolled"))

        assert await service.is_enrolled("course-1") is True

    @pytest.mark.asyncio
    async def test_failure_means_not_enrolled(self, service, backend):
        backend.on("IsEnrolled", httpx.ReadTimeout("timed out"))

        assert await service.is_enrolled("course-1") is False


class TestEnrollInCourse:
    """Tests for enroll_in_course."""

    @pytest.mark.asyncio
    async def test_existing_enrollment_skips_create(self, service, backend):
        backend.on("IsEnrolled", data(isEnrolledInCourse=True))

        result = await service.enroll_in_course("course-1")

        assert result == AlreadyEnrolled(course_id="course-1", user_id="user-1")
        assert backend.calls("EnrollInCourse") == []

    @pytest.mark.asyncio
    async def test_creates_record(self, service, backend):
        backend.on("IsEnrolled", data(isEnrolledInCourse=False))
        backend.on("EnrollInCourse", data(createCourseProgress=progress_payload()))

        result = await service.enroll_in_course("course-1")

        assert isinstance(result, CourseProgress)
        assert result.course_id == "course-1"

    @pytest.mark.asyncio
    async def test_conflict_code_on_create(self, service, backend):
        backend.on("IsEnrolled", data(isEnrolledInCourse=False))
        backend.on("EnrollInCourse", graphql_error("Conflict", code="DUPLICATE_KEY"))

        result = await service.enroll_in_course("course-1")

        assert isinstance(result, AlreadyEnrolled)

    @pytest.mark.asyncio
    async def test_other_create_errors_propagate(self, service, backend):
        backend.on("IsEnrolled", data(isEnrolledInCourse=False))
        backend.on("EnrollInCourse", graphql_error("Course is archived"))

        with pytest.raises(ApiError) as exc_info:
            await service.enroll_in_course("course-1")

        assert exc_info.value.kind is ApiErrorKind.SERVER
        assert exc_info.value.message == "Course is archived"

    @pytest.mark.asyncio
    async def test_requires_user(self, client, backend):
        service = ProgressService(client, lambda: None)

        with pytest.raises(ApiError) as exc_info:
            await service.enroll_in_course("course-1")

        assert exc_info.value.kind is ApiErrorKind.UNAUTHENTICATED
        assert backend.requests == []

    @pytest.mark.asyncio
    async def test_requires_course_id(self, service):
        with pytest.raises(ApiError) as exc_info:
            await service.enroll_in_course("")

        assert exc_info.value.kind is ApiErrorKind.VALIDATION


class TestProgressCalls:
    """Tests for progress reads and writes."""

    @pytest.mark.asyncio
    async def test_malformed_record_is_a_server_error(self, service, backend):
        backend.on("GetUserCourseProgress", data(getUserCourseProgress={"_id": "p"}))

        with pytest.raises(ApiError) as exc_info:
            await service.get_course_progress("course-1")

        assert exc_info.value.kind is ApiErrorKind.SERVER

    @pytest.mark.asyncio
    async def test_update_rejects_negative_position(self, service, backend):
        with pytest.raises(ApiError) as exc_info:
            await service.update_video_progress("course-1", "v1", -5, False)

        assert exc_info.value.kind is ApiErrorKind.VALIDATION
        assert backend.requests == []

    @pytest.mark.asyncio
    async def test_mark_course_completed(self, service, backend):
        backend.on(
            "MarkCourseAsCompleted",
            data(markCourseAsCompleted=progress_payload(completed=True)),
        )

        progress = await service.mark_course_completed("course-1")

        assert progress.completed is True
        assert backend.calls("MarkCourseAsCompleted")[0].variables == {
            "courseId": "course-1"
        }
