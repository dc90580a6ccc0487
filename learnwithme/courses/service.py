"""Course catalog calls.

All reads are network-only: the client keeps no response cache, so
every call reflects the backend's current state.
"""

import structlog

from learnwithme.api import operations
from learnwithme.api.client import GraphQLClient
from learnwithme.api.errors import ApiError, ApiErrorKind, InvalidInputError
from learnwithme.api.schemas import parse_payload, parse_payload_list

from .schemas import Course, CourseImage, CourseInput, CourseUpdateInput


logger = structlog.get_logger(__name__)


class CourseNotFoundError(ApiError):
    """Course detail query returned no course."""

    def __init__(self, course_id: str) -> None:
        super().__init__(f"Course {course_id} not found", ApiErrorKind.NOT_FOUND)


class CourseService:
    """Wraps the course queries and mutations."""

    def __init__(self, client: GraphQLClient) -> None:
        self.client = client

    async def list_courses(self) -> list[Course]:
        """Get all courses (without nested teacher names)."""
        data = await self.client.execute(
            operations.GET_ALL_COURSES, operation_name="GetAllCourses"
        )
        return parse_payload_list(Course, data.get("courses"), "courses")

    async def get_course(self, course_id: str) -> Course:
        """Get a course with its teacher, videos, and documents."""
        if not course_id:
            raise InvalidInputError("Course ID is required")

        data = await self.client.execute(
            operations.GET_COURSE_DETAILS,
            {"id": course_id},
            operation_name="GetCourseDetails",
        )
        payload = data.get("course")
        if not payload:
            raise CourseNotFoundError(course_id)
        return parse_payload(Course, payload, "course")

    async def list_teacher_courses(self, teacher_id: str) -> list[Course]:
        if not teacher_id:
            raise InvalidInputError("Teacher ID is required")

        data = await self.client.execute(
            operations.GET_TEACHER_COURSES,
            {"teacherId": teacher_id},
            operation_name="GetTeacherCourses",
        )
        return parse_payload_list(
            Course, data.get("coursesByTeacher"), "coursesByTeacher"
        )

    async def create_course(
        self,
        course_input: CourseInput,
        course_image: CourseImage | None = None,
    ) -> Course:
        """Create a course, uploading its cover image when one is given.

        Raises:
            InvalidInputError: If the cover image cannot be read.
            ApiError: If the backend rejects the course or is unreachable.
        """
        variables = {"input": course_input.model_dump(by_alias=True, exclude_none=True)}

        if course_image is not None:
            try:
                part = await course_image.read_part()
            except OSError as e:
                raise InvalidInputError("Course image could not be read") from e

            data = await self.client.execute_multipart(
                operations.CREATE_COURSE,
                variables,
                {"variables.file": part},
                operation_name="CreateCourse",
                authenticated=True,
            )
        else:
            data = await self.client.execute(
                operations.CREATE_COURSE,
                variables,
                operation_name="CreateCourse",
                authenticated=True,
            )

        course = parse_payload(Course, data.get("createCourse"), "createCourse")
        logger.info(
            "course_created",
            course_id=course.id,
            with_course_image=course_image is not None,
        )
        return course

    async def update_course(
        self,
        course_id: str,
        update_input: CourseUpdateInput,
    ) -> Course:
        if not course_id:
            raise InvalidInputError("Course ID is required")

        data = await self.client.execute(
            operations.UPDATE_COURSE,
            {
                "id": course_id,
                "input": update_input.model_dump(by_alias=True, exclude_none=True),
            },
            operation_name="UpdateCourse",
            authenticated=True,
        )
        course = parse_payload(Course, data.get("updateCourse"), "updateCourse")
        logger.info("course_updated", course_id=course.id)
        return course
