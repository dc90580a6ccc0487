"""Pydantic schemas for courses and their media."""

from datetime import datetime

from pydantic import Field

from learnwithme.api.schemas import ApiModel, UploadFile


class Teacher(ApiModel):
    """Course owner as nested in course payloads."""

    id: str = Field(alias="_id")
    name: str | None = None
    email: str | None = None
    profile_image_url: str | None = None


class CourseVideo(ApiModel):
    """Video lesson. ``duration`` is in minutes."""

    id: str | None = Field(default=None, alias="_id")
    title: str
    description: str | None = None
    url: str | None = None
    key: str | None = None
    duration: float | None = Field(default=None, ge=0)
    order: int | None = None

    @property
    def identity(self) -> str | None:
        """Identifier used for progress tracking (``_id``, else ``key``)."""
        return self.id or self.key

    @property
    def duration_seconds(self) -> float | None:
        if self.duration is None:
            return None
        return self.duration * 60


class CourseDocument(ApiModel):
    """Downloadable course material."""

    id: str | None = Field(default=None, alias="_id")
    title: str
    description: str | None = None
    url: str | None = None
    key: str | None = None
    order: int | None = None


class Course(ApiModel):
    """Course as returned by list and detail queries.

    ``user_progress`` is filled in client-side with the signed-in user's
    completion percentage while the course is being viewed.
    """

    id: str = Field(alias="_id")
    title: str
    description: str | None = None
    certified: bool | None = None
    price: float | None = None
    category: str | None = None
    level: str | None = None
    rating: float | None = None
    students: int | None = None
    course_image_url: str | None = None
    course_image_key: str | None = None
    progress: int | None = None
    user_progress: int | None = None
    teacher: Teacher | None = None
    course_videos: list[CourseVideo] = Field(default_factory=list)
    course_documents: list[CourseDocument] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def find_video(self, video_id: str) -> CourseVideo | None:
        for video in self.course_videos:
            if video.identity == video_id:
                return video
        return None

    def ordered_videos(self) -> list[CourseVideo]:
        """Videos by explicit ``order``; unordered ones keep their position."""
        indexed = list(enumerate(self.course_videos))
        indexed.sort(
            key=lambda item: (
                item[1].order if item[1].order is not None else item[0]
            )
        )
        return [video for _, video in indexed]


class CourseInput(ApiModel):
    """Payload for creating a course."""

    title: str = Field(..., min_length=1)
    description: str
    category: str | None = None
    level: str | None = None
    price: float | None = Field(default=None, ge=0)


class CourseUpdateInput(ApiModel):
    """Partial payload for updating a course."""

    title: str | None = Field(default=None, min_length=1)
    description: str | None = None
    category: str | None = None
    level: str | None = None
    price: float | None = Field(default=None, ge=0)


class CourseImage(UploadFile):
    """Cover image uploaded together with a new course."""
