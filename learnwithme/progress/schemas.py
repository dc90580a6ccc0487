"""Pydantic schemas for course progress.

Response models for:
- Per-video watch progress
- The per-course progress record
- The synthetic "already enrolled" marker
"""

from datetime import datetime
from typing import Literal

from pydantic import Field

from learnwithme.api.schemas import ApiModel


# ==============================================================================
# Progress Records
# ==============================================================================


class VideoProgress(ApiModel):
    """Watch progress for one video."""

    video_id: str
    watched_seconds: float = Field(default=0, ge=0)
    completed: bool = False


class CourseProgress(ApiModel):
    """The signed-in user's progress record for one course."""

    id: str = Field(alias="_id")
    user_id: str | None = None
    course_id: str
    completed: bool = False
    completed_at: datetime | None = None
    videos_progress: list[VideoProgress] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def video(self, video_id: str) -> VideoProgress | None:
        for entry in self.videos_progress:
            if entry.video_id == video_id:
                return entry
        return None

    def completed_video_count(self) -> int:
        """Distinct videos marked completed."""
        return len({entry.video_id for entry in self.videos_progress if entry.completed})


# ==============================================================================
# Enrollment
# ==============================================================================


class AlreadyEnrolled(ApiModel):
    """Returned instead of a new record when the user was already enrolled.

    Carries no server data; callers refetch to get the real record.
    """

    already_enrolled: Literal[True] = True
    id: str = "existing"
    course_id: str
    user_id: str | None = None
    completed: bool = False
