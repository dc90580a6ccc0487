"""Progress calculations independent of any backend call.

- Enrollment state as seen by the client
- Course completion percentage
- Video completion threshold
"""

from decimal import ROUND_HALF_UP, Decimal
from enum import Enum


class EnrollmentState(str, Enum):
    """Enrollment state derived from the loaded progress record."""

    NOT_ENROLLED = "not_enrolled"  # No record for the course
    ENROLLED = "enrolled"  # Record exists, not finished
    COMPLETED = "completed"  # Flagged complete or every video done


# ==============================================================================
# Helper Functions
# ==============================================================================


def completion_percent(
    completed_videos: int,
    total_videos: int,
    course_completed: bool = False,
) -> int:
    """Share of completed videos as a whole percentage in [0, 100].

    Halves round up (5 of 8 is 62.5%, reported as 63). A course without
    videos is 100% only when the course itself is flagged complete.
    """
    if total_videos <= 0:
        return 100 if course_completed else 0

    percent = (Decimal(100) * completed_videos / total_videos).quantize(
        Decimal(1), rounding=ROUND_HALF_UP
    )
    return max(0, min(100, int(percent)))


def reaches_completion(
    watched_seconds: float,
    duration_seconds: float | None,
    threshold: float,
) -> bool:
    """Whether the watched position counts as finishing the video."""
    if not duration_seconds or duration_seconds <= 0:
        return False
    return watched_seconds / duration_seconds >= threshold
