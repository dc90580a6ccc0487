"""Course progress: enrollment, watch progress, and completion.

Provides:
- Idempotent enrollment
- Video progress reporting with automatic completion
- Overall completion percentage
- Course completion
"""

from .models import EnrollmentState, completion_percent, reaches_completion
from .playback import PlaybackProgressReporter
from .schemas import AlreadyEnrolled, CourseProgress, VideoProgress
from .service import ProgressService
from .store import ProgressTracker


__all__ = [
    "AlreadyEnrolled",
    "CourseProgress",
    "EnrollmentState",
    "PlaybackProgressReporter",
    "ProgressService",
    "ProgressTracker",
    "VideoProgress",
    "completion_percent",
    "reaches_completion",
]
