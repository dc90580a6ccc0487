"""Course catalog: schemas, backend calls, and the catalog state container.

Provides:
- Course list fetching with bounded automatic retry
- Category derivation and filtering
- Course detail and teacher course lookups
- Course creation and updates
"""

from .schemas import (
    Course,
    CourseDocument,
    CourseImage,
    CourseInput,
    CourseUpdateInput,
    CourseVideo,
    Teacher,
)
from .service import CourseNotFoundError, CourseService
from .store import ALL_CATEGORIES, CourseCatalogStore, build_categories


__all__ = [
    "ALL_CATEGORIES",
    "Course",
    "CourseCatalogStore",
    "CourseDocument",
    "CourseImage",
    "CourseInput",
    "CourseNotFoundError",
    "CourseService",
    "CourseUpdateInput",
    "CourseVideo",
    "Teacher",
    "build_categories",
]
