"""API layer for authentication, courses, and lectures."""

from .auth_api import AuthAPI
from .course_api import CourseAPI
from .lecture_api import LectureAPI

__all__ = ["AuthAPI", "CourseAPI", "LectureAPI"]
