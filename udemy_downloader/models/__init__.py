"""Data models for courses, curricula, transfers, and authentication."""

from .auth_models import LoginResult
from .course_models import (
    VIDEO_MIME_TYPE,
    Asset,
    Chapter,
    Course,
    CurriculumTree,
    Lecture,
    LectureDetail,
    Rendition,
)
from .download_models import DownloadSummary, TransferStats

__all__ = [
    "VIDEO_MIME_TYPE",
    "Asset",
    "Chapter",
    "Course",
    "CurriculumTree",
    "Lecture",
    "LectureDetail",
    "Rendition",
    "LoginResult",
    "TransferStats",
    "DownloadSummary",
]
