"""Utility helpers for HTTP and filesystem operations."""

from .course_url import CourseUrl, parse_course_url
from .file_utils import ensure_directory, sanitize, write_atomically
from .http_client import AuthenticationError, HttpClient, TransferError

__all__ = [
    "AuthenticationError",
    "CourseUrl",
    "HttpClient",
    "TransferError",
    "ensure_directory",
    "parse_course_url",
    "sanitize",
    "write_atomically",
]
