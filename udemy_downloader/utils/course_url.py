"""Extraction of the portal and course slug from a course URL."""

from __future__ import annotations

import re
from typing import NamedTuple

COURSE_URL_PATTERN = re.compile(
    r"//(?P<portal_name>[^/]+?)\.udemy\.com/(?:course/)?(?P<course_name>[a-zA-Z0-9_-]+)",
    re.IGNORECASE,
)


class CourseUrl(NamedTuple):
    portal_name: str
    course_name: str


def parse_course_url(url: str) -> CourseUrl:
    """Split ``https://<portal>.udemy.com/course/<slug>/...`` into its parts."""

    match = COURSE_URL_PATTERN.search(url or "")
    if not match:
        raise ValueError(f"Could not parse course url <{url}>")
    return CourseUrl(portal_name=match.group("portal_name"), course_name=match.group("course_name"))
