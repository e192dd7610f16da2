"""API client for locating a subscribed course and fetching its curriculum."""

from __future__ import annotations

import logging

from ..models import Course
from ..parser import CurriculumParser
from ..utils.http_client import HttpClient

SUBSCRIBED_COURSES_URL = (
    "https://{portal_name}.udemy.com/api-2.0/users/me/subscribed-courses"
    "?fields[course]=id,url,published_title&page=1&page_size=1000&ordering=-access_time&search={course_name}"
)
CURRICULUM_URL = (
    "https://{portal_name}.udemy.com/api-2.0/courses/{course_id}/cached-subscriber-curriculum-items"
    "?fields[asset]=results,external_url,time_estimation,download_urls,slide_urls,filename,asset_type,"
    "captions,stream_urls,body"
    "&fields[chapter]=object_index,title,sort_order"
    "&fields[lecture]=id,title,object_index,asset,supplementary_assets,view_html"
    "&page_size=10000"
)


class CourseAPI:
    """Wraps the course endpoints and exposes typed helpers."""

    def __init__(self, http_client: HttpClient, portal_name: str, parser: CurriculumParser | None = None) -> None:
        self._client = http_client
        self.portal_name = portal_name
        self._parser = parser or CurriculumParser()

    def find_subscribed_course(self, course_name: str) -> Course:
        url = SUBSCRIBED_COURSES_URL.format(portal_name=self.portal_name, course_name=course_name)
        logging.debug("Requesting subscribed courses matching %s", course_name)
        try:
            data = self._client.get_json(url)
        except Exception as exc:
            logging.error("Failed to fetch subscribed courses: %s", exc)
            raise

        for course in self._parser.parse_subscribed_courses(data):
            if course.slug == course_name:
                return course
        raise LookupError(f"{course_name} was not found in subscribed courses")

    def get_curriculum_json(self, course_id: int) -> str:
        """Returns the raw curriculum document, as served."""

        url = CURRICULUM_URL.format(portal_name=self.portal_name, course_id=course_id)
        logging.debug("Requesting curriculum for course %s", course_id)
        try:
            return self._client.get_text(url)
        except Exception as exc:
            logging.error("Failed to fetch curriculum of course %s: %s", course_id, exc)
            raise
