"""API client for per-lecture detail and completion tracking."""

from __future__ import annotations

import logging

from ..models import LectureDetail
from ..parser import CurriculumParser
from ..utils.http_client import HttpClient

LECTURE_DETAIL_URL = (
    "https://{portal_name}.udemy.com/api-2.0/users/me/subscribed-courses/{course_id}/lectures/{lecture_id}"
    "?fields[asset]=@min,download_urls,external_url,slide_urls,status,captions,thumbnail_url,time_estimation,stream_urls"
    "&fields[caption]=@default,is_translation"
    "&fields[course]=id,url,locale"
    "&fields[lecture]=@default,course,can_give_cc_feedback,download_url"
)
COMPLETED_LECTURES_URL = (
    "https://{portal_name}.udemy.com/api-2.0/users/me/subscribed-courses/{course_id}/completed-lectures/"
)


class LectureAPI:
    """Fetches lecture assets with fresh download urls and marks lectures done."""

    def __init__(self, http_client: HttpClient, portal_name: str, parser: CurriculumParser | None = None) -> None:
        self._client = http_client
        self.portal_name = portal_name
        self._parser = parser or CurriculumParser()

    def get_lecture_detail(self, course_id: int, lecture_id: int) -> LectureDetail:
        url = LECTURE_DETAIL_URL.format(portal_name=self.portal_name, course_id=course_id, lecture_id=lecture_id)
        try:
            data = self._client.get_json(url)
        except Exception as exc:
            logging.error("Failed to fetch lecture %s: %s", lecture_id, exc)
            raise
        return self._parser.parse_lecture_detail(data)

    def mark_complete(self, course_id: int, lecture_id: int) -> None:
        url = COMPLETED_LECTURES_URL.format(portal_name=self.portal_name, course_id=course_id)
        payload = {"lecture_id": lecture_id, "downloaded": False}
        try:
            self._client.post_json(url, payload)
        except Exception as exc:
            logging.error("Failed to mark lecture %s complete: %s", lecture_id, exc)
            raise
