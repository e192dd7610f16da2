from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

import pytest
from requests.structures import CaseInsensitiveDict

from udemy_downloader.models import Asset, Chapter, Course, CurriculumTree, Lecture, LectureDetail, Rendition


class FakeResponse:
    def __init__(self, status_code: int, content: bytes = b"", headers: Optional[Dict[str, str]] = None) -> None:
        self.status_code = status_code
        self.content = content
        self.headers = CaseInsensitiveDict(headers or {})


class FakeTransport:
    """Serves a fixed body and records every request it receives."""

    def __init__(
        self,
        body: bytes,
        accept_ranges: bool = True,
        head_status: int = 200,
        range_status: int = 206,
        get_status: int = 200,
        send_length: bool = True,
    ) -> None:
        self.body = body
        self.accept_ranges = accept_ranges
        self.head_status = head_status
        self.range_status = range_status
        self.get_status = get_status
        self.send_length = send_length
        self.heads: List[str] = []
        self.gets: List[Tuple[str, Optional[Tuple[int, int]]]] = []

    def head(self, url: str) -> FakeResponse:
        self.heads.append(url)
        headers = {}
        if self.accept_ranges:
            headers["Accept-Ranges"] = "bytes"
        if self.send_length:
            headers["Content-Length"] = str(len(self.body))
        return FakeResponse(self.head_status, headers=headers)

    def get(self, url: str, byte_range: Optional[Tuple[int, int]] = None) -> FakeResponse:
        self.gets.append((url, byte_range))
        if byte_range is None:
            return FakeResponse(self.get_status, self.body)
        if self.range_status == 206:
            start, end = byte_range
            return FakeResponse(206, self.body[start : end + 1])
        if self.range_status == 200:
            return FakeResponse(200, self.body)
        return FakeResponse(self.range_status)


class FakeLectureAPI:
    """Answers lecture detail requests from a dict keyed by lecture id."""

    def __init__(self, details: Dict[int, Any]) -> None:
        self.details = details
        self.requested: List[Tuple[int, int]] = []
        self.completed: List[Tuple[int, int]] = []

    def get_lecture_detail(self, course_id: int, lecture_id: int) -> LectureDetail:
        self.requested.append((course_id, lecture_id))
        detail = self.details[lecture_id]
        if isinstance(detail, Exception):
            raise detail
        return detail

    def mark_complete(self, course_id: int, lecture_id: int) -> None:
        detail = self.details.get(lecture_id)
        if isinstance(detail, Exception):
            raise detail
        self.completed.append((course_id, lecture_id))


def make_rendition(label: str, kind: Optional[str] = "video/mp4", uri: Optional[str] = None) -> Rendition:
    return Rendition(media_kind=kind, source_uri=uri or f"http://host-name/video-{label}.mp4", quality_label=label)


def chapter_item(index: int, title: str) -> Dict[str, Any]:
    return {"_class": "chapter", "object_index": index, "title": title, "sort_order": 100 - index}


def lecture_item(
    lecture_id: int,
    index: int,
    title: str,
    asset_type: str = "Video",
    supplementary_assets: Optional[List[Any]] = None,
) -> Dict[str, Any]:
    return {
        "_class": "lecture",
        "id": lecture_id,
        "object_index": index,
        "title": title,
        "asset": {
            "title": f"{title.lower().replace(' ', '-')}.mp4",
            "filename": f"{title.lower().replace(' ', '-')}.mp4",
            "asset_type": asset_type,
            "time_estimation": 120,
        },
        "supplementary_assets": supplementary_assets or [],
    }


@pytest.fixture
def course() -> Course:
    return Course(id=54321, canonical_url="/course/css-the-complete-guide/", slug="css-the-complete-guide")


@pytest.fixture
def tree() -> CurriculumTree:
    return CurriculumTree(
        chapters=[
            Chapter(
                display_index=1,
                title="Getting Started",
                lectures=[
                    Lecture(id=4321, display_index=1, title="Intro", has_video=True, primary_filename="intro.mp4"),
                    Lecture(id=4322, display_index=2, title="What is CSS?", has_video=True, primary_filename="css.mp4"),
                    Lecture(id=4323, display_index=3, title="Useful Resources", has_video=False, primary_filename="links.txt"),
                ],
            ),
            Chapter(
                display_index=2,
                title="Basics",
                lectures=[
                    Lecture(id=4400, display_index=1, title="Module Intro", has_video=True, primary_filename="module.mp4"),
                ],
            ),
        ]
    )


def lecture_detail(lecture_id: int, title: str, labels=("720", "480")) -> LectureDetail:
    return LectureDetail(
        id=lecture_id,
        title=title,
        asset=Asset(
            title=f"{title}.mp4",
            kind="Video",
            estimated_seconds=300,
            rendition_source="Video",
            renditions=[make_rendition(label, uri=f"http://host-name/{lecture_id}-{label}.mp4") for label in labels],
        ),
    )
