"""Turns the flat curriculum item stream into a chapter/lecture tree."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence, Set, Tuple

from pydantic import ValidationError

from ..models import Asset, Chapter, Course, CurriculumTree, Lecture, LectureDetail, Rendition

CHAPTER_CLASS = "chapter"
LECTURE_CLASS = "lecture"
RENDITION_KEYS = ("Video", "File")


class ParseError(ValueError):
    """Raised when a curriculum record misses a required field."""

    def __init__(self, message: str, field: Optional[str] = None, position: Optional[int] = None) -> None:
        if position is not None:
            message = f"{message} (record #{position})"
        super().__init__(message)
        self.field = field
        self.position = position


class SupplementaryAssetError(ParseError):
    """Raised for a malformed supplementary asset; never escapes the parser."""


def _require_str(record: Dict[str, Any], key: str, position: Optional[int] = None) -> str:
    value = record.get(key) if isinstance(record, dict) else None
    if not isinstance(value, str):
        raise ParseError(f"Missing or invalid field '{key}'", field=key, position=position)
    return value


def _require_uint(record: Dict[str, Any], key: str, position: Optional[int] = None) -> int:
    value = record.get(key) if isinstance(record, dict) else None
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ParseError(f"Missing or invalid field '{key}'", field=key, position=position)
    return value


class CurriculumParser:
    """Parses course payloads returned by the Udemy API."""

    def parse(self, raw_items: Sequence[Dict[str, Any]]) -> CurriculumTree:
        """Rebuild chapters from ``raw_items``.

        Items carry no parent reference: every lecture belongs to the most
        recent chapter before it. Item classes other than chapter and
        lecture (quizzes, practice tests) are ignored.
        """

        chapters: List[Chapter] = []
        current: Optional[Chapter] = None
        chapter_indices: Set[int] = set()
        lecture_indices: Set[int] = set()

        for position, item in enumerate(raw_items):
            item_class = item.get("_class") if isinstance(item, dict) else None
            if item_class == CHAPTER_CLASS:
                if current is not None:
                    chapters.append(current)
                current = Chapter(
                    display_index=_require_uint(item, "object_index", position),
                    title=self._chapter_title(item, position),
                )
                if current.display_index in chapter_indices:
                    raise ParseError(
                        f"Duplicate chapter index {current.display_index}", field="object_index", position=position
                    )
                chapter_indices.add(current.display_index)
                lecture_indices = set()
            elif item_class == LECTURE_CLASS:
                if current is None:
                    raise ParseError("Lecture found before any chapter", field="_class", position=position)
                lecture = self._parse_lecture(item, position)
                if lecture.display_index in lecture_indices:
                    raise ParseError(
                        f"Duplicate lecture index {lecture.display_index} in chapter {current.display_index}",
                        field="object_index",
                        position=position,
                    )
                lecture_indices.add(lecture.display_index)
                current.lectures.append(lecture)

        if current is not None:
            chapters.append(current)

        logging.debug(
            "Parsed %s chapters, %s lectures",
            len(chapters),
            sum(len(chapter.lectures) for chapter in chapters),
        )
        return CurriculumTree(chapters=chapters)

    def parse_document(self, document: Dict[str, Any]) -> CurriculumTree:
        """Parse a full API response whose items sit under ``results``."""

        results = document.get("results") if isinstance(document, dict) else None
        if not isinstance(results, list):
            raise ParseError("Curriculum document has no 'results' list", field="results")
        return self.parse(results)

    def parse_lecture_detail(self, raw: Dict[str, Any]) -> LectureDetail:
        asset = raw.get("asset") if isinstance(raw, dict) else None
        if not isinstance(asset, dict):
            raise ParseError("Missing or invalid field 'asset'", field="asset")
        return LectureDetail(
            id=_require_uint(raw, "id"),
            title=_require_str(raw, "title"),
            asset=self.parse_asset(asset),
        )

    def parse_subscribed_courses(self, document: Dict[str, Any]) -> List[Course]:
        results = document.get("results") if isinstance(document, dict) else None
        if not isinstance(results, list):
            raise ParseError("Course list has no 'results' list", field="results")
        courses: List[Course] = []
        for entry in results:
            try:
                courses.append(Course.model_validate(entry))
            except ValidationError:
                logging.debug("Skipping course entry lacking fields: %s", entry)
        return courses

    def parse_asset(self, asset: Dict[str, Any], position: Optional[int] = None) -> Asset:
        source, entries = self._rendition_entries(asset, position)
        try:
            renditions = [Rendition.model_validate(entry) for entry in entries]
        except ValidationError as exc:
            raise ParseError(f"Malformed download_urls entry: {exc}", field="download_urls", position=position) from exc
        return Asset(
            title=_require_str(asset, "title", position),
            kind=_require_str(asset, "asset_type", position),
            estimated_seconds=_require_uint(asset, "time_estimation", position),
            rendition_source=source,
            renditions=renditions,
        )

    def _parse_lecture(self, item: Dict[str, Any], position: int) -> Lecture:
        asset = item.get("asset")
        if not isinstance(asset, dict):
            raise ParseError("Missing or invalid field 'asset'", field="asset", position=position)
        primary = self.parse_asset(asset, position)
        filename = asset.get("filename")
        supplementary = item.get("supplementary_assets")
        if supplementary is None:
            supplementary = []
        elif not isinstance(supplementary, list):
            raise ParseError(
                "Missing or invalid field 'supplementary_assets'", field="supplementary_assets", position=position
            )
        return Lecture(
            id=_require_uint(item, "id", position),
            display_index=_require_uint(item, "object_index", position),
            title=_require_str(item, "title", position),
            has_video=primary.kind == "Video",
            primary_filename=filename if isinstance(filename, str) and filename else primary.title,
            supplementary_assets=self._parse_supplementary_assets(supplementary, position),
        )

    def _parse_supplementary_assets(self, entries: Iterable[Any], position: int) -> List[Asset]:
        assets: List[Asset] = []
        for entry in entries:
            try:
                assets.append(self._parse_supplementary_asset(entry))
            except SupplementaryAssetError as exc:
                logging.debug("Dropping supplementary asset of record #%s: %s", position, exc)
        return assets

    def _parse_supplementary_asset(self, entry: Any) -> Asset:
        if not isinstance(entry, dict):
            raise SupplementaryAssetError("Supplementary asset is not an object")
        try:
            return self.parse_asset(entry)
        except ParseError as exc:
            raise SupplementaryAssetError(str(exc), field=exc.field) from exc

    def _chapter_title(self, item: Dict[str, Any], position: int) -> str:
        title = _require_str(item, "title", position)
        if not title.strip():
            raise ParseError("Chapter title is empty", field="title", position=position)
        return title

    @staticmethod
    def _rendition_entries(asset: Dict[str, Any], position: Optional[int]) -> Tuple[Optional[str], List[Any]]:
        # "Video" wins over "File"; neither present means no renditions
        download_urls = asset.get("download_urls")
        if download_urls is None:
            return None, []
        if not isinstance(download_urls, dict):
            raise ParseError("download_urls is not an object", field="download_urls", position=position)
        for key in RENDITION_KEYS:
            entries = download_urls.get(key)
            if entries is not None:
                if not isinstance(entries, list):
                    raise ParseError(f"download_urls['{key}'] is not a list", field="download_urls", position=position)
                return key, entries
        return None, []
