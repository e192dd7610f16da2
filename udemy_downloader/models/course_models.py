"""Pydantic models that describe courses, curricula, and media renditions."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

VIDEO_MIME_TYPE = "video/mp4"

RenditionSource = Literal["Video", "File"]


class Course(BaseModel):
    """A subscribed course as returned by the course search API."""

    id: int
    canonical_url: str = Field(alias="url")
    slug: str = Field(alias="published_title")

    model_config = ConfigDict(populate_by_name=True)


class Rendition(BaseModel):
    """One downloadable encoding of an asset."""

    media_kind: Optional[str] = Field(default=None, alias="type")
    source_uri: str = Field(alias="file")
    quality_label: str = Field(alias="label")

    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)


class Asset(BaseModel):
    """A titled unit of content and its renditions."""

    title: str
    kind: str
    estimated_seconds: int = Field(ge=0)
    rendition_source: Optional[RenditionSource] = None
    renditions: List[Rendition] = Field(default_factory=list)


class Lecture(BaseModel):
    id: int
    display_index: int
    title: str
    has_video: bool
    primary_filename: str
    supplementary_assets: List[Asset] = Field(default_factory=list)


class Chapter(BaseModel):
    display_index: int
    title: str
    lectures: List[Lecture] = Field(default_factory=list)


class CurriculumTree(BaseModel):
    """Chapters of a course in curriculum order."""

    chapters: List[Chapter] = Field(default_factory=list)


class LectureDetail(BaseModel):
    """A single lecture fetched on its own, with its primary asset."""

    id: int
    title: str
    asset: Asset
