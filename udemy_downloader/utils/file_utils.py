"""Filesystem helpers for preparing output folders and safe filenames."""

from __future__ import annotations

import os
from pathlib import Path

from ..models import Chapter, Lecture

PART_SUFFIX = ".part"


def sanitize(component: str) -> str:
    """Return a cross-platform-safe version of a single path segment.

    ASCII letters, digits, space, ``-``, ``_`` and ``.`` are kept (a leading
    ``.`` is not, so nothing becomes a hidden file); every other character
    is replaced by ``_``. Never apply this to a full path.
    """

    chars = []
    for index, char in enumerate(component):
        valid = (char.isascii() and char.isalnum()) or char in " -_" or (char == "." and index != 0)
        chars.append(char if valid else "_")
    return "".join(chars)


def ensure_directory(path: str) -> str:
    """Creates a directory (and its parents) if needed."""

    Path(path).mkdir(parents=True, exist_ok=True)
    return path


def build_chapter_directory(base_output: str, course_name: str, chapter: Chapter) -> str:
    """Returns the folder path where lectures of ``chapter`` are stored."""

    return os.path.join(base_output, course_name, f"{chapter.display_index:03d} {sanitize(chapter.title)}")


def build_lecture_filename(chapter_dir: str, lecture: Lecture) -> str:
    extension = Path(lecture.primary_filename).suffix
    return os.path.join(chapter_dir, f"{lecture.display_index:03d} {sanitize(lecture.title)}{extension}")


def build_attachment_filename(chapter_dir: str, lecture: Lecture, title: str) -> str:
    return os.path.join(chapter_dir, f"{lecture.display_index:03d} {sanitize(title)}")


def write_atomically(target_path: str, data: bytes) -> None:
    """Write ``data`` next to ``target_path`` and rename it into place."""

    part_path = f"{target_path}{PART_SUFFIX}"
    try:
        with open(part_path, "wb") as handle:
            handle.write(data)
        os.replace(part_path, target_path)
    except OSError:
        if os.path.exists(part_path):
            os.remove(part_path)
        raise
