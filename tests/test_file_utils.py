import os

from udemy_downloader.models import Chapter, Lecture
from udemy_downloader.utils.file_utils import (
    build_chapter_directory,
    build_lecture_filename,
    sanitize,
    write_atomically,
)


def test_sanitize_keeps_safe_characters():
    assert sanitize("the-filename.mp4") == "the-filename.mp4"


def test_sanitize_replaces_unsafe_characters():
    actual = sanitize('087 Styling & Positioning our Badge with "absolute" and "relative".mp4')

    assert actual == "087 Styling _ Positioning our Badge with _absolute_ and _relative_.mp4"


def test_sanitize_leading_dot_and_non_ascii():
    assert sanitize(".hidden") == "_hidden"
    assert sanitize("Café/Bar") == "Caf__Bar"


def test_build_chapter_directory():
    chapter = Chapter(display_index=23, title="The Title")

    assert build_chapter_directory(".", "my-course", chapter) == os.path.join(".", "my-course", "023 The Title")


def test_build_lecture_filename():
    lecture = Lecture(id=1, display_index=32, title="The Lecture", has_video=True, primary_filename="blah-blah.mp4")

    assert build_lecture_filename(".", lecture) == os.path.join(".", "032 The Lecture.mp4")


def test_write_atomically_replaces_target(tmp_path):
    target = tmp_path / "video.mp4"
    target.write_bytes(b"old")

    write_atomically(str(target), b"new")

    assert target.read_bytes() == b"new"
    assert os.listdir(tmp_path) == ["video.mp4"]
