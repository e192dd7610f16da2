"""Batch download of the lectures of a course curriculum."""

from __future__ import annotations

import logging
from typing import List, Optional

from tqdm import tqdm

from ..api.lecture_api import LectureAPI
from ..models import Course, CurriculumTree, DownloadSummary, Lecture
from ..utils.file_utils import build_chapter_directory, build_lecture_filename, ensure_directory
from ..utils.http_client import AuthenticationError
from .attachment_downloader import AttachmentDownloader, AttachmentTask, plan_attachments
from .media_fetcher import MediaFetcher
from .quality import pick_rendition


class LectureDownloader:
    """Walks the curriculum and saves every selected lecture video.

    A failing lecture is logged and recorded in the summary; the remaining
    lectures are still processed. Only an authentication failure stops the
    batch.
    """

    def __init__(
        self,
        lecture_api: LectureAPI,
        fetcher: MediaFetcher,
        attachment_downloader: Optional[AttachmentDownloader] = None,
        show_progress: bool = True,
    ) -> None:
        self._lecture_api = lecture_api
        self._fetcher = fetcher
        self._attachment_downloader = attachment_downloader
        self.show_progress = show_progress

    def download(
        self,
        course: Course,
        tree: CurriculumTree,
        output_dir: str,
        wanted_chapter: Optional[int] = None,
        wanted_lecture: Optional[int] = None,
        wanted_quality: Optional[int] = None,
        dry_run: bool = False,
    ) -> DownloadSummary:
        logging.debug(
            "Download request chapter: %s, lecture: %s, quality: %s, dry_run: %s",
            wanted_chapter,
            wanted_lecture,
            wanted_quality,
            dry_run,
        )
        summary = DownloadSummary()
        attachments: List[AttachmentTask] = []

        for chapter in tree.chapters:
            if wanted_chapter is not None and chapter.display_index != wanted_chapter:
                continue
            chapter_dir = build_chapter_directory(output_dir, course.slug, chapter)
            logging.info("Downloading chapter %s - %s", chapter.display_index, chapter.title)
            if not dry_run:
                ensure_directory(chapter_dir)

            for lecture in chapter.lectures:
                if wanted_lecture is not None and lecture.display_index != wanted_lecture:
                    continue
                if self._attachment_downloader is not None:
                    attachments.extend(plan_attachments(chapter_dir, chapter, lecture))
                if not lecture.has_video:
                    summary.skipped.append(lecture.title)
                    continue
                try:
                    self._download_lecture(course, chapter_dir, lecture, wanted_quality, dry_run, summary)
                except AuthenticationError:
                    raise
                except Exception as exc:
                    logging.error("Error while saving %s: %s", lecture.title, exc)
                    summary.record_failure(lecture.title, exc)

        if attachments:
            if dry_run:
                for task in attachments:
                    logging.info("[dry-run] %s -> %s", task.title, task.path)
            else:
                self._attachment_downloader.download(attachments, summary)

        logging.info(
            "Finished: %s downloaded, %s skipped, %s failed",
            len(summary.downloaded),
            len(summary.skipped),
            len(summary.failed),
        )
        return summary

    def _download_lecture(
        self,
        course: Course,
        chapter_dir: str,
        lecture: Lecture,
        wanted_quality: Optional[int],
        dry_run: bool,
        summary: DownloadSummary,
    ) -> None:
        detail = self._lecture_api.get_lecture_detail(course.id, lecture.id)
        if not detail.asset.renditions:
            logging.info("No downloadable rendition for %s", lecture.title)
            summary.skipped.append(lecture.title)
            return

        rendition = pick_rendition(detail.asset.renditions, wanted_quality)
        target_filename = build_lecture_filename(chapter_dir, lecture)
        logging.debug("Getting (%s) %s -> %s", rendition.quality_label, rendition.source_uri, target_filename)
        if dry_run:
            logging.info("[dry-run] %s (%sp) -> %s", lecture.title, rendition.quality_label, target_filename)
            return

        with tqdm(unit="B", unit_scale=True, desc=lecture.title, leave=False, disable=not self.show_progress) as bar:

            def set_total(length: int) -> None:
                bar.total = length
                bar.refresh()

            stats = self._fetcher.download_to_file(
                rendition.source_uri,
                target_filename,
                progress_callback=lambda done: bar.update(done - bar.n),
                length_callback=set_total,
            )
        logging.info("Saved %s (%.2f MB/s)", target_filename, stats.megabytes_per_second)
        summary.downloaded.append(target_filename)

