"""Concurrent download of lecture attachments (supplementary files)."""

from __future__ import annotations

import asyncio
import logging
import os
from typing import List

from pydantic import BaseModel

from ..models import Chapter, DownloadSummary, Lecture
from ..utils.file_utils import PART_SUFFIX, build_attachment_filename
from ..utils.http_client import HttpClient


class AttachmentTask(BaseModel):
    title: str
    url: str
    path: str


def plan_attachments(chapter_dir: str, chapter: Chapter, lecture: Lecture) -> List[AttachmentTask]:
    """One task per supplementary asset that has a downloadable rendition."""

    tasks: List[AttachmentTask] = []
    for asset in lecture.supplementary_assets:
        if not asset.renditions:
            logging.debug("Attachment %s of %s has no download url", asset.title, lecture.title)
            continue
        tasks.append(
            AttachmentTask(
                title=f"{chapter.display_index:03d}/{lecture.display_index:03d} {asset.title}",
                url=asset.renditions[0].source_uri,
                path=build_attachment_filename(chapter_dir, lecture, asset.title),
            )
        )
    return tasks


class AttachmentDownloader:
    """Downloads attachment files concurrently, a bounded number at a time."""

    def __init__(self, http_client: HttpClient, workers: int = 4) -> None:
        self.workers = max(1, workers)
        self._http_client = http_client

    def download(self, tasks: List[AttachmentTask], summary: DownloadSummary) -> None:
        if not tasks:
            return
        logging.info("Downloading %s attachments with %s workers", len(tasks), self.workers)
        asyncio.run(self._download_all(tasks, summary))

    async def _download_all(self, tasks: List[AttachmentTask], summary: DownloadSummary) -> None:
        sem = asyncio.Semaphore(self.workers)
        try:
            await asyncio.gather(*(self._download_single(sem, task, summary) for task in tasks))
        finally:
            await self._http_client.close_async()

    async def _download_single(self, sem: asyncio.Semaphore, task: AttachmentTask, summary: DownloadSummary) -> None:
        part_path = f"{task.path}{PART_SUFFIX}"
        try:
            async with sem:
                await self._http_client.download_cdn_stream(task.url, part_path)
            os.replace(part_path, task.path)
        except Exception as exc:
            logging.error("Error while saving %s: %s", task.title, exc)
            summary.record_failure(task.title, exc)
            if os.path.exists(part_path):
                os.remove(part_path)
            return
        logging.debug("Saved attachment %s", task.path)
        summary.downloaded.append(task.path)
