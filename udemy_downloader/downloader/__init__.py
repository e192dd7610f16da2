"""Download helpers for lecture videos and attachments."""

from .attachment_downloader import AttachmentDownloader
from .lecture_downloader import LectureDownloader
from .media_fetcher import CHUNK_SIZE, MediaFetcher, calculate_download_speed
from .quality import QualityNotFound, pick_rendition, select_quality

__all__ = [
    "AttachmentDownloader",
    "LectureDownloader",
    "MediaFetcher",
    "CHUNK_SIZE",
    "calculate_download_speed",
    "QualityNotFound",
    "pick_rendition",
    "select_quality",
]
