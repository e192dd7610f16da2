"""Models reporting the outcome of media transfers."""

from __future__ import annotations

from typing import List, Tuple

from pydantic import BaseModel, Field


class TransferStats(BaseModel):
    """Size and throughput of one completed fetch."""

    total_bytes: int
    elapsed_ms: int
    megabytes_per_second: float


class DownloadSummary(BaseModel):
    """What a batch download did, lecture by lecture."""

    downloaded: List[str] = Field(default_factory=list)
    skipped: List[str] = Field(default_factory=list)
    failed: List[Tuple[str, str]] = Field(default_factory=list)

    def record_failure(self, title: str, exc: Exception) -> None:
        self.failed.append((title, str(exc)))
