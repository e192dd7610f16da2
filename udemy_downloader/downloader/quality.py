"""Choice of the video rendition to download."""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from ..models import VIDEO_MIME_TYPE, Rendition


class QualityNotFound(LookupError):
    """Raised when no rendition satisfies the requested quality."""


def _parse_quality(label: str) -> Optional[int]:
    if label.isascii() and label.isdigit():
        return int(label)
    return None


def _ranked_videos(renditions: Sequence[Rendition]) -> List[Tuple[int, Rendition]]:
    ranked = []
    for rendition in renditions:
        if rendition.media_kind != VIDEO_MIME_TYPE:
            continue
        quality = _parse_quality(rendition.quality_label)
        if quality is not None:
            ranked.append((quality, rendition))
    return ranked


def select_quality(renditions: Sequence[Rendition], wanted: Optional[int] = None) -> str:
    """Return the quality label to download.

    Without ``wanted`` the best mp4 quality is picked. With ``wanted`` the
    lowest mp4 quality at or above it is picked, so the result is never
    below what was asked for. Labels that are not integers are ignored.
    """

    qualities = [quality for quality, _ in _ranked_videos(renditions)]
    if wanted is not None:
        qualities = [quality for quality in qualities if quality >= wanted]
        chosen = min(qualities, default=None)
    else:
        chosen = max(qualities, default=None)
    if chosen is None:
        raise QualityNotFound(
            "No best quality could be found" if wanted is None else f"No quality at or above {wanted} could be found"
        )
    return str(chosen)


def pick_rendition(renditions: Sequence[Rendition], wanted: Optional[int] = None) -> Rendition:
    """Return the first mp4 rendition carrying the selected quality."""

    quality = int(select_quality(renditions, wanted))
    for rendition_quality, rendition in _ranked_videos(renditions):
        if rendition_quality == quality:
            return rendition
    raise QualityNotFound(f"No rendition for quality {quality}")  # pragma: no cover - select_quality guarantees one
