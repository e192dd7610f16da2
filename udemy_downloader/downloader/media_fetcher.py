"""Ranged or whole-body retrieval of media files."""

from __future__ import annotations

import logging
import time
from typing import Callable, Mapping, Optional, Protocol, Tuple

from ..models import TransferStats
from ..utils.file_utils import write_atomically
from ..utils.http_client import ByteRange, TransferError

CHUNK_SIZE = 2 * 1024 * 1024

ProgressCallback = Callable[[int], None]
LengthCallback = Callable[[int], None]


class TransportResponse(Protocol):
    status_code: int
    headers: Mapping[str, str]
    content: bytes


class Transport(Protocol):
    def head(self, url: str) -> TransportResponse: ...

    def get(self, url: str, byte_range: Optional[ByteRange] = None) -> TransportResponse: ...


def calculate_download_speed(total_bytes: int, elapsed_ms: int) -> float:
    """Throughput in MB/s; sub-millisecond transfers count as 1 ms."""

    return (total_bytes * 1000) / max(elapsed_ms, 1) / (1024 * 1024)


def _noop_progress(_: int) -> None:
    return None


class MediaFetcher:
    """Downloads a media url into memory, in 2 MiB ranges when possible.

    Each fetch starts with a HEAD probe. When the origin advertises
    ``Accept-Ranges`` and a length, the body is requested chunk by chunk in
    order; a 200 answer to a ranged request means the origin ignored the
    range and sent everything, which ends the transfer. Otherwise a single
    plain GET is issued. Any other status aborts the fetch; no retries are
    made here.
    """

    def __init__(self, transport: Transport, chunk_size: int = CHUNK_SIZE) -> None:
        self._transport = transport
        self.chunk_size = chunk_size

    def probe_length(self, url: str) -> int:
        _, length = self._probe(url)
        if length is None:
            raise TransferError(f"Error getting length of url <{url}>")
        return length

    def fetch(
        self,
        url: str,
        progress_callback: Optional[ProgressCallback] = None,
        length_callback: Optional[LengthCallback] = None,
    ) -> bytes:
        """Fetch ``url``; ``length_callback`` gets the probed size when the origin reports one."""

        progress = progress_callback or _noop_progress
        supports_ranges, length = self._probe(url)
        if length and length_callback is not None:
            length_callback(length)
        if supports_ranges and length:
            logging.debug("Ranged transfer of %s bytes from %s", length, url)
            return self._fetch_chunked(url, length, progress)
        logging.debug("Whole-body transfer from %s", url)
        return self._fetch_whole(url, progress)

    def download_to_file(
        self,
        url: str,
        target_path: str,
        progress_callback: Optional[ProgressCallback] = None,
        length_callback: Optional[LengthCallback] = None,
    ) -> TransferStats:
        """Fetch ``url`` and write it to ``target_path`` in one rename."""

        start = time.monotonic()
        data = self.fetch(url, progress_callback, length_callback)
        write_atomically(target_path, data)
        elapsed_ms = int((time.monotonic() - start) * 1000)
        return TransferStats(
            total_bytes=len(data),
            elapsed_ms=elapsed_ms,
            megabytes_per_second=calculate_download_speed(len(data), elapsed_ms),
        )

    def _probe(self, url: str) -> Tuple[bool, Optional[int]]:
        response = self._transport.head(url)
        if not 200 <= response.status_code < 300:
            raise TransferError(
                f"Error while trying to access url <{url}> - <{response.status_code}>",
                status_code=response.status_code,
            )
        accept_ranges = response.headers.get("Accept-Ranges")
        supports_ranges = accept_ranges is not None and accept_ranges.strip().lower() != "none"
        raw_length = response.headers.get("Content-Length")
        length = int(raw_length) if raw_length and raw_length.strip().isdigit() else None
        return supports_ranges, length

    def _fetch_chunked(self, url: str, total: int, progress: ProgressCallback) -> bytes:
        """A 200 mid-loop replaces the buffer instead of appending to it, so earlier chunks are not duplicated."""

        buf = bytearray()
        offset = 0
        while offset < total:
            response = self._transport.get(url, byte_range=(offset, offset + self.chunk_size - 1))
            if response.status_code == 206:
                buf.extend(response.content)
                offset += self.chunk_size
                progress(len(buf))
            elif response.status_code == 200:
                # the origin ignored the range and sent the whole body
                buf = bytearray(response.content)
                progress(len(buf))
                break
            else:
                raise TransferError(f"Error received {response.status_code} for {url}", status_code=response.status_code)
        return bytes(buf)

    def _fetch_whole(self, url: str, progress: ProgressCallback) -> bytes:
        response = self._transport.get(url)
        if not 200 <= response.status_code < 300:
            raise TransferError(
                f"Error while getting from url <{url}> - <{response.status_code}>",
                status_code=response.status_code,
            )
        data = bytes(response.content)
        progress(len(data))
        return data
