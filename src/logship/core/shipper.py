from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import List, Optional

from ..buffer.bookmark import Bookmark, BookmarkFile, open_bookmark
from ..buffer.fileset import list_buffer_files
from ..buffer.reader import LineReader
from ..transport.uploader import BatchUploader
from .types import ShipperConfig, ShippingError, TickResult, TickStatus


logger = logging.getLogger(__name__)


@dataclass
class LogShipper:
    """Drains buffer files to the ingestion endpoint.

    All progress lives on disk: each iteration re-reads the bookmark and
    re-lists the file set, so a crashed shipper resumes exactly where the
    last acknowledged batch ended (at-least-once; a crash between a
    successful POST and the bookmark write replays that batch).
    """

    config: ShipperConfig
    uploader: Optional[BatchUploader] = None

    _batches: int = field(default=0, init=False, repr=False)
    _events: int = field(default=0, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.uploader is None:
            self.uploader = BatchUploader(
                server_url=self.config.server_url,
                api_key=self.config.api_key,
                timeout_seconds=self.config.timeout_seconds,
            )

    def file_set(self) -> List[str]:
        return list_buffer_files(self.config.log_folder, self.config.candidate_pattern)

    def tick(self) -> TickResult:
        """Ship everything available right now, one batch at a time.

        Keeps going while batches come back full. Stops at the first failed
        upload so the same batch is rebuilt on the next tick.
        """
        self._batches = 0
        self._events = 0
        try:
            reason = self._drain()
        except (OSError, ValueError, ShippingError) as e:
            logger.exception(f"[Shipper] Exception while emitting periodic batch from {self.config.log_folder}")
            return TickResult.failure(f"{type(e).__name__}: {e}", self._batches, self._events)

        if reason is not None:
            return TickResult.failure(reason, self._batches, self._events)
        return TickResult(status=TickStatus.OK, batches=self._batches, events=self._events)

    def _drain(self) -> Optional[str]:
        limit = self.config.batch_posting_limit
        count = limit
        while count == limit:
            with open_bookmark(self.config.bookmark_path) as bookmark_file:
                count, reason = self._ship_once(bookmark_file)
            if reason is not None:
                return reason
        return None

    def _ship_once(self, bookmark_file: BookmarkFile) -> tuple[int, Optional[str]]:
        bookmark = bookmark_file.read()
        files = self.file_set()

        current = bookmark.file_name
        offset = bookmark.offset
        # Only files in the listed set are ours to read, roll past and delete.
        if current is None or current not in files:
            offset = 0
            current = files[0] if files else None

        if current is None:
            return 0, None

        with open(current, "rb") as stream:
            lines, next_offset = LineReader(stream).read_batch(offset, self.config.batch_posting_limit)

        if lines:
            result = self.uploader.upload(lines)
            if not result.ok:
                logger.warning(
                    f"[Shipper] Received failed HTTP shipping result {result.status_code}: {result.body}"
                )
                return len(lines), f"upload failed ({result.status_code}): {result.body}"
            bookmark_file.write(Bookmark(offset=next_offset, file_name=current))
            self._batches += 1
            self._events += len(lines)
            return len(lines), None

        self._rotate(bookmark_file, files, current)
        return 0, None

    def _rotate(self, bookmark_file: BookmarkFile, files: List[str], current: str) -> None:
        """Current file is drained: hand off to the next file and prune old ones."""
        if len(files) == 2 and files[0] == current:
            logger.info(f"[Shipper] Rolling from {current} to {files[1]}")
            bookmark_file.write(Bookmark(offset=0, file_name=files[1]))
            return

        if len(files) > 2:
            oldest = files[0]
            if oldest == current:
                logger.info(f"[Shipper] Rolling from {current} to {files[1]}")
                bookmark_file.write(Bookmark(offset=0, file_name=files[1]))
            # Only delete once the persisted bookmark has moved past the file.
            if bookmark_file.read().file_name == oldest:
                raise ShippingError(f"refusing to delete the bookmarked buffer file {oldest}")
            logger.info(f"[Shipper] Deleting drained buffer file {oldest}")
            os.remove(oldest)
