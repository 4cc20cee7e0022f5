from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from dataclasses import dataclass
from typing import BinaryIO, Iterator, Optional


logger = logging.getLogger(__name__)

DELIMITER = ":::"


@dataclass(frozen=True)
class Bookmark:
    """Shipping progress: the next unsent line starts `offset` bytes into `file_name`."""

    offset: int = 0
    file_name: Optional[str] = None


def parse_bookmark(line: str) -> Bookmark:
    """Parse `<offset>:::<file name>`; anything malformed means "start over"."""
    parts = [p for p in line.strip("\r\n").split(DELIMITER) if p]
    if len(parts) != 2:
        return Bookmark()
    offset_s, file_name = parts
    if not (offset_s.isascii() and offset_s.isdigit()):
        return Bookmark()
    return Bookmark(offset=int(offset_s), file_name=file_name)


def format_bookmark(bookmark: Bookmark) -> str:
    return f"{bookmark.offset}{DELIMITER}{bookmark.file_name}\n"


class BookmarkFile:
    """Sidecar file holding a single bookmark line.

    The handle stays open for one shipping iteration. It is not a lock:
    two shippers pointed at the same buffer files will race.
    """

    def __init__(self, handle: BinaryIO, path: str = ""):
        self._handle = handle
        self.path = path

    def read(self) -> Bookmark:
        self._handle.seek(0)
        raw = self._handle.readline()
        if not raw:
            return Bookmark()
        try:
            line = raw.decode("utf-8")
        except UnicodeDecodeError:
            logger.warning(f"[Bookmark] Undecodable bookmark in {self.path}; restarting from the earliest file")
            return Bookmark()
        bookmark = parse_bookmark(line)
        if bookmark.file_name is None and line.strip():
            logger.warning(f"[Bookmark] Malformed bookmark {line.strip()!r} in {self.path}; restarting from the earliest file")
        return bookmark

    def write(self, bookmark: Bookmark) -> None:
        if bookmark.offset < 0:
            raise ValueError(f"bookmark offset must be non-negative, got {bookmark.offset}")
        if not bookmark.file_name:
            raise ValueError("bookmark needs a file name")
        self._handle.seek(0)
        self._handle.truncate()
        self._handle.write(format_bookmark(bookmark).encode("utf-8"))
        self._handle.flush()
        os.fsync(self._handle.fileno())


@contextmanager
def open_bookmark(path: str) -> Iterator[BookmarkFile]:
    """Open (creating if needed) the bookmark sidecar for read+write."""
    fd = os.open(path, os.O_RDWR | os.O_CREAT, 0o644)
    with open(fd, "r+b") as handle:
        yield BookmarkFile(handle, path)


def peek_bookmark(path: str) -> Bookmark:
    """Read a bookmark without creating or modifying the sidecar."""
    if not os.path.exists(path):
        return Bookmark()
    with open(path, "rb") as handle:
        return BookmarkFile(handle, path).read()
