"""Offset-tracked line extraction from buffer files.

Offsets are byte positions into the raw file. All accounting is done on the
bytes actually read, so multi-byte UTF-8 characters and an optional leading
byte-order mark never skew the bookmark.
"""

from __future__ import annotations

import io
import os
from typing import BinaryIO, List, Optional, Tuple

UTF8_BOM = b"\xef\xbb\xbf"


def _stream_length(stream: BinaryIO) -> int:
    try:
        return os.fstat(stream.fileno()).st_size
    except (AttributeError, OSError, io.UnsupportedOperation):
        # In-memory streams have no descriptor.
        here = stream.tell()
        end = stream.seek(0, io.SEEK_END)
        stream.seek(here)
        return end


class LineReader:
    """Reads complete lines from a binary stream, starting at byte offsets.

    The reader is bound to one open handle and keeps its buffered position
    between calls; it only seeks when asked for an offset other than the one
    it is already positioned at.
    """

    def __init__(self, stream: BinaryIO):
        self._stream = stream
        self._position: Optional[int] = None

    def read_line(self, offset: int) -> Optional[Tuple[str, int]]:
        """Return (line, next_offset), or None when no complete line is available."""
        if _stream_length(self._stream) <= offset:
            return None

        if self._position != offset:
            self._stream.seek(offset)
            self._position = offset

        raw = self._stream.readline()
        if not raw.endswith(b"\n"):
            # Partial trailing line: the writer hasn't finished it yet.
            self._position = None
            return None

        self._position = offset + len(raw)

        text = raw[:-1]
        if text.endswith(b"\r"):
            text = text[:-1]
        if offset == 0 and text.startswith(UTF8_BOM):
            text = text[len(UTF8_BOM):]

        # Invalid bytes become U+FFFD; the offset is taken from the raw length.
        return text.decode("utf-8", errors="replace"), offset + len(raw)

    def read_batch(self, offset: int, limit: int) -> Tuple[List[str], int]:
        lines: List[str] = []
        while len(lines) < limit:
            got = self.read_line(offset)
            if got is None:
                break
            line, offset = got
            lines.append(line)
        return lines, offset
