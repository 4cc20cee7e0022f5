from __future__ import annotations

import os
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional

from .bookmark import peek_bookmark
from .fileset import list_buffer_files


@dataclass
class FileStatus:
    path: str
    size: int
    pending: int
    current: bool


def backlog_summary(bookmark_path: str, folder: str, pattern: str) -> Dict[str, Any]:
    """Read-only view of shipping progress: current file, offset and unsent bytes."""
    bookmark = peek_bookmark(bookmark_path)
    files = list_buffer_files(folder, pattern)

    current: Optional[str] = bookmark.file_name
    offset = bookmark.offset
    if current not in files:
        current = files[0] if files else None
        offset = 0

    statuses: List[FileStatus] = []
    seen_current = False
    for path in files:
        size = os.path.getsize(path)
        if path == current:
            seen_current = True
            pending = max(size - offset, 0)
        else:
            pending = size if seen_current else 0
        statuses.append(FileStatus(path=path, size=size, pending=pending, current=(path == current)))

    return {
        "bookmark_path": bookmark_path,
        "current_file": current,
        "offset": offset,
        "pending_bytes": sum(s.pending for s in statuses),
        "files": [asdict(s) for s in statuses],
    }
