from __future__ import annotations

from pathlib import Path
from typing import List


def list_buffer_files(directory: str | Path, pattern: str) -> List[str]:
    """Buffer files in `directory` matching `pattern`, oldest (lowest name) first.

    A missing or unreadable directory raises OSError.
    """
    folder = Path(directory)
    matches = [p for p in folder.iterdir() if p.match(pattern) and p.is_file()]
    return [str(p) for p in sorted(matches, key=lambda p: p.name)]
