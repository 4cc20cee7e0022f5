#!/usr/bin/env python3
"""Show shipping progress for a buffer directory.

Reads the bookmark sidecar (never writes it) and the current buffer files,
and reports how many bytes are still waiting to be shipped.

Usage
  python scripts/inspect_bookmark.py --buffer-base logs/buffer
  python scripts/inspect_bookmark.py --buffer-base logs/buffer --json
"""

from __future__ import annotations

import argparse
import json
import os
import sys
from pathlib import Path
from typing import List, Optional

SRC_DIR = Path(__file__).resolve().parent.parent / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from logship.buffer.status import backlog_summary
from logship.core.types import ShipperConfig


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Inspect a log shipper bookmark and its buffer files.")
    ap.add_argument("--buffer-base", default=os.environ.get("LOGSHIP_BUFFER_BASE"), help="Buffer base file name")
    ap.add_argument("--json", action="store_true", help="Print the summary as JSON")
    args = ap.parse_args(argv)

    if not args.buffer_base:
        ap.error("--buffer-base is required (or set LOGSHIP_BUFFER_BASE)")

    # Only the path properties are used; the URL is never contacted.
    config = ShipperConfig(server_url="unused", buffer_base_file_name=str(args.buffer_base))
    summary = backlog_summary(config.bookmark_path, config.log_folder, config.candidate_pattern)
    if args.json:
        print(json.dumps(summary, indent=2))
        return 0

    print("=" * 70)
    print(f"Bookmark:      {summary['bookmark_path']}")
    print(f"Current file:  {summary['current_file'] or '-'}")
    print(f"Offset:        {summary['offset']}")
    print(f"Pending bytes: {summary['pending_bytes']}")
    print("=" * 70)
    for f in summary["files"]:
        marker = "*" if f["current"] else " "
        print(f"{marker} {f['size']:>12}  {f['pending']:>12}  {f['path']}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
