"""Durable local-to-remote log shipper.

Buffer files (`<base>*.json`, one JSON event per line) are drained in name
order and POSTed in batches; progress is kept in `<base>.bookmark` so a
restarted shipper resumes without losing events.
"""

from .buffer import Bookmark
from .core import LogShipper, ShipperConfig, ShipScheduler, TickResult, TickStatus
from .transport import BatchUploader, UploadResult

__all__ = [
    "Bookmark",
    "LogShipper",
    "ShipperConfig",
    "ShipScheduler",
    "TickResult",
    "TickStatus",
    "BatchUploader",
    "UploadResult",
]
