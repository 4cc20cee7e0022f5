from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


logger = logging.getLogger(__name__)

BOOKMARK_SUFFIX = ".bookmark"
BUFFER_EXTENSION = ".json"


class TickStatus(str, Enum):
    OK = "OK"
    PARTIAL_FAILURE = "PARTIAL_FAILURE"


class SchedulerState(str, Enum):
    IDLE = "IDLE"
    RUNNING = "RUNNING"
    STOPPING = "STOPPING"
    STOPPED = "STOPPED"


class ShippingError(RuntimeError):
    """Raised when the orchestrator would break a bookmark/file invariant."""


@dataclass(frozen=True)
class TickResult:
    status: TickStatus
    batches: int = 0
    events: int = 0
    reason: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == TickStatus.OK

    @classmethod
    def failure(cls, reason: str, batches: int = 0, events: int = 0) -> "TickResult":
        return cls(status=TickStatus.PARTIAL_FAILURE, batches=batches, events=events, reason=reason)


@dataclass
class ShipperConfig:
    server_url: str
    buffer_base_file_name: str
    api_key: Optional[str] = None
    batch_posting_limit: int = 50
    period_seconds: float = 2.0
    timeout_seconds: float = 15.0

    def __post_init__(self) -> None:
        if not (self.server_url or "").strip():
            raise ValueError("server_url is required")
        if not (self.buffer_base_file_name or "").strip():
            raise ValueError("buffer_base_file_name is required")
        self.batch_posting_limit = int(self.batch_posting_limit)
        self.period_seconds = float(self.period_seconds)
        self.timeout_seconds = float(self.timeout_seconds)
        if self.batch_posting_limit <= 0:
            raise ValueError(f"batch_posting_limit must be positive, got {self.batch_posting_limit}")
        if self.period_seconds <= 0:
            raise ValueError(f"period_seconds must be positive, got {self.period_seconds}")
        if self.timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be positive, got {self.timeout_seconds}")

    @property
    def bookmark_path(self) -> str:
        return os.path.abspath(self.buffer_base_file_name + BOOKMARK_SUFFIX)

    @property
    def log_folder(self) -> str:
        return os.path.dirname(self.bookmark_path)

    @property
    def candidate_pattern(self) -> str:
        return os.path.basename(self.buffer_base_file_name) + "*" + BUFFER_EXTENSION

    @classmethod
    def from_env(cls, **overrides: Any) -> Optional["ShipperConfig"]:
        """Build a config from environment variables.

        Expected env vars:
        - LOGSHIP_SERVER_URL (required)
        - LOGSHIP_BUFFER_BASE (required, e.g. "logs/buffer")
        - LOGSHIP_API_KEY (optional)
        - LOGSHIP_BATCH_LIMIT, LOGSHIP_PERIOD_SECONDS, LOGSHIP_TIMEOUT_SECONDS (optional)

        Non-None keyword overrides (field names) win over the environment.
        Returns None when a required value is missing; raises ValueError on
        unparsable or out-of-range values.
        """
        values: Dict[str, Any] = {
            name: os.getenv(env_var) or None for name, env_var in _ENV_VARS.items()
        }
        values.update({k: v for k, v in overrides.items() if v is not None})

        if not values["server_url"] or not values["buffer_base_file_name"]:
            logger.info("[Config] LOGSHIP_SERVER_URL / LOGSHIP_BUFFER_BASE not set. Shipper disabled.")
            return None

        return cls(**{k: v for k, v in values.items() if v is not None})


_ENV_VARS = {
    "server_url": "LOGSHIP_SERVER_URL",
    "buffer_base_file_name": "LOGSHIP_BUFFER_BASE",
    "api_key": "LOGSHIP_API_KEY",
    "batch_posting_limit": "LOGSHIP_BATCH_LIMIT",
    "period_seconds": "LOGSHIP_PERIOD_SECONDS",
    "timeout_seconds": "LOGSHIP_TIMEOUT_SECONDS",
}
