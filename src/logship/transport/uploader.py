from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import requests


logger = logging.getLogger(__name__)

API_KEY_HEADER_NAME = "X-Seq-ApiKey"
BULK_UPLOAD_RESOURCE = "/api/events/raw"


def build_envelope(lines: List[str]) -> str:
    """Wrap raw JSON lines as {"events":[...]}. Lines are trusted, not re-parsed."""
    return '{"events":[' + ",".join(lines) + "]}"


@dataclass(frozen=True)
class UploadResult:
    ok: bool
    status_code: Optional[int] = None
    body: str = ""


@dataclass
class BatchUploader:

    server_url: str
    api_key: Optional[str] = None
    timeout_seconds: float = 15.0
    session: requests.Session = field(default_factory=requests.Session, repr=False)

    @property
    def endpoint(self) -> str:
        return self.server_url.rstrip("/") + BULK_UPLOAD_RESOURCE

    def _headers(self) -> Dict[str, str]:
        hdrs = {"Content-Type": "application/json; charset=utf-8"}
        if self.api_key and self.api_key.strip():
            hdrs[API_KEY_HEADER_NAME] = self.api_key
        return hdrs

    def upload(self, lines: List[str]) -> UploadResult:
        """POST one batch. Never retries; the caller re-sends by not advancing its bookmark."""
        body = build_envelope(lines).encode("utf-8")
        try:
            resp = self.session.post(
                self.endpoint,
                data=body,
                headers=self._headers(),
                timeout=self.timeout_seconds,
            )
        except requests.RequestException as e:
            return UploadResult(ok=False, status_code=None, body=f"{type(e).__name__}: {e}")

        if 200 <= resp.status_code < 300:
            logger.debug(f"[Uploader] Shipped {len(lines)} event(s) to {self.endpoint}")
            return UploadResult(ok=True, status_code=resp.status_code)

        return UploadResult(ok=False, status_code=resp.status_code, body=resp.text[:500])

    def close(self) -> None:
        self.session.close()
