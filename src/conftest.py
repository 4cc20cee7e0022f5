"""Shared fixtures for shipper tests."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, List, Optional

import pytest

from logship.core.types import ShipperConfig
from logship.transport.uploader import UploadResult


class RecordingUploader:
    """Stands in for BatchUploader; records every batch it is handed.

    `fail_on` holds 1-based call numbers that should come back as HTTP 503.
    """

    def __init__(self, fail_on: Optional[set] = None, always_fail: bool = False):
        self.batches: List[List[str]] = []
        self.calls = 0
        self.fail_on = fail_on or set()
        self.always_fail = always_fail
        self.closed = False

    def upload(self, lines: List[str]) -> UploadResult:
        self.calls += 1
        if self.always_fail or self.calls in self.fail_on:
            return UploadResult(ok=False, status_code=503, body="unavailable")
        self.batches.append(list(lines))
        return UploadResult(ok=True, status_code=201)

    def close(self) -> None:
        self.closed = True

    @property
    def shipped(self) -> List[str]:
        return [line for batch in self.batches for line in batch]


def write_events(path: Path, lines: List[str], bom: bool = False, newline: str = "\n") -> None:
    data = "".join(line + newline for line in lines).encode("utf-8")
    if bom:
        data = b"\xef\xbb\xbf" + data
    with path.open("ab") as f:
        f.write(data)


def events(prefix: str, n: int) -> List[str]:
    return [f'{{"@t":"2024-01-01T00:00:0{i % 10}Z","@mt":"{prefix} {i}"}}' for i in range(1, n + 1)]


@pytest.fixture
def buffer_dir(tmp_path: Path) -> Path:
    d = tmp_path / "logs"
    d.mkdir()
    return d


@pytest.fixture
def make_config(buffer_dir: Path) -> Callable[..., ShipperConfig]:
    def _make(**overrides) -> ShipperConfig:
        kwargs = dict(
            server_url="http://seq.local:5341",
            buffer_base_file_name=str(buffer_dir / "buffer"),
            batch_posting_limit=50,
            period_seconds=0.01,
        )
        kwargs.update(overrides)
        return ShipperConfig(**kwargs)

    return _make
