"""Shared test utilities for freshwind tests."""

from __future__ import annotations

import os
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any

# Fixed timestamps so scans never depend on the wall clock
T0 = 1_000_000.0
T1 = 2_000_000.0


def touch(path: Path, mtime: float, content: str = "") -> Path:
    """Create or update ``path`` and pin its modification time."""
    path.parent.mkdir(parents=True, exist_ok=True)
    if not path.exists() or content:
        path.write_text(content)
    os.utime(path, (mtime, mtime))
    return path


def wait_until(predicate: Callable[[], bool], timeout: float = 5.0) -> bool:
    """Poll ``predicate`` from a sync test until it holds or time runs out."""
    deadline = time.monotonic() + timeout
    while not predicate():
        if time.monotonic() > deadline:
            return False
        time.sleep(0.005)
    return True


class MockWebSocket:
    """Mock WebSocket for testing."""

    def __init__(self, should_fail: bool = False):
        self.should_fail = should_fail
        self.closed = False
        self.close_code: int | None = None
        self.close_reason: str | None = None
        self.sent_messages: list[Any] = []

    async def send_json(self, message: Any) -> None:
        if self.should_fail:
            raise RuntimeError("WebSocket connection closed")
        self.sent_messages.append(message)

    async def close(self, code: int = 1000, reason: str | None = None) -> None:
        self.closed = True
        self.close_code = code
        self.close_reason = reason


class FakeDetector:
    """Change detector returning scripted results.

    Exceptions in ``results`` are raised instead of returned. Once the
    script runs out, ``default`` is returned.
    """

    def __init__(self, results: list[Any] | None = None, default: bool = False):
        self.results = list(results or [])
        self.default = default
        self.calls = 0

    def check(self) -> bool:
        self.calls += 1
        if not self.results:
            return self.default
        result = self.results.pop(0)
        if isinstance(result, BaseException):
            raise result
        return result
