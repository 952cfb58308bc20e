"""Polling change detection over a directory tree.

A scan walks the whole tree and compares each qualifying file's
modification time against a single watermark: the latest modification
time already reported. Only "did anything change" matters, so no per-file
state is kept.
"""

from __future__ import annotations

import os
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from freshwind.logging import get_logger
from freshwind.watching.filters import FilterSet

log = get_logger("watching")


@dataclass(frozen=True)
class ScanResult:
    """Outcome of one scan."""

    watermark: float
    changed: bool


class ChangeDetector(Protocol):
    """Anything the watch loop can ask whether the tree changed."""

    def check(self) -> bool: ...


def _walk_error(error: OSError) -> None:
    log.debug("Skipping unreadable entry %s: %s", error.filename, error)


def scan_tree(root: str | Path, watermark: float, filters: FilterSet) -> ScanResult:
    """Scan ``root`` once for files modified after ``watermark``.

    Args:
        root: Directory to traverse depth-first.
        watermark: Latest modification time already reported.
        filters: Decides which files qualify.

    Returns:
        ScanResult with the highest qualifying mtime if any exceeded the
        watermark, otherwise the watermark unchanged.
    """
    changed = False
    newest = watermark

    for dirpath, _dirnames, filenames in os.walk(root, onerror=_walk_error):
        for name in filenames:
            if not filters.should_process(name, is_dir=False):
                continue
            path = os.path.join(dirpath, name)
            try:
                mtime = os.stat(path).st_mtime
            except OSError as e:
                # Broken symlink, permission denied, or removed mid-scan
                log.debug("Skipping %s: %s", path, e)
                continue
            if mtime > watermark:
                log.info("%s changed", name)
                changed = True
                newest = max(newest, mtime)

    return ScanResult(watermark=newest if changed else watermark, changed=changed)


class ChangeScanner:
    """Owns the watermark for one watched tree.

    Example:
        scanner = ChangeScanner(Path("site"), FilterSet.from_strings(exclude=r"^\\."))
        if scanner.check():
            print("reload")
    """

    def __init__(
        self,
        root: str | Path,
        filters: FilterSet,
        watermark: float | None = None,
    ) -> None:
        """Initialize the scanner.

        Args:
            root: Directory to watch.
            filters: Filter set applied to file names.
            watermark: Starting watermark; defaults to the current time so
                files untouched since startup are not reported.
        """
        self._root = Path(root).resolve()
        self._filters = filters
        self._watermark = time.time() if watermark is None else watermark

    @property
    def root(self) -> Path:
        return self._root

    @property
    def filters(self) -> FilterSet:
        return self._filters

    @property
    def watermark(self) -> float:
        return self._watermark

    def check(self) -> bool:
        """Run one scan and advance the watermark.

        Returns:
            True if any qualifying file changed since the last report.
        """
        result = scan_tree(self._root, self._watermark, self._filters)
        self._watermark = result.watermark
        return result.changed
