"""File watching for freshwind.

Provides polling-based change detection over a directory tree and the
background loop that turns detected changes into reload broadcasts.
"""

from freshwind.watching.filters import (
    FilterConfigError,
    FilterSet,
    split_patterns,
)
from freshwind.watching.loop import WatchLoop
from freshwind.watching.scanner import (
    ChangeDetector,
    ChangeScanner,
    ScanResult,
    scan_tree,
)

__all__ = [
    "ChangeDetector",
    "ChangeScanner",
    "FilterConfigError",
    "FilterSet",
    "ScanResult",
    "WatchLoop",
    "scan_tree",
    "split_patterns",
]
