"""Progress reporting for a running analysis.

The callback is invoked synchronously at fixed checkpoints. It is not
isolated: an exception raised by the callback aborts the analysis and
propagates to the caller unchanged.
"""

from __future__ import annotations

from typing import Callable, Optional

ProgressCallback = Callable[[int, str], None]

# Fixed checkpoints (percent complete)
EXTRACTING = 5
ARCHIVE_LOADED = 15
MANIFEST_LOOKUP = 20
MANIFEST_PARSED = 30
CONFIG_FILE_SCAN = 35
SOURCE_SCAN_START = 40
SOURCE_SCAN_SPAN = 50
SCORING = 92
RECOMMENDING = 96
DONE = 100


def source_scan_percent(index: int, total: int) -> int:
    """Percent for the file at ``index`` of ``total``, spread over 40..90."""
    if total <= 0:
        return SOURCE_SCAN_START
    return SOURCE_SCAN_START + (index * SOURCE_SCAN_SPAN) // total


class ProgressReporter:
    """Forwards checkpoints to an optional callback and remembers the last one."""

    def __init__(self, callback: Optional[ProgressCallback] = None, every: int = 5):
        self._callback = callback
        self.every = every
        self.last: Optional[tuple[int, str]] = None

    def report(self, percent: int, message: str) -> None:
        percent = max(0, min(DONE, percent))
        self.last = (percent, message)
        if self._callback is not None:
            self._callback(percent, message)

    def source_file(self, index: int, total: int) -> None:
        """Report source-scan progress every ``every`` files and on the last one."""
        if index % self.every == 0 or index == total - 1:
            self.report(
                source_scan_percent(index, total),
                f"Scanning source files ({index + 1}/{total})...",
            )
