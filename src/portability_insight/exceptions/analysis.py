"""Analysis-related exceptions: archive decoding."""

from typing import Optional

from .base import PortabilityInsightError


class AnalysisError(PortabilityInsightError):
    """Base class for analysis-related errors."""
    pass


class ArchiveCorruptError(AnalysisError):
    """Raised when an uploaded blob cannot be read as a zip archive.

    This is the only error the analysis engine raises. Every other anomaly
    (missing manifest, empty project, no matches) yields a normal result.
    """

    def __init__(self, reason: str, entry: Optional[str] = None):
        details = {"reason": reason}
        if entry:
            details["entry"] = entry

        super().__init__("Could not read archive", details=details)
        self.reason = reason
        self.entry = entry
