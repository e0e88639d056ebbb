"""Data models for the portability analysis engine.

Everything here is created and consumed inside a single analysis run.
Issues and dependencies are frozen once produced; the result object is
what the caller persists or discards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

# Relative path -> decoded text, in archive enumeration order.
FileTable = Dict[str, str]


class Severity(Enum):
    """How strongly an issue ties the project to its origin platform."""

    CRITICAL = "critical"
    WARNING = "warning"
    # Part of the taxonomy, but the portability score does not penalize it.
    INFO = "info"


class DependencyStatus(Enum):
    """Portability verdict for a declared package."""

    COMPATIBLE = "compatible"
    WARNING = "warning"
    INCOMPATIBLE = "incompatible"


@dataclass(frozen=True)
class Issue:
    """A single occurrence of a proprietary pattern.

    ``line`` is 1-based, or None for file-level issues such as a
    platform config dotfile.
    """

    file: str
    pattern: str
    severity: Severity
    description: str
    line: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "file": self.file,
            "pattern": self.pattern,
            "severity": self.severity.value,
            "description": self.description,
        }
        if self.line is not None:
            data["line"] = self.line
        return data


@dataclass(frozen=True)
class Dependency:
    """One declared manifest entry, named ``<package>@<version>``."""

    name: str
    status: DependencyStatus
    note: str
    type: str = "Package"

    @property
    def package(self) -> str:
        """Package name without the version suffix (scoped names keep their @)."""
        head, sep, _version = self.name.rpartition("@")
        return head if sep and head else self.name

    @property
    def version(self) -> str:
        """Declared version range; empty when the name carries none."""
        return self.name[len(self.package) + 1 :]

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type,
            "status": self.status.value,
            "note": self.note,
        }


@dataclass
class AnalysisResult:
    """Outcome of one archive analysis.

    ``score`` depends only on the severity/status counts of ``issues`` and
    ``dependencies``. ``extracted_files`` is the full file table, handed on
    to the rewrite step.
    """

    score: int
    platform: Optional[str]
    total_files: int
    analyzed_files: int
    issues: list[Issue] = field(default_factory=list)
    dependencies: list[Dependency] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)
    extracted_files: FileTable = field(default_factory=dict)

    @property
    def critical_count(self) -> int:
        return sum(1 for i in self.issues if i.severity is Severity.CRITICAL)

    @property
    def warning_count(self) -> int:
        return sum(1 for i in self.issues if i.severity is Severity.WARNING)

    @property
    def incompatible_dependencies(self) -> list[Dependency]:
        return [d for d in self.dependencies if d.status is DependencyStatus.INCOMPATIBLE]

    def to_dict(self, include_files: bool = True) -> dict[str, Any]:
        """Serialize to the camelCase shape the web client consumes."""
        data: dict[str, Any] = {
            "score": self.score,
            "platform": self.platform,
            "totalFiles": self.total_files,
            "analyzedFiles": self.analyzed_files,
            "issues": [i.to_dict() for i in self.issues],
            "dependencies": [d.to_dict() for d in self.dependencies],
            "recommendations": list(self.recommendations),
        }
        if include_files:
            data["extractedFiles"] = dict(self.extracted_files)
        return data
