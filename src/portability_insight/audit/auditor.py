"""Post-rewrite sovereignty audit.

Runs over files that have already been cleaned and grades what is left.
This scoring is deliberately separate from the portability score of
``scoring.calculate_score``: different penalties, no bonus, and a letter
grade on top.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

from ..catalog import DEFAULT_CATALOG, PatternCatalog
from ..logging_config import get_logger

logger = get_logger(__name__)

CRITICAL_PENALTY = 15
MAJOR_PENALTY = 5
MINOR_PENALTY = 1

# (minimum score, grade), highest first
GRADE_THRESHOLDS = ((95, "A"), (85, "B"), (70, "C"), (50, "D"))
FAILING_GRADE = "F"

SUPABASE_URL = re.compile(r"https?://[a-z]+\.supabase\.co", re.IGNORECASE)
EXPOSED_KEY = re.compile(r"sk_live_|pk_live_|eyJ[A-Za-z0-9_-]{100,}")


def calculate_grade(score: int) -> str:
    """Letter grade for an audit score: 95+ A, 85+ B, 70+ C, 50+ D, else F."""
    for minimum, grade in GRADE_THRESHOLDS:
        if score >= minimum:
            return grade
    return FAILING_GRADE


@dataclass
class SovereigntyAudit:
    """Findings of an audit over cleaned output."""

    score: int
    grade: str
    critical_issues: list[str] = field(default_factory=list)
    major_issues: list[str] = field(default_factory=list)
    minor_issues: list[str] = field(default_factory=list)
    cleaned_items: list[str] = field(default_factory=list)
    remaining_dependencies: list[str] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)

    @property
    def issue_count(self) -> int:
        return len(self.critical_issues) + len(self.major_issues) + len(self.minor_issues)

    def to_dict(self) -> dict[str, Any]:
        return {
            "score": self.score,
            "grade": self.grade,
            "criticalIssues": list(self.critical_issues),
            "majorIssues": list(self.major_issues),
            "minorIssues": list(self.minor_issues),
            "cleanedItems": list(self.cleaned_items),
            "remainingDependencies": list(self.remaining_dependencies),
            "recommendations": list(self.recommendations),
        }


def audit_cleaned_files(
    cleaned_files: Mapping[str, str],
    removed_packages: Sequence[str] = (),
    polyfills_generated: int = 0,
    catalog: PatternCatalog = DEFAULT_CATALOG,
) -> SovereigntyAudit:
    """Audit cleaned files for leftover platform ties.

    Each platform marker counts at most once per file. Hardcoded Supabase
    URLs are major issues; exposed live keys or long JWTs are critical.
    """
    critical: list[str] = []
    major: list[str] = []
    minor: list[str] = []

    markers = [(re.compile(m.regex, re.IGNORECASE), m.name) for m in catalog.audit_markers]

    for path, content in cleaned_files.items():
        for regex, name in markers:
            if regex.search(content):
                critical.append(f"Reference to {name} found in {path}")

        if SUPABASE_URL.search(content):
            major.append(f"Hardcoded Supabase URL in {path}")

        if EXPOSED_KEY.search(content):
            critical.append(f"Potentially exposed API key in {path}")

    cleaned_items: list[str] = []
    if removed_packages:
        cleaned_items.append(f"{len(removed_packages)} proprietary packages removed")
    if polyfills_generated > 0:
        cleaned_items.append(f"{polyfills_generated} polyfills generated for compatibility")

    score = max(
        0,
        100
        - len(critical) * CRITICAL_PENALTY
        - len(major) * MAJOR_PENALTY
        - len(minor) * MINOR_PENALTY,
    )

    recommendations: list[str] = []
    if critical:
        recommendations.append("Fix the critical issues before any production deployment")
    if major:
        recommendations.append("Replace hardcoded URLs with environment variables")
    if score < 90:
        recommendations.append("Review the code manually for other platform dependencies")
    if score >= 95:
        recommendations.append("Your code is ready for sovereign deployment!")

    audit = SovereigntyAudit(
        score=score,
        grade=calculate_grade(score),
        critical_issues=critical,
        major_issues=major,
        minor_issues=minor,
        cleaned_items=cleaned_items,
        remaining_dependencies=_production_dependencies(cleaned_files.get("package.json")),
        recommendations=recommendations,
    )
    logger.debug(f"Audit of {len(cleaned_files)} files: score={score}, grade={audit.grade}")
    return audit


def _production_dependencies(manifest: Any) -> list[str]:
    if not isinstance(manifest, str):
        return []
    try:
        data = json.loads(manifest)
    except ValueError:
        logger.debug("Root package.json is not valid JSON; no remaining dependencies listed")
        return []
    if not isinstance(data, dict) or not isinstance(data.get("dependencies"), dict):
        return []
    return list(data["dependencies"])
