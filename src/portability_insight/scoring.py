"""Portability score and origin-platform attribution.

Both are pure functions of the issues and dependencies of a run.
"""

from __future__ import annotations

from collections import Counter
from typing import Iterable, Optional, Sequence

from .catalog import DEFAULT_CATALOG, PatternCatalog
from .config import DEFAULT_WEIGHTS, ScoreWeights
from .models import Dependency, DependencyStatus, Issue, Severity

MIN_SCORE = 0
MAX_SCORE = 100


def calculate_score(
    issues: Iterable[Issue],
    dependencies: Iterable[Dependency],
    total_files: int = 0,
    weights: ScoreWeights = DEFAULT_WEIGHTS,
) -> int:
    """Compute the 0-100 portability score.

    Order matters: penalties first, then the clean-project bonus, then the
    clamp. One critical issue alone scores 85, not 90.

    ``total_files`` is accepted for interface stability; the score does not
    depend on project size.
    """
    severities = Counter(i.severity for i in issues)
    statuses = Counter(d.status for d in dependencies)

    critical = severities[Severity.CRITICAL]
    incompatible = statuses[DependencyStatus.INCOMPATIBLE]

    score = MAX_SCORE
    score -= critical * weights.critical_issue
    score -= severities[Severity.WARNING] * weights.warning_issue
    score -= severities[Severity.INFO] * weights.info_issue
    score -= incompatible * weights.incompatible_dependency
    score -= statuses[DependencyStatus.WARNING] * weights.warning_dependency

    # Warning-level issues and dependencies do not forfeit the bonus
    if critical == 0 and incompatible == 0:
        score += weights.clean_bonus

    return max(MIN_SCORE, min(MAX_SCORE, score))


def detect_platform(
    issues: Sequence[Issue],
    dependencies: Sequence[Dependency],
    catalog: PatternCatalog = DEFAULT_CATALOG,
) -> Optional[str]:
    """Best guess of the platform that generated the project.

    Ties are settled by catalog order, not by how often each platform's
    markers occur.
    """
    evidence = [i.pattern for i in issues]
    evidence.extend(d.name for d in dependencies if d.status is DependencyStatus.INCOMPATIBLE)
    blob = " ".join(evidence).lower()

    for signature in catalog.platforms:
        if any(marker in blob for marker in signature.markers):
            return signature.label
    return None
