"""Turn detected issues and dependencies into remediation steps."""

from __future__ import annotations

from typing import Sequence

from .catalog import DEFAULT_CATALOG, PatternCatalog
from .models import Dependency, DependencyStatus, Issue


def generate_recommendations(
    issues: Sequence[Issue],
    dependencies: Sequence[Dependency],
    catalog: PatternCatalog = DEFAULT_CATALOG,
) -> list[str]:
    """Build the ordered, duplicate-free list of recommendations.

    Order: issue-driven advice (first-seen pattern order), then
    dependency-driven advice, then the catalog's generic tail.
    """
    recommendations: list[str] = []
    seen_patterns: set[str] = set()

    for issue in issues:
        if issue.pattern in seen_patterns:
            continue
        seen_patterns.add(issue.pattern)

        for remediation in catalog.remediations:
            if any(marker in issue.pattern for marker in remediation.markers):
                recommendations.append(remediation.text)

    if any(d.status is DependencyStatus.INCOMPATIBLE for d in dependencies):
        recommendations.append(catalog.remove_packages_advice)
    if any(catalog.is_backend_package(d.name) for d in dependencies):
        recommendations.append(catalog.backend_advice)

    recommendations.extend(catalog.generic_advice)

    return list(dict.fromkeys(recommendations))
