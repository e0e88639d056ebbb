"""Markdown rendering of a sovereignty audit (SOVEREIGNTY_REPORT.md)."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from .auditor import SovereigntyAudit

MAX_LISTED_DEPENDENCIES = 20

GRADE_BADGES = {
    "A": "🏆",
    "B": "✅",
    "C": "⚠️",
    "D": "🔶",
    "F": "❌",
}


@dataclass(frozen=True)
class CleaningStats:
    """Counters reported by the rewrite step."""

    files_removed: int = 0
    files_cleaned: int = 0
    packages_removed: int = 0
    polyfills_generated: int = 0


def render_markdown_report(
    project_name: str,
    audit: SovereigntyAudit,
    stats: CleaningStats = CleaningStats(),
    generated_on: Optional[date] = None,
) -> str:
    """Render the audit as a self-contained markdown document."""
    day = (generated_on or date.today()).isoformat()
    badge = GRADE_BADGES.get(audit.grade, "")
    image = project_name.lower().replace(" ", "-")

    sections = [
        f"# Sovereignty Report - {project_name}",
        "",
        f"**Generated:** {day}",
        f"**Sovereignty score:** {audit.score}%",
        f"**Grade:** {badge} {audit.grade}",
        "",
        "---",
        "",
        "## Summary",
        "",
        "Sovereign code carries no dependency on a proprietary platform and",
        "can be deployed on any infrastructure.",
        "",
        "| Metric | Value |",
        "|--------|-------|",
        f"| Files removed | {stats.files_removed} |",
        f"| Files cleaned | {stats.files_cleaned} |",
        f"| Packages removed | {stats.packages_removed} |",
        f"| Polyfills generated | {stats.polyfills_generated} |",
        "",
        "---",
        "",
        _issue_section("Critical issues", audit.critical_issues, "❌"),
        _issue_section("Major issues", audit.major_issues, "⚠️"),
        _issue_section("Minor issues", audit.minor_issues, "ℹ️"),
        "## Cleaned items",
        "",
        _bullets(audit.cleaned_items, "✓", empty="No cleaning was needed."),
        "",
        "---",
        "",
        "## Remaining dependencies",
        "",
        "These dependencies are considered safe and do not compromise sovereignty:",
        "",
        _dependency_list(audit.remaining_dependencies),
        "",
        "---",
        "",
        "## Recommendations",
        "",
        _numbered(
            audit.recommendations,
            empty="No particular recommendation. The code is ready for sovereign deployment!",
        ),
        "",
        "---",
        "",
        "## Next steps",
        "",
        "1. **Review** the issues reported above",
        "2. **Test** the build locally: `npm install && npm run build`",
        "3. **Deploy** on your own infrastructure (Docker, VPS, Coolify, ...)",
        "4. **Configure** your own environment variables",
        "",
        "```bash",
        "npm install",
        "npm run build",
        f"docker build -t {image} .",
        f"docker run -p 80:80 {image}",
        "```",
        "",
    ]
    return "\n".join(sections)


def _issue_section(title: str, issues: list[str], icon: str) -> str:
    body = _bullets(issues, icon, empty=f"No {title.lower()} detected.")
    return f"## {title} ({len(issues)})\n\n{body}\n\n---\n"


def _bullets(items: list[str], icon: str, empty: str) -> str:
    if not items:
        return empty
    return "\n".join(f"- {icon} {item}" for item in items)


def _numbered(items: list[str], empty: str) -> str:
    if not items:
        return empty
    return "\n".join(f"{i}. {item}" for i, item in enumerate(items, start=1))


def _dependency_list(deps: list[str]) -> str:
    if not deps:
        return "No external dependencies."
    lines = [f"- {dep}" for dep in deps[:MAX_LISTED_DEPENDENCIES]]
    overflow = len(deps) - MAX_LISTED_DEPENDENCIES
    if overflow > 0:
        lines.append(f"\n... and {overflow} more")
    return "\n".join(lines)
