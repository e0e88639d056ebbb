"""Sovereignty audit of cleaned output, with letter grades and a markdown report."""

from .auditor import SovereigntyAudit, audit_cleaned_files, calculate_grade
from .report import CleaningStats, render_markdown_report

__all__ = [
    "SovereigntyAudit",
    "audit_cleaned_files",
    "calculate_grade",
    "CleaningStats",
    "render_markdown_report",
]
