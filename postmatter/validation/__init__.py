"""Validation of content files: checks, reports and the command line."""

from .validator import PostValidator, ValidationIssue, ValidationReport, Severity
from .reporting import ReportGenerator, format_text, summarize

__all__ = [
    "PostValidator",
    "ValidationIssue",
    "ValidationReport",
    "Severity",
    "ReportGenerator",
    "format_text",
    "summarize",
]
