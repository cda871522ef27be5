"""
ReportGenerator - Write validation results as JSON and Markdown.
"""

from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional
import json
import logging

from .validator import ValidationReport

logger = logging.getLogger(__name__)


def summarize(reports: List[ValidationReport]) -> Dict:
    """Aggregate counts over a validation run."""
    return {
        "files": len(reports),
        "passed": sum(1 for r in reports if r.passed),
        "failed": sum(1 for r in reports if not r.passed),
        "errors": sum(len(r.errors) for r in reports),
        "warnings": sum(len(r.warnings) for r in reports),
    }


def format_text(reports: List[ValidationReport], verbose: bool = True) -> str:
    """
    Render reports for a terminal.

    Args:
        reports: Reports to render
        verbose: Include passing files without issues

    Returns:
        Multi-line string
    """
    lines = []
    for report in reports:
        if not report.issues:
            if verbose:
                lines.append(f"OK    {report.source}")
            continue
        status = "PASS" if report.passed else "FAIL"
        lines.append(f"{status}  {report.source}")
        for issue in report.issues:
            lines.append(f"      {issue}")

    summary = summarize(reports)
    lines.append("")
    lines.append(
        f"{summary['files']} files, {summary['failed']} failed, "
        f"{summary['errors']} errors, {summary['warnings']} warnings"
    )
    return "\n".join(lines)


class ReportGenerator:
    """Generate validation reports in multiple formats."""

    def __init__(self, output_dir: str, timestamp: Optional[str] = None):
        """
        Initialize the report generator.

        Args:
            output_dir: Directory to save reports
            timestamp: Run timestamp (defaults to now)
        """
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.timestamp = timestamp or datetime.now().isoformat()

    def _stem(self) -> str:
        safe_timestamp = self.timestamp.replace(":", "-").replace(".", "-")
        return f"validation_{safe_timestamp}"

    def generate_all(self, reports: List[ValidationReport]) -> Dict[str, Path]:
        """
        Generate all report formats.

        Returns:
            Dict with paths to generated files
        """
        return {
            "json": self.generate_json(reports),
            "markdown": self.generate_markdown(reports),
        }

    def generate_json(self, reports: List[ValidationReport]) -> Path:
        output_path = self.output_dir / f"{self._stem()}.json"
        data = {
            "timestamp": self.timestamp,
            "summary": summarize(reports),
            "reports": [r.to_dict() for r in reports],
        }
        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

        logger.info(f"JSON report saved to {output_path}")
        return output_path

    def generate_markdown(self, reports: List[ValidationReport]) -> Path:
        output_path = self.output_dir / f"{self._stem()}.md"
        summary = summarize(reports)

        lines = [
            "# Content Validation Report",
            "",
            f"**Timestamp:** {self.timestamp}",
            f"**Overall Result:** {'PASSED' if summary['failed'] == 0 else 'FAILED'}",
            "",
            "| File | Slug | Errors | Warnings | Status |",
            "|------|------|--------|----------|--------|",
        ]
        for r in reports:
            slug = r.post.slug if r.post else "-"
            status = "PASS" if r.passed else "FAIL"
            lines.append(f"| {r.source} | {slug} | {len(r.errors)} | {len(r.warnings)} | {status} |")
        lines.append("")

        failing = [r for r in reports if r.issues]
        if failing:
            lines.extend(["## Issues", ""])
            for r in failing:
                lines.append(f"### {r.source}")
                lines.append("")
                for issue in r.issues:
                    where = f" (line {issue.line})" if issue.line else ""
                    lines.append(f"- **{issue.severity.value}** `{issue.code}`{where}: {issue.message}")
                lines.append("")

        output_path.write_text("\n".join(lines), encoding="utf-8")
        logger.info(f"Markdown report saved to {output_path}")
        return output_path
