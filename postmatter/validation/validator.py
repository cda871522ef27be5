"""
PostValidator - structural well-formedness checks for content files.

Unlike parse_post, which stops at the first problem, the validator walks every
check and collects issues so a single run reports everything wrong with a
file.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union
import logging
import re

import yaml

from ..content.body import scan_body
from ..content.errors import FrontMatterError, PostParseError
from ..content.fields import (
    coerce_string_list,
    coerce_weight,
    is_url_safe_slug,
    is_valid_slug,
    parse_date,
)
from ..content.front_matter import normalize_newlines, split_front_matter
from ..content.parser import parse_post, post_from_metadata, serialize_post
from ..content.post import CodeBlock, Post
from ..core.config import ValidatorConfig

logger = logging.getLogger(__name__)

_URL_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*://")


class Severity(Enum):
    """How bad an issue is."""

    ERROR = "error"
    WARNING = "warning"


@dataclass
class ValidationIssue:
    """A single problem found in a content file."""

    severity: Severity
    code: str
    message: str
    key: Optional[str] = None
    line: Optional[int] = None

    def to_dict(self) -> Dict:
        return {
            "severity": self.severity.value,
            "code": self.code,
            "message": self.message,
            "key": self.key,
            "line": self.line,
        }

    def __str__(self) -> str:
        where = f"line {self.line}: " if self.line else ""
        return f"{self.severity.value}: {where}{self.message} [{self.code}]"


@dataclass
class ValidationReport:
    """All issues found in one content file."""

    source: str
    issues: List[ValidationIssue] = field(default_factory=list)
    post: Optional[Post] = None

    @property
    def errors(self) -> List[ValidationIssue]:
        return [i for i in self.issues if i.severity == Severity.ERROR]

    @property
    def warnings(self) -> List[ValidationIssue]:
        return [i for i in self.issues if i.severity == Severity.WARNING]

    @property
    def passed(self) -> bool:
        """True when no errors were found; warnings do not fail a report."""
        return not self.errors

    def passed_strict(self) -> bool:
        return not self.issues

    def codes(self) -> List[str]:
        return [i.code for i in self.issues]

    def to_dict(self) -> Dict:
        """Convert to dictionary for serialization."""
        return {
            "source": self.source,
            "slug": self.post.slug if self.post else None,
            "passed": self.passed,
            "error_count": len(self.errors),
            "warning_count": len(self.warnings),
            "issues": [i.to_dict() for i in self.issues],
        }


class PostValidator:
    """Run structural checks over content files."""

    def __init__(self, config: Optional[ValidatorConfig] = None):
        """
        Initialize the validator.

        Args:
            config: Validator settings (defaults if None)
        """
        self.config = config or ValidatorConfig()
        self.config.validate()

    def validate_file(self, path: Union[str, Path]) -> ValidationReport:
        """Validate a file on disk; image paths are resolved next to it."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Post not found: {path}")
        try:
            text = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            logger.error(f"Cannot decode {path} as UTF-8: {e}")
            report = ValidationReport(source=str(path))
            report.issues.append(
                ValidationIssue(
                    Severity.ERROR,
                    "encoding",
                    f"File is not valid UTF-8: {e.reason} at byte {e.start}",
                )
            )
            return report
        return self.validate_text(text, source=str(path), base_dir=path.parent)

    def validate_text(
        self,
        text: str,
        source: str = "<string>",
        base_dir: Optional[Path] = None,
    ) -> ValidationReport:
        """
        Validate the full text of a content file.

        Args:
            text: File contents
            source: Label used in the report
            base_dir: Directory used to resolve the cover image, if any

        Returns:
            ValidationReport
        """
        report = ValidationReport(source=source)
        text = normalize_newlines(text)

        try:
            metadata_text, body_text = split_front_matter(text)
        except FrontMatterError as e:
            report.issues.append(ValidationIssue(Severity.ERROR, "front-matter", str(e), line=1))
            return report

        metadata = self._load_metadata(metadata_text, report)
        body_offset = text.count("\n") - body_text.count("\n")
        blocks = self._check_body(body_text, body_offset, report)

        if metadata is None:
            return report

        metadata_ok = self._check_metadata(metadata, report, base_dir)
        if metadata_ok:
            self._check_roundtrip(metadata, blocks, source, report)

        logger.debug(
            f"Validated {source}: {len(report.errors)} errors, {len(report.warnings)} warnings"
        )
        return report

    def validate_collection(
        self, paths: Iterable[Union[str, Path]], pattern: str = "**/*.md"
    ) -> List[ValidationReport]:
        """
        Validate files and directories together.

        Directories are expanded with `pattern`. On top of the per-file checks,
        every post whose slug is shared with another file gets a
        duplicate-slug error.
        """
        files: List[Path] = []
        for entry in paths:
            entry = Path(entry)
            if entry.is_dir():
                files.extend(p for p in sorted(entry.glob(pattern)) if p.is_file())
            else:
                files.append(entry)

        reports = [self.validate_file(p) for p in files]

        by_slug: Dict[str, List[ValidationReport]] = defaultdict(list)
        for report in reports:
            if report.post is not None:
                by_slug[report.post.slug].append(report)

        for slug, owners in by_slug.items():
            if len(owners) < 2:
                continue
            for report in owners:
                others = ", ".join(r.source for r in owners if r is not report)
                report.issues.append(
                    ValidationIssue(
                        Severity.ERROR,
                        "duplicate-slug",
                        f"Slug '{slug}' is also used by {others}",
                        key="slug",
                    )
                )
            logger.warning(f"Duplicate slug '{slug}' in {len(owners)} files")

        return reports

    def _load_metadata(
        self, metadata_text: str, report: ValidationReport
    ) -> Optional[Dict[str, Any]]:
        try:
            data = yaml.safe_load(metadata_text)
        except yaml.YAMLError as e:
            line = None
            mark = getattr(e, "problem_mark", None)
            if mark is not None:
                # +1 for the opening delimiter, +1 for 1-based lines
                line = mark.line + 2
            report.issues.append(
                ValidationIssue(Severity.ERROR, "yaml", f"Malformed front-matter YAML: {e}", line=line)
            )
            return None

        if data is None:
            data = {}
        if not isinstance(data, dict) or not all(isinstance(k, str) for k in data):
            report.issues.append(
                ValidationIssue(
                    Severity.ERROR,
                    "not-mapping",
                    f"Front-matter must be a key/value mapping, got {type(data).__name__}",
                )
            )
            return None
        return data

    def _check_metadata(
        self,
        metadata: Dict[str, Any],
        report: ValidationReport,
        base_dir: Optional[Path],
    ) -> bool:
        """Check every front-matter key. Returns False if any error was added."""
        before = len(report.errors)
        config = self.config

        def add(severity: Severity, code: str, message: str, key: Optional[str] = None) -> None:
            report.issues.append(ValidationIssue(severity, code, message, key=key))

        for key in config.required_keys:
            if metadata.get(key) is None:
                add(Severity.ERROR, "missing-key", f"Missing required key '{key}'", key)

        if config.allowed_keys is not None:
            for key in metadata:
                if key not in config.allowed_keys:
                    add(Severity.WARNING, "unknown-key", f"Unrecognized key '{key}'", key)

        for key in ("title", "description"):
            value = metadata.get(key)
            if value is None:
                continue
            if not isinstance(value, str):
                add(Severity.ERROR, "type", f"'{key}' must be a string, got {type(value).__name__}", key)
            elif key == "title" and not value.strip():
                add(Severity.ERROR, "empty", "'title' is empty", key)

        description = metadata.get("description")
        if (
            isinstance(description, str)
            and config.max_description_length is not None
            and len(description) > config.max_description_length
        ):
            add(
                Severity.WARNING,
                "description-length",
                f"'description' is {len(description)} characters, limit is {config.max_description_length}",
                "description",
            )

        slug = metadata.get("slug")
        if slug is not None:
            if not is_valid_slug(slug):
                add(Severity.ERROR, "slug", f"Slug must be a non-empty string without whitespace, got {slug!r}", "slug")
            elif config.require_url_safe_slug and not is_url_safe_slug(slug):
                add(Severity.WARNING, "slug-format", f"Slug '{slug}' is not lowercase-hyphenated", "slug")

        if metadata.get("date") is not None:
            try:
                date = parse_date(metadata["date"])
            except ValueError as e:
                add(Severity.ERROR, "date", str(e), "date")
            else:
                if config.require_timezone and date.tzinfo is None:
                    add(Severity.WARNING, "date-timezone", "Date has no timezone offset", "date")

        if metadata.get("weight") is not None:
            try:
                coerce_weight(metadata["weight"])
            except ValueError as e:
                add(Severity.ERROR, "weight", str(e), "weight")

        image = metadata.get("image")
        if image is not None:
            if not isinstance(image, str):
                add(Severity.ERROR, "type", f"'image' must be a path string, got {type(image).__name__}", "image")
            elif _URL_RE.match(image) or image.startswith("/"):
                add(Severity.WARNING, "image", f"Image '{image}' is not a relative path", "image")
            elif config.check_image_exists and base_dir is not None and not (base_dir / image).exists():
                add(Severity.WARNING, "image-missing", f"Image '{image}' not found in {base_dir}", "image")

        for key in ("categories", "tags"):
            try:
                values = coerce_string_list(metadata.get(key), key)
            except ValueError as e:
                add(Severity.ERROR, "type", str(e), key)
                continue
            seen = set()
            for value in values:
                if value in seen:
                    add(Severity.WARNING, "duplicate", f"'{value}' appears more than once in {key}", key)
                seen.add(value)

        return len(report.errors) == before

    def _check_body(self, body_text: str, offset: int, report: ValidationReport) -> List:
        scanned = scan_body(body_text)
        source_lines = body_text.split("\n")
        for line, end, block in scanned:
            if not isinstance(block, CodeBlock):
                continue
            if not block.closed:
                report.issues.append(
                    ValidationIssue(
                        Severity.ERROR,
                        "unclosed-fence",
                        f"Code fence '{block.fence}' is never closed",
                        line=offset + line,
                    )
                )
                continue
            # Opener and content lines must come back exactly; the closing
            # fence may legitimately be longer in the source
            rendered = block.render().split("\n")[:-1]
            if rendered != source_lines[line - 1:end - 1]:
                report.issues.append(
                    ValidationIssue(
                        Severity.ERROR,
                        "code-roundtrip",
                        "Code block does not re-embed to identical text",
                        line=offset + line,
                    )
                )
        return [block for _, _, block in scanned]

    def _check_roundtrip(
        self,
        metadata: Dict[str, Any],
        blocks: List,
        source: str,
        report: ValidationReport,
    ) -> None:
        try:
            post = post_from_metadata(metadata, blocks)
        except PostParseError as e:
            report.issues.append(ValidationIssue(Severity.ERROR, "parse", str(e), key=e.key))
            return

        report.post = post
        try:
            again = parse_post(serialize_post(post))
        except ValueError as e:
            report.issues.append(
                ValidationIssue(Severity.ERROR, "roundtrip", f"Serialized post does not parse: {e}")
            )
            return

        if again != post:
            logger.warning(f"Re-serializing {source} changes its content")
            report.issues.append(
                ValidationIssue(Severity.ERROR, "roundtrip", "Re-serializing the post changes its content")
            )
