"""
Tests for PostValidator - structural checks over content files.

Tests cover:
- Front-matter and YAML errors
- Per-key checks (slug, date, weight, image, lists)
- Fence checks with line numbers
- Collection-wide duplicate slugs
- Configuration switches
"""

from pathlib import Path

import pytest

from postmatter.content.post import CodeBlock
from postmatter.core.config import ValidatorConfig
from postmatter.validation.validator import PostValidator, Severity


def post_text(front_matter: str, body: str = "Body text.\n") -> str:
    return f"---\n{front_matter}\n---\n\n{body}"


BASE = "title: T\nslug: t\ndate: 2024-01-01T00:00:00+00:00"


@pytest.fixture
def validator() -> PostValidator:
    return PostValidator()


class TestValidFiles:
    """Test that well-formed posts pass."""

    def test_fixture_post_passes_strict(self, validator: PostValidator, rust_post_path: Path) -> None:
        report = validator.validate_file(rust_post_path)

        assert report.passed
        assert report.passed_strict()
        assert report.post is not None
        assert report.post.slug == "rust-lifetimes"

    def test_minimal_text_passes(self, validator: PostValidator) -> None:
        report = validator.validate_text(post_text(BASE))

        assert report.passed
        assert report.issues == []

    def test_missing_file_raises(self, validator: PostValidator, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            validator.validate_file(tmp_path / "missing.md")


class TestStructureErrors:
    """Test front-matter structure errors."""

    def test_missing_front_matter(self, validator: PostValidator) -> None:
        report = validator.validate_text("# No metadata\n")

        assert report.codes() == ["front-matter"]
        assert not report.passed

    def test_unterminated_front_matter(self, validator: PostValidator) -> None:
        report = validator.validate_text("---\ntitle: T\n")

        assert report.codes() == ["front-matter"]

    def test_malformed_yaml_reports_line(self, validator: PostValidator) -> None:
        report = validator.validate_text("---\ntitle: T\ntags: [a, b\n---\n")

        assert report.codes() == ["yaml"]
        assert report.issues[0].line is not None
        assert report.issues[0].line >= 3

    def test_metadata_not_a_mapping(self, validator: PostValidator) -> None:
        report = validator.validate_text("---\n- a\n- b\n---\n")

        assert report.codes() == ["not-mapping"]


class TestKeyChecks:
    """Test checks on individual front-matter keys."""

    def test_missing_required_keys(self, validator: PostValidator) -> None:
        report = validator.validate_text(post_text("title: T"))

        missing = [i.key for i in report.issues if i.code == "missing-key"]
        assert missing == ["slug", "date"]
        assert report.post is None

    @pytest.mark.parametrize("slug", ["''", "'two words'"])
    def test_bad_slug_is_error(self, validator: PostValidator, slug: str) -> None:
        report = validator.validate_text(post_text(f"title: T\nslug: {slug}\ndate: 2024-01-01T00:00:00Z"))

        assert report.codes() == ["slug"]

    def test_non_url_safe_slug_is_warning(self, validator: PostValidator) -> None:
        report = validator.validate_text(post_text("title: T\nslug: Rust_Lifetimes\ndate: 2024-01-01T00:00:00Z"))

        assert report.codes() == ["slug-format"]
        assert report.passed
        assert not report.passed_strict()

    def test_unparsable_date(self, validator: PostValidator) -> None:
        report = validator.validate_text(post_text("title: T\nslug: t\ndate: soon"))

        assert report.codes() == ["date"]

    def test_date_without_timezone_warns(self, validator: PostValidator) -> None:
        report = validator.validate_text(post_text("title: T\nslug: t\ndate: 2024-01-01"))

        assert report.codes() == ["date-timezone"]
        assert report.warnings[0].severity == Severity.WARNING

    def test_weight_must_be_integer(self, validator: PostValidator) -> None:
        report = validator.validate_text(post_text(BASE + "\nweight: 1.5"))

        assert report.codes() == ["weight"]

    def test_wrong_types(self, validator: PostValidator) -> None:
        report = validator.validate_text(
            post_text(BASE.replace("title: T", "title: [a]") + "\ncategories: {a: 1}\nimage: 3")
        )

        assert sorted((i.code, i.key) for i in report.issues) == [
            ("type", "categories"),
            ("type", "image"),
            ("type", "title"),
        ]

    def test_empty_title(self, validator: PostValidator) -> None:
        report = validator.validate_text(post_text(BASE.replace("title: T", "title: '  '")))

        assert report.codes() == ["empty"]

    def test_duplicate_tags_warn(self, validator: PostValidator) -> None:
        report = validator.validate_text(post_text(BASE + "\ntags:\n- rust\n- rust"))

        assert report.codes() == ["duplicate"]
        assert report.passed

    @pytest.mark.parametrize("image", ["/static/cover.png", "https://example.com/c.png"])
    def test_non_relative_image_warns(self, validator: PostValidator, image: str) -> None:
        report = validator.validate_text(post_text(BASE + f"\nimage: {image}"))

        assert report.codes() == ["image"]

    def test_missing_image_warns_for_files(self, validator: PostValidator, write_post_file) -> None:
        path = write_post_file(post_text(BASE + "\nimage: cover.png"))

        report = validator.validate_file(path)

        assert report.codes() == ["image-missing"]

    def test_present_image_passes(self, validator: PostValidator, write_post_file) -> None:
        path = write_post_file(post_text(BASE + "\nimage: cover.png"))
        (path.parent / "cover.png").write_bytes(b"")

        assert validator.validate_file(path).issues == []


class TestBodyChecks:
    """Test checks on the body."""

    def test_unclosed_fence_reports_file_line(self, validator: PostValidator, fixtures_path: Path) -> None:
        report = validator.validate_file(fixtures_path / "unclosed_fence.md")

        assert report.codes() == ["unclosed-fence"]
        assert report.issues[0].line == 9
        assert not report.passed

    def test_closed_fences_pass(self, validator: PostValidator) -> None:
        body = "```rust\nfn main() {}\n```\n\n~~~\nplain\n~~~\n"

        assert validator.validate_text(post_text(BASE, body)).issues == []

    def test_blank_line_code_block_passes(self, validator: PostValidator) -> None:
        report = validator.validate_text(post_text(BASE, "```\n\n```\n"))

        assert report.issues == []
        assert report.post.code_blocks()[0].line_count == 1

    def test_lossy_rendering_is_reported(self, validator: PostValidator, monkeypatch) -> None:
        monkeypatch.setattr(CodeBlock, "render", lambda self: f"{self.fence}{self.info}\n{self.fence}")

        report = validator.validate_text(post_text(BASE, "Intro.\n\n```\n\n```\n"))

        issue = next(i for i in report.issues if i.code == "code-roundtrip")
        # Delimiters on lines 1 and 5, paragraph on 7
        assert issue.line == 9
        assert not report.passed

    def test_longer_closing_fence_is_accepted(self, validator: PostValidator) -> None:
        report = validator.validate_text(post_text(BASE, "```\ncode\n`````\n"))

        assert "code-roundtrip" not in report.codes()

    def test_non_utf8_file_reports_encoding(self, validator: PostValidator, tmp_path: Path) -> None:
        path = tmp_path / "latin.md"
        path.write_bytes(post_text(BASE.replace("title: T", "title: Caf\xe9")).encode("latin-1"))

        report = validator.validate_file(path)

        assert report.codes() == ["encoding"]
        assert not report.passed


class TestCollection:
    """Test validating several files together."""

    def test_directory_passes(self, validator: PostValidator, content_dir: Path) -> None:
        reports = validator.validate_collection([content_dir])

        assert len(reports) == 2
        assert all(r.passed for r in reports)

    def test_duplicate_slugs_across_files(self, validator: PostValidator, write_post_file) -> None:
        first = write_post_file(post_text(BASE), "a/index.md")
        second = write_post_file(post_text(BASE), "b/index.md")

        reports = validator.validate_collection([first, second])

        assert [r.codes() for r in reports] == [["duplicate-slug"], ["duplicate-slug"]]
        assert str(second) in reports[0].issues[0].message


class TestConfig:
    """Test configuration switches."""

    def test_allowed_keys_flags_unknown(self) -> None:
        validator = PostValidator(ValidatorConfig(allowed_keys=["title", "slug", "date"]))

        report = validator.validate_text(post_text(BASE + "\ndraft: true"))

        assert report.codes() == ["unknown-key"]

    def test_extra_required_key(self) -> None:
        validator = PostValidator(ValidatorConfig(required_keys=["title", "slug", "date", "description"]))

        report = validator.validate_text(post_text(BASE))

        assert report.codes() == ["missing-key"]

    def test_timezone_check_can_be_disabled(self) -> None:
        validator = PostValidator(ValidatorConfig(require_timezone=False))

        report = validator.validate_text(post_text("title: T\nslug: t\ndate: 2024-01-01"))

        assert report.issues == []

    def test_description_length(self) -> None:
        validator = PostValidator(ValidatorConfig(max_description_length=10))

        report = validator.validate_text(post_text(BASE + "\ndescription: far too long a description"))

        assert report.codes() == ["description-length"]

    def test_report_to_dict(self, validator: PostValidator) -> None:
        data = validator.validate_text(post_text("title: T\nslug: t\ndate: soon"), source="x.md").to_dict()

        assert data["source"] == "x.md"
        assert data["passed"] is False
        assert data["error_count"] == 1
        assert data["issues"][0]["code"] == "date"
