"""
postmatter CLI - validate, inspect, format and scaffold content files.
"""

from datetime import datetime
from pathlib import Path
from typing import List, Optional
import argparse
import json
import sys

from ..content.collection import PostCollection
from ..content.fields import is_valid_slug, parse_date, slugify
from ..content.front_matter import normalize_newlines
from ..content.parser import load_post, parse_post, serialize_post, write_post
from ..content.post import Post
from ..core.config import ValidatorConfig, load_validator_config
from ..infrastructure.logging import get_logger, setup_logging
from .reporting import ReportGenerator, format_text, summarize
from .validator import PostValidator

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="postmatter",
        description="Validate and normalize front-matter Markdown posts",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Validate every post under content/
  postmatter validate content/

  # Fail on warnings too, and keep a report
  postmatter validate content/ --strict --report-dir ./reports

  # Rewrite posts in canonical form
  postmatter fmt content/posts/rust-lifetimes/index.md
""",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    validate = subparsers.add_parser("validate", help="Check files or directories of posts")
    validate.add_argument("paths", nargs="+", help="Post files or content directories")
    validate.add_argument("--config", help="Validator config YAML")
    validate.add_argument("--format", choices=["text", "json"], default="text", help="Output format")
    validate.add_argument("--strict", action="store_true", help="Treat warnings as failures")
    validate.add_argument("--report-dir", help="Also write JSON and Markdown reports here")
    validate.add_argument("--quiet", action="store_true", help="Only list files with issues")

    show = subparsers.add_parser("show", help="Print a post's metadata and block outline")
    show.add_argument("path", help="Post file")

    fmt = subparsers.add_parser("fmt", help="Rewrite posts in canonical form")
    fmt.add_argument("paths", nargs="+", help="Post files")
    fmt.add_argument("--check", action="store_true", help="Only report files that would change")

    new = subparsers.add_parser("new", help="Scaffold a new post bundle")
    new.add_argument("--title", required=True, help="Post title")
    new.add_argument("--slug", help="Slug (default: derived from title)")
    new.add_argument("--description", default="", help="Short description")
    new.add_argument("--date", help="ISO-8601 timestamp (default: now)")
    new.add_argument("--category", action="append", default=[], help="Category (repeatable)")
    new.add_argument("--tag", action="append", default=[], help="Tag (repeatable)")
    new.add_argument("--weight", type=int, default=0, help="Sibling ordering weight")
    new.add_argument("--output", required=True, help="Content directory to create the bundle in")

    stats = subparsers.add_parser("stats", help="Print statistics for a content directory")
    stats.add_argument("path", help="Content directory")

    return parser


def _json_default(value):
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def cmd_validate(args: argparse.Namespace) -> int:
    config = load_validator_config(args.config) if args.config else ValidatorConfig()
    validator = PostValidator(config)

    try:
        reports = validator.validate_collection(args.paths)
    except FileNotFoundError as e:
        logger.error(str(e))
        return 2

    if args.report_dir:
        paths = ReportGenerator(args.report_dir).generate_all(reports)
        logger.info(f"Reports written: {paths['json']}, {paths['markdown']}")

    if args.format == "json":
        print(json.dumps({"summary": summarize(reports), "reports": [r.to_dict() for r in reports]}, indent=2))
    else:
        print(format_text(reports, verbose=not args.quiet))

    if args.strict:
        ok = all(r.passed_strict() for r in reports)
    else:
        ok = all(r.passed for r in reports)
    return 0 if ok else 1


def cmd_show(args: argparse.Namespace) -> int:
    try:
        post = load_post(args.path)
    except (FileNotFoundError, ValueError) as e:
        logger.error(str(e))
        return 1

    data = {
        "metadata": post.metadata(),
        "languages": post.languages(),
        "outline": post.outline(),
    }
    print(json.dumps(data, indent=2, default=_json_default, ensure_ascii=False))
    return 0


def cmd_fmt(args: argparse.Namespace) -> int:
    status = 0
    for raw_path in args.paths:
        path = Path(raw_path)
        try:
            original = path.read_text(encoding="utf-8")
            canonical = serialize_post(parse_post(original, source_path=path))
        except (OSError, ValueError) as e:
            logger.error(f"Cannot format {path}: {e}")
            status = 1
            continue

        if canonical == normalize_newlines(original):
            continue
        if args.check:
            print(f"would reformat {path}")
            status = 1
        else:
            path.write_text(canonical, encoding="utf-8")
            print(f"reformatted {path}")
    return status


def cmd_new(args: argparse.Namespace) -> int:
    slug = args.slug or slugify(args.title)
    if not slug:
        logger.error(f"Cannot derive a slug from title {args.title!r}; pass --slug")
        return 1
    if not is_valid_slug(slug):
        logger.error(f"Slug must be non-empty and contain no whitespace, got {slug!r}")
        return 1

    try:
        date = parse_date(args.date) if args.date else datetime.now().astimezone().replace(microsecond=0)
    except ValueError as e:
        logger.error(str(e))
        return 1

    target = Path(args.output) / slug / "index.md"
    if target.exists():
        logger.error(f"Refusing to overwrite existing post: {target}")
        return 1

    post = Post(
        slug=slug,
        title=args.title,
        date=date,
        description=args.description,
        categories=tuple(args.category),
        tags=tuple(args.tag),
        weight=args.weight,
    )
    write_post(post, target)
    print(target)
    return 0


def cmd_stats(args: argparse.Namespace) -> int:
    try:
        collection = PostCollection.from_directory(args.path)
    except FileNotFoundError as e:
        logger.error(str(e))
        return 1
    print(json.dumps(collection.get_statistics(), indent=2))
    return 0


COMMANDS = {
    "validate": cmd_validate,
    "show": cmd_show,
    "fmt": cmd_fmt,
    "new": cmd_new,
    "stats": cmd_stats,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)
    return COMMANDS[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
