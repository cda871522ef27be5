"""
PostParser - read a content file into a Post and write it back.

parse_post(serialize_post(parse_post(doc))) == parse_post(doc) holds for every
document parse_post accepts.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Union
import logging

from .body import parse_body, render_body
from .errors import FrontMatterError, PostParseError
from .fields import coerce_string_list, coerce_weight, is_valid_slug, parse_date
from .front_matter import dump_metadata, join_front_matter, load_metadata, split_front_matter
from .post import Block, Post, RECOGNIZED_KEYS

logger = logging.getLogger(__name__)

REQUIRED_KEYS = ("title", "slug", "date")


def _optional_string(metadata: Dict[str, Any], key: str) -> Optional[str]:
    value = metadata.get(key)
    if value is None or isinstance(value, str):
        return value
    raise PostParseError(f"'{key}' must be a string, got {type(value).__name__}", key=key)


def post_from_metadata(
    metadata: Dict[str, Any],
    body: List[Block],
    source_path: Optional[Path] = None,
) -> Post:
    """
    Build a Post from an already-loaded metadata mapping and parsed body.

    Raises:
        PostParseError: for missing required keys or badly typed values
    """
    for key in REQUIRED_KEYS:
        if metadata.get(key) is None:
            raise PostParseError(f"Missing required front-matter key '{key}'", key=key)

    title = _optional_string(metadata, "title")

    slug = metadata["slug"]
    if not is_valid_slug(slug):
        raise PostParseError(
            f"'slug' must be a non-empty string without whitespace, got {slug!r}", key="slug"
        )

    try:
        date = parse_date(metadata["date"])
    except ValueError as e:
        raise PostParseError(str(e), key="date") from e

    try:
        weight = coerce_weight(metadata["weight"]) if metadata.get("weight") is not None else 0
    except ValueError as e:
        raise PostParseError(str(e), key="weight") from e

    lists = {}
    for key in ("categories", "tags"):
        try:
            lists[key] = coerce_string_list(metadata.get(key), key)
        except ValueError as e:
            raise PostParseError(str(e), key=key) from e

    extra = {k: v for k, v in metadata.items() if k not in RECOGNIZED_KEYS}

    return Post(
        slug=slug,
        title=title,
        date=date,
        description=_optional_string(metadata, "description") or "",
        image=_optional_string(metadata, "image"),
        categories=lists["categories"],
        tags=lists["tags"],
        weight=weight,
        body=tuple(body),
        extra=extra,
        source_path=source_path,
    )


def parse_post(text: str, source_path: Optional[Path] = None) -> Post:
    """
    Parse a content file.

    Args:
        text: Full file contents (front-matter and body)
        source_path: Where the text came from, kept for reporting

    Returns:
        Post

    Raises:
        FrontMatterError: if the metadata block is missing or malformed
        PostParseError: if the metadata does not describe a valid post
    """
    metadata_text, body_text = split_front_matter(text)
    metadata = load_metadata(metadata_text)
    return post_from_metadata(metadata, parse_body(body_text), source_path=source_path)


def load_post(path: Union[str, Path]) -> Post:
    """Read and parse a post from disk."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Post not found: {path}")

    text = path.read_text(encoding="utf-8")
    try:
        return parse_post(text, source_path=path)
    except (FrontMatterError, PostParseError) as e:
        logger.debug(f"Failed to parse {path}: {e}")
        raise


def serialize_post(post: Post) -> str:
    """Render a post back into front-matter plus Markdown body."""
    return join_front_matter(dump_metadata(post.metadata()), render_body(post.body))


def write_post(post: Post, path: Union[str, Path]) -> Path:
    """Write a post in canonical form, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(serialize_post(post), encoding="utf-8")
    logger.info(f"Wrote post '{post.slug}' to {path}")
    return path
