"""
Field coercion shared by the post parser and the validator.
"""

from datetime import date, datetime
from typing import Any, Tuple
import re

_SLUG_RE = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


def parse_date(value: Any) -> datetime:
    """
    Turn a front-matter date into a datetime.

    Args:
        value: YAML timestamp, date, or ISO-8601 string (a trailing Z is accepted)

    Returns:
        datetime, timezone-aware when the source carried an offset

    Raises:
        ValueError: if the value is not a recognizable timestamp
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(text)
        except ValueError:
            raise ValueError(f"Unparsable date: {value!r}") from None
    raise ValueError(f"Expected a timestamp, got {type(value).__name__}: {value!r}")


def coerce_weight(value: Any) -> int:
    """Accept ints and integer strings; reject bools and fractional floats."""
    if isinstance(value, bool):
        raise ValueError(f"weight must be an integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and re.fullmatch(r"\s*[-+]?\d+\s*", value):
        return int(value)
    raise ValueError(f"weight must be an integer, got {value!r}")


def coerce_string_list(value: Any, key: str) -> Tuple[str, ...]:
    """
    Normalize a categories/tags value.

    A bare string counts as a one-element list. None is an empty list.
    """
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    if isinstance(value, (list, tuple)):
        items = []
        for item in value:
            if not isinstance(item, str):
                raise ValueError(
                    f"{key} must contain only strings, got {type(item).__name__}: {item!r}"
                )
            items.append(item)
        return tuple(items)
    raise ValueError(f"{key} must be a list of strings, got {type(value).__name__}")


def is_valid_slug(slug: Any) -> bool:
    """A slug is a non-empty string with no whitespace."""
    return isinstance(slug, str) and bool(slug) and not any(c.isspace() for c in slug)


def is_url_safe_slug(slug: str) -> bool:
    """Lowercase ASCII letters and digits separated by single hyphens."""
    return bool(_SLUG_RE.match(slug))


def slugify(title: str) -> str:
    s = title.lower()
    s = re.sub(r"[^a-z0-9\s-]", "", s)
    s = re.sub(r"[\s-]+", "-", s).strip("-")
    return s[:80].rstrip("-")
