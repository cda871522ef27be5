"""
Exceptions raised while reading posts.

All of them are ValueError subclasses so callers that only care about
"bad input" can catch ValueError.
"""

from pathlib import Path
from typing import List, Optional


class FrontMatterError(ValueError):
    """The metadata block is missing, unterminated or not a YAML mapping."""


class PostParseError(ValueError):
    """A post could not be built from its front-matter."""

    def __init__(self, message: str, key: Optional[str] = None):
        super().__init__(message)
        self.key = key


class DuplicateSlugError(ValueError):
    """Two posts in one collection share a slug."""

    def __init__(self, slug: str, paths: Optional[List[Path]] = None):
        self.slug = slug
        self.paths = [p for p in (paths or []) if p is not None]
        where = ", ".join(str(p) for p in self.paths)
        message = f"Duplicate slug '{slug}'"
        if where:
            message += f" ({where})"
        super().__init__(message)
