"""
Post - the content item: a metadata block plus an ordered body of blocks.

Posts are immutable. Changing a post means building a new one (see
Post.with_metadata) and writing the whole file again.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union
import re


# Canonical order of the recognized front-matter keys.
RECOGNIZED_KEYS = (
    "title",
    "description",
    "slug",
    "date",
    "image",
    "categories",
    "tags",
    "weight",
)

_TRAILING_HASHES_RE = re.compile(r"(?:^|[ \t])#+$")


@dataclass(frozen=True)
class HeadingBlock:
    """An ATX heading (`## Title`)."""

    level: int
    text: str

    def render(self) -> str:
        if not self.text:
            return "#" * self.level
        line = f"{'#' * self.level} {self.text}"
        # Protect a trailing hash run from being read as a closing sequence
        if _TRAILING_HASHES_RE.search(self.text):
            line += " #"
        return line


@dataclass(frozen=True)
class ParagraphBlock:
    """A run of non-blank lines kept verbatim."""

    text: str

    def render(self) -> str:
        return self.text


@dataclass(frozen=True)
class CodeBlock:
    """A fenced region of literal text."""

    code: str
    language: Optional[str] = None  # First word of the info string, display only
    info: str = ""
    fence: str = "```"
    indent: int = 0
    closed: bool = field(default=True, compare=False)
    # Number of content lines; "" with one line is a single blank line
    line_count: Optional[int] = None

    def __post_init__(self):
        if self.line_count is None:
            count = self.code.count("\n") + 1 if self.code else 0
            object.__setattr__(self, "line_count", count)

    def render(self) -> str:
        """
        Render the block back to fenced text.

        Extracting `code` and re-embedding it through render() gives back
        the same bytes the parser read.
        """
        pad = " " * self.indent
        opener = f"{pad}{self.fence}{self.info}"
        if self.line_count == 0:
            return f"{opener}\n{pad}{self.fence}"
        return f"{opener}\n{self.code}\n{pad}{self.fence}"


Block = Union[HeadingBlock, ParagraphBlock, CodeBlock]


@dataclass(frozen=True)
class Post:
    """A single content item."""

    slug: str
    title: str
    date: datetime
    description: str = ""
    image: Optional[str] = None
    categories: Tuple[str, ...] = ()
    tags: Tuple[str, ...] = ()
    weight: int = 0
    body: Tuple[Block, ...] = ()
    extra: Dict[str, Any] = field(default_factory=dict)
    source_path: Optional[Path] = field(default=None, compare=False)

    def __hash__(self) -> int:
        return hash((self.slug, self.title, self.date))

    @property
    def identifier(self) -> str:
        return self.slug

    def metadata(self) -> Dict[str, Any]:
        """
        Front-matter mapping in canonical key order.

        Optional keys still at their defaults are left out; unrecognized keys
        follow the recognized ones in the order they were read.
        """
        data: Dict[str, Any] = {"title": self.title}
        if self.description:
            data["description"] = self.description
        data["slug"] = self.slug
        data["date"] = self.date
        if self.image is not None:
            data["image"] = self.image
        if self.categories:
            data["categories"] = list(self.categories)
        if self.tags:
            data["tags"] = list(self.tags)
        if self.weight:
            data["weight"] = self.weight
        for key, value in self.extra.items():
            data[key] = value
        return data

    def with_metadata(self, **changes: Any) -> "Post":
        """Return a copy with the given fields replaced."""
        for key in ("categories", "tags", "body"):
            if key in changes:
                changes[key] = tuple(changes[key])
        return replace(self, **changes)

    def code_blocks(self) -> List[CodeBlock]:
        return [b for b in self.body if isinstance(b, CodeBlock)]

    def headings(self) -> List[HeadingBlock]:
        return [b for b in self.body if isinstance(b, HeadingBlock)]

    def languages(self) -> List[str]:
        """Distinct code block languages, in order of first use."""
        seen: List[str] = []
        for block in self.code_blocks():
            if block.language and block.language not in seen:
                seen.append(block.language)
        return seen

    def outline(self) -> List[Dict[str, Any]]:
        """Short description of each body block, used by `postmatter show`."""
        items = []
        for block in self.body:
            if isinstance(block, HeadingBlock):
                items.append({"type": "heading", "level": block.level, "text": block.text})
            elif isinstance(block, CodeBlock):
                items.append(
                    {
                        "type": "code",
                        "language": block.language,
                        "lines": block.line_count,
                    }
                )
            else:
                items.append({"type": "paragraph", "chars": len(block.text)})
        return items
