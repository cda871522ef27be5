"""Content model and parsing for front-matter posts."""

from .errors import FrontMatterError, PostParseError, DuplicateSlugError
from .post import Post, HeadingBlock, ParagraphBlock, CodeBlock, Block, RECOGNIZED_KEYS
from .front_matter import split_front_matter, load_metadata, dump_metadata, join_front_matter
from .body import parse_body, render_body, scan_body
from .parser import parse_post, load_post, serialize_post, write_post, REQUIRED_KEYS
from .collection import PostCollection, LoadError

__all__ = [
    "FrontMatterError",
    "PostParseError",
    "DuplicateSlugError",
    "Post",
    "HeadingBlock",
    "ParagraphBlock",
    "CodeBlock",
    "Block",
    "RECOGNIZED_KEYS",
    "split_front_matter",
    "load_metadata",
    "dump_metadata",
    "join_front_matter",
    "parse_body",
    "render_body",
    "scan_body",
    "parse_post",
    "load_post",
    "serialize_post",
    "write_post",
    "REQUIRED_KEYS",
    "PostCollection",
    "LoadError",
]
