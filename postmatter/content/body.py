"""
Body parser - split the Markdown body into heading, paragraph and fenced code
blocks.

Only block structure is recognized. Inline markup, lists, quotes, HTML and
shortcodes are carried verbatim inside paragraph blocks.
"""

from typing import List, Optional, Tuple
import logging
import re

from .post import Block, CodeBlock, HeadingBlock, ParagraphBlock

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"^( {0,3})(`{3,}|~{3,})(.*)$")
_HEADING_RE = re.compile(r"^ {0,3}(#{1,6})(?:[ \t]+(.*?))?[ \t]*$")
_CLOSING_HASHES_RE = re.compile(r"(?:^|[ \t]+)#+[ \t]*$")


def _match_fence(line: str) -> Optional[Tuple[int, str, str]]:
    """Return (indent, fence, info) if the line opens a fenced code block."""
    match = _FENCE_RE.match(line)
    if not match:
        return None
    indent, fence, info = match.groups()
    # A backtick fence cannot carry backticks in its info string
    if fence[0] == "`" and "`" in info:
        return None
    return len(indent), fence, info


def _is_closing_fence(line: str, fence: str) -> bool:
    stripped = line.lstrip(" ")
    if len(line) - len(stripped) > 3:
        return False
    stripped = stripped.rstrip(" \t")
    if len(stripped) < len(fence):
        return False
    return set(stripped) == {fence[0]}


def _language(info: str) -> Optional[str]:
    words = info.strip().split()
    if not words:
        return None
    # `rust {linenos=true}` or `{.rust}` style attributes
    word = words[0].strip("{}").lstrip(".")
    return word or None


def scan_body(text: str) -> List[Tuple[int, int, Block]]:
    """
    Parse body text into blocks paired with the 1-based source lines they span.

    Args:
        text: Markdown body (LF line endings)

    Returns:
        List of (first_line, last_line, block) in document order; a closed
        code block's span includes both fences
    """
    lines = text.split("\n")
    blocks: List[Tuple[int, int, Block]] = []
    paragraph: List[str] = []
    paragraph_start = 0

    def flush_paragraph() -> None:
        if paragraph:
            end = paragraph_start + len(paragraph) - 1
            blocks.append((paragraph_start, end, ParagraphBlock("\n".join(paragraph))))
            paragraph.clear()

    i = 0
    while i < len(lines):
        line = lines[i]

        fence_match = _match_fence(line)
        if fence_match:
            flush_paragraph()
            indent, fence, info = fence_match
            start = i + 1
            code_lines: List[str] = []
            i += 1
            closed = False
            while i < len(lines):
                if _is_closing_fence(lines[i], fence):
                    closed = True
                    break
                code_lines.append(lines[i])
                i += 1
            if not closed:
                # Trailing newline of the file is not part of the code
                while code_lines and code_lines[-1] == "":
                    code_lines.pop()
                logger.debug(f"Unclosed code fence opened at body line {start}")
            end = i + 1 if closed else start + len(code_lines)
            blocks.append(
                (
                    start,
                    end,
                    CodeBlock(
                        code="\n".join(code_lines),
                        language=_language(info),
                        info=info,
                        fence=fence,
                        indent=indent,
                        closed=closed,
                        line_count=len(code_lines),
                    ),
                )
            )
            i += 1
            continue

        heading_match = _HEADING_RE.match(line)
        if heading_match:
            flush_paragraph()
            level = len(heading_match.group(1))
            heading_text = _CLOSING_HASHES_RE.sub("", heading_match.group(2) or "").strip()
            blocks.append((i + 1, i + 1, HeadingBlock(level=level, text=heading_text)))
            i += 1
            continue

        if not line.strip():
            flush_paragraph()
        else:
            if not paragraph:
                paragraph_start = i + 1
            paragraph.append(line)
        i += 1

    flush_paragraph()
    return blocks


def parse_body(text: str) -> List[Block]:
    """Parse body text into an ordered list of blocks."""
    return [block for _, _, block in scan_body(text)]


def render_body(blocks) -> str:
    """Join rendered blocks with a single blank line; ends with a newline."""
    if not blocks:
        return ""
    return "\n\n".join(block.render() for block in blocks) + "\n"
