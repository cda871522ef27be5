"""
Front-matter handling: split a content file into its YAML metadata block and
body, load/dump the metadata, and join the two halves back together.
"""

from datetime import datetime
from typing import Any, Dict, Tuple
import yaml

from .errors import FrontMatterError

DELIMITER = "---"
END_MARKERS = ("---", "...")


class _FrontMatterDumper(yaml.SafeDumper):
    """SafeDumper that writes datetimes as unquoted ISO-8601."""


def _represent_datetime(dumper: yaml.SafeDumper, value: datetime) -> yaml.Node:
    return dumper.represent_scalar("tag:yaml.org,2002:timestamp", value.isoformat())


_FrontMatterDumper.add_representer(datetime, _represent_datetime)


def normalize_newlines(text: str) -> str:
    """Drop a UTF-8 BOM and convert CRLF/CR line endings to LF."""
    if text.startswith("\ufeff"):
        text = text[1:]
    return text.replace("\r\n", "\n").replace("\r", "\n")


def split_front_matter(text: str) -> Tuple[str, str]:
    """
    Split a content file into (metadata_text, body_text).

    The file must open with a `---` line. The block runs until the next line
    that is exactly `---` or `...` (trailing whitespace allowed).

    Raises:
        FrontMatterError: if the opening or closing delimiter is missing
    """
    text = normalize_newlines(text)
    lines = text.split("\n")

    if not lines or lines[0].rstrip() != DELIMITER:
        raise FrontMatterError("Content must start with a '---' front-matter delimiter")

    for index in range(1, len(lines)):
        if lines[index].rstrip() in END_MARKERS:
            metadata_text = "\n".join(lines[1:index])
            body_text = "\n".join(lines[index + 1:])
            return metadata_text, body_text

    raise FrontMatterError("Front-matter block is not terminated by a '---' line")


def load_metadata(metadata_text: str) -> Dict[str, Any]:
    """
    Parse the metadata block.

    Raises:
        FrontMatterError: on YAML syntax errors or when the block is not a mapping
    """
    try:
        data = yaml.safe_load(metadata_text)
    except yaml.YAMLError as e:
        raise FrontMatterError(f"Malformed front-matter YAML: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise FrontMatterError(
            f"Front-matter must be a key/value mapping, got {type(data).__name__}"
        )
    for key in data:
        if not isinstance(key, str):
            raise FrontMatterError(f"Front-matter keys must be strings, got {key!r}")
    return data


def dump_metadata(metadata: Dict[str, Any]) -> str:
    """Serialize metadata as block-style YAML, keeping key order."""
    return yaml.dump(
        metadata,
        Dumper=_FrontMatterDumper,
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
        width=1000,
    )


def join_front_matter(metadata_text: str, body_text: str) -> str:
    """Wrap metadata in delimiters and append the body."""
    if metadata_text and not metadata_text.endswith("\n"):
        metadata_text += "\n"
    return f"{DELIMITER}\n{metadata_text}{DELIMITER}\n\n{body_text}"
