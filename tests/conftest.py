"""
Pytest configuration for postmatter tests.
"""

from pathlib import Path

import pytest


@pytest.fixture
def fixtures_path() -> Path:
    """Path to test fixtures."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def content_dir(fixtures_path: Path) -> Path:
    """Content directory holding two valid post bundles."""
    return fixtures_path / "content"


@pytest.fixture
def rust_post_path(content_dir: Path) -> Path:
    return content_dir / "rust-lifetimes" / "index.md"


@pytest.fixture
def minimal_post_text() -> str:
    """Smallest post that carries every recognized key."""
    return """---
title: Hello
description: First post
slug: hello
date: 2024-05-01T12:00:00+02:00
image: cover.png
categories:
- Notes
tags:
- intro
weight: 1
---

# Hello

Some text.
"""


@pytest.fixture
def write_post_file(tmp_path: Path):
    """Write text to tmp_path/<name> and return the path."""

    def _write(text: str, name: str = "index.md") -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    return _write
