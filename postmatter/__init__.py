"""
postmatter - read, validate and re-serialize front-matter Markdown posts.
"""

__version__ = "0.1.0"
