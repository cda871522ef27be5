"""
PostCollection - a set of posts addressed by slug.

Loads a content directory, keeps slugs unique, orders sibling posts by weight
and groups them by category and tag.
"""

from collections import Counter, defaultdict
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Union
import logging

from .errors import DuplicateSlugError
from .parser import load_post
from .post import Post

logger = logging.getLogger(__name__)


@dataclass
class LoadError:
    """A file that could not be loaded into the collection."""

    path: Path
    message: str


def _sort_key(post: Post):
    # Weight 0 means "unset" and sorts after every weighted post
    unweighted = post.weight == 0
    return (unweighted, post.weight, -post.date.timestamp(), post.title, post.slug)


class PostCollection:
    """Posts indexed by slug."""

    def __init__(self, posts: Optional[List[Post]] = None):
        self._posts: Dict[str, Post] = {}
        self.errors: List[LoadError] = []
        for post in posts or []:
            self.add(post)

    @classmethod
    def from_directory(
        cls, directory: Union[str, Path], pattern: str = "**/*.md"
    ) -> "PostCollection":
        """
        Load every post under a directory.

        Files that fail to parse, and files whose slug is already taken, are
        logged and recorded in `errors` instead of aborting the load.

        Args:
            directory: Content root
            pattern: Glob pattern relative to the root

        Returns:
            PostCollection
        """
        root = Path(directory)
        if not root.is_dir():
            raise FileNotFoundError(f"Content directory not found: {root}")

        collection = cls()
        for path in sorted(root.glob(pattern)):
            if not path.is_file():
                continue
            try:
                collection.add(load_post(path))
            except ValueError as e:
                logger.error(f"Error loading {path}: {e}")
                collection.errors.append(LoadError(path=path, message=str(e)))

        logger.info(f"Loaded {len(collection)} posts from {root}")
        return collection

    def add(self, post: Post) -> None:
        """Add a post; raises DuplicateSlugError if the slug is taken."""
        existing = self._posts.get(post.slug)
        if existing is not None:
            raise DuplicateSlugError(post.slug, [existing.source_path, post.source_path])
        self._posts[post.slug] = post

    def get(self, slug: str) -> Post:
        if slug not in self._posts:
            raise KeyError(f"Unknown slug: {slug}")
        return self._posts[slug]

    def __len__(self) -> int:
        return len(self._posts)

    def __iter__(self) -> Iterator[Post]:
        return iter(self._posts.values())

    def __contains__(self, slug: object) -> bool:
        return slug in self._posts

    def ordered(self) -> List[Post]:
        """
        Posts in sibling order.

        Ascending weight with unweighted (0) posts last, then newest first,
        then title and slug to break ties.
        """
        return sorted(self._posts.values(), key=_sort_key)

    def by_category(self) -> Dict[str, List[Post]]:
        groups: Dict[str, List[Post]] = defaultdict(list)
        for post in self.ordered():
            for category in dict.fromkeys(post.categories):
                groups[category].append(post)
        return dict(groups)

    def by_tag(self) -> Dict[str, List[Post]]:
        groups: Dict[str, List[Post]] = defaultdict(list)
        for post in self.ordered():
            for tag in dict.fromkeys(post.tags):
                groups[tag].append(post)
        return dict(groups)

    def get_statistics(self) -> Dict:
        """Counts over the collection."""
        languages: Counter = Counter()
        code_blocks = 0
        for post in self:
            for block in post.code_blocks():
                code_blocks += 1
                languages[block.language or "plain"] += 1

        return {
            "posts": len(self),
            "categories": len(self.by_category()),
            "tags": len(self.by_tag()),
            "code_blocks": code_blocks,
            "languages": dict(languages.most_common()),
            "load_errors": len(self.errors),
            "avg_code_blocks_per_post": code_blocks / len(self) if len(self) else 0,
        }
