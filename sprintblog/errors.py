from __future__ import annotations

from typing import Optional


class ContentError(Exception):
    """Base class for failures while loading blog content."""


class PostNotFoundError(ContentError, LookupError):
    def __init__(self, slug: str) -> None:
        super().__init__(f"No post found for slug '{slug}'")
        self.slug = slug


class FrontmatterError(ContentError, ValueError):
    def __init__(self, slug: str, message: str, key: Optional[str] = None) -> None:
        super().__init__(f"Invalid frontmatter in '{slug}': {message}")
        self.slug = slug
        self.key = key
