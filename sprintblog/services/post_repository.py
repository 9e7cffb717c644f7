from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Type, Union

from sprintblog import config
from sprintblog.errors import ContentError
from sprintblog.models.post import BlogCategory, CategoryCount, PostDetail, PostFrontmatter, PostSummary
from sprintblog.services import markdown_loader
from sprintblog.services.content_source import ContentSource, FileSystemContentSource
from sprintblog.services.reading_time import estimate_reading_time


logger = logging.getLogger(__name__)

CategoryLike = Union[BlogCategory, str]


class PostRepository:
    """Query interface over the posts exposed by a content source.

    Nothing is cached: every call re-reads and re-parses the files it needs,
    so results always reflect the content directory at call time.
    """

    def __init__(self, source: ContentSource, *, excerpt_length: Optional[int] = None) -> None:
        self.source = source
        self.excerpt_length = config.EXCERPT_LENGTH if excerpt_length is None else excerpt_length

    async def list_slugs(self) -> List[str]:
        return await self.source.list_slugs()

    async def get_all_post_slugs(self) -> List[Dict[str, Dict[str, str]]]:
        """Slugs shaped as static-path parameters for the page builder."""
        return [{"params": {"slug": slug}} for slug in await self.list_slugs()]

    async def get_all_posts(self) -> List[PostSummary]:
        """Return every post, newest first."""
        posts: List[PostSummary] = []
        for slug in await self.list_slugs():
            posts.append(await self._load_summary(slug))
        posts.sort(key=lambda item: item.date, reverse=True)
        return posts

    async def get_featured_posts(self, limit: int = 5) -> List[PostSummary]:
        featured = [post for post in await self.get_all_posts() if post.featured]
        return featured[: max(limit, 0)]

    async def get_posts_by_category(self, category: CategoryLike) -> List[PostSummary]:
        wanted = _coerce_category(category)
        if wanted is None:
            return []
        return [post for post in await self.get_all_posts() if post.category is wanted]

    async def get_posts_by_tag(self, tag: str) -> List[PostSummary]:
        """List posts that carry the given tag (case-insensitive)."""
        normalized = tag.lower().strip()
        if not normalized:
            return []
        return [
            post
            for post in await self.get_all_posts()
            if any(t.lower() == normalized for t in post.tags)
        ]

    async def get_post_by_slug(self, slug: str) -> PostDetail:
        text = await self.source.read(slug)
        meta, content = self._parse(slug, text)
        return self._summarize(
            slug,
            meta,
            content,
            cls=PostDetail,
            content_html=markdown_loader.render_markdown(content),
            table_of_contents=markdown_loader.extract_table_of_contents(content),
        )

    async def get_related_posts(
        self, current_slug: str, category: CategoryLike, limit: int = 3
    ) -> List[PostSummary]:
        related = [
            post
            for post in await self.get_posts_by_category(category)
            if post.slug != current_slug
        ]
        return related[: max(limit, 0)]

    async def get_all_categories(self) -> List[CategoryCount]:
        """Count posts per category, most populated first."""
        counts: Dict[BlogCategory, int] = {}
        for post in await self.get_all_posts():
            counts[post.category] = counts.get(post.category, 0) + 1
        categories = [CategoryCount(name=name, count=count) for name, count in counts.items()]
        return sorted(categories, key=lambda item: item.count, reverse=True)

    async def _load_summary(self, slug: str) -> PostSummary:
        text = await self.source.read(slug)
        meta, content = self._parse(slug, text)
        return self._summarize(slug, meta, content)

    def _parse(self, slug: str, text: str) -> Tuple[PostFrontmatter, str]:
        try:
            return markdown_loader.parse_document(slug, text)
        except ContentError as exc:
            logger.warning("Failed to load post %s: %s", slug, exc)
            raise

    def _summarize(
        self,
        slug: str,
        meta: PostFrontmatter,
        content: str,
        cls: Type[PostSummary] = PostSummary,
        **extra: Any,
    ) -> Any:
        return cls(
            slug=slug,
            title=meta.title,
            description=meta.description,
            date=meta.date,
            category=meta.category,
            tags=list(meta.tags),
            featured=meta.featured,
            reading_time=estimate_reading_time(content).text,
            excerpt=markdown_loader.extract_excerpt(content, self.excerpt_length),
            cover_image=meta.cover_image,
            affiliate_section=meta.affiliate_section,
            **extra,
        )


def create_repository(content_dir: Optional[Path] = None) -> PostRepository:
    """Build a repository over ``content_dir`` (the configured directory by default)."""
    source = FileSystemContentSource(content_dir or config.CONTENT_DIR)
    return PostRepository(source)


def _coerce_category(category: CategoryLike) -> Optional[BlogCategory]:
    if isinstance(category, BlogCategory):
        return category
    try:
        return BlogCategory(category)
    except ValueError:
        logger.debug("Ignoring unknown category %r", category)
        return None
