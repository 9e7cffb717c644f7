from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional


class BlogCategory(str, Enum):
    SYSTEM_DESIGN = "System Design"
    JAVA = "Java"
    DATABASES = "Databases"
    AI_ML = "AI/ML"
    AWS = "AWS"
    MESSAGING = "Messaging"
    DATA_ENGINEERING = "Data Engineering"

    def __str__(self) -> str:
        return self.value


@dataclass(slots=True)
class PostFrontmatter:
    title: str
    description: str
    date: date
    category: BlogCategory
    tags: List[str] = field(default_factory=list)
    featured: bool = False
    cover_image: Optional[str] = None
    affiliate_section: Optional[str] = None


@dataclass(slots=True)
class TocItem:
    id: str
    text: str
    level: int


@dataclass(slots=True)
class ReadingTime:
    text: str
    minutes: float
    words: int


@dataclass(slots=True)
class PostSummary:
    slug: str
    title: str
    description: str
    date: date
    category: BlogCategory
    tags: List[str]
    featured: bool
    reading_time: str
    excerpt: str
    cover_image: Optional[str] = None
    affiliate_section: Optional[str] = None

    @property
    def display_date(self) -> str:
        return f"{self.date:%B} {self.date.day}, {self.date.year}"

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with the frontmatter key names used by the page templates."""
        data: Dict[str, Any] = {
            "slug": self.slug,
            "title": self.title,
            "description": self.description,
            "date": self.date.isoformat(),
            "category": self.category.value,
            "tags": list(self.tags),
            "featured": self.featured,
            "readingTime": self.reading_time,
            "excerpt": self.excerpt,
        }
        if self.cover_image is not None:
            data["coverImage"] = self.cover_image
        if self.affiliate_section is not None:
            data["affiliateSection"] = self.affiliate_section
        return data


@dataclass(slots=True)
class PostDetail(PostSummary):
    content_html: str = ""
    table_of_contents: List[TocItem] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        data = PostSummary.to_dict(self)
        data["contentHtml"] = self.content_html
        data["tableOfContents"] = [
            {"id": item.id, "text": item.text, "level": item.level}
            for item in self.table_of_contents
        ]
        return data


@dataclass(slots=True)
class CategoryCount:
    name: BlogCategory
    count: int = 0
