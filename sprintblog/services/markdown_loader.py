from __future__ import annotations

import logging
import re
from datetime import date, datetime
from typing import Any, Dict, Iterator, List, Optional, Set, Tuple

import frontmatter
import yaml
from markdown_it import MarkdownIt
from markdown_it.rules_core import StateCore
from mdit_py_plugins.tasklists import tasklists_plugin

from sprintblog import config
from sprintblog.errors import FrontmatterError
from sprintblog.models.post import BlogCategory, PostFrontmatter, TocItem


logger = logging.getLogger(__name__)

REQUIRED_KEYS = ("title", "description", "date", "category", "tags", "featured")
ELLIPSIS = "…"


def slugify_heading(text: str) -> str:
    """Turn heading text into the anchor id used by the table of contents."""
    normalized = text.lower()
    normalized = _slug_invalid_pattern.sub("", normalized)
    normalized = _whitespace_pattern.sub("-", normalized)
    normalized = _hyphen_run_pattern.sub("-", normalized)
    return normalized.strip("-")


_slug_invalid_pattern = re.compile(r"[^a-z0-9\s-]")
_whitespace_pattern = re.compile(r"\s+")
_hyphen_run_pattern = re.compile(r"-+")

_markdown = (
    MarkdownIt("commonmark", {"html": True, "linkify": True})
    .enable("table")
    .enable("strikethrough")
    .enable("linkify")
)
_markdown.use(tasklists_plugin)


def parse_document(slug: str, text: str) -> Tuple[PostFrontmatter, str]:
    """Split a post file into validated frontmatter and its markdown body."""
    try:
        parsed = frontmatter.loads(text)
    except (yaml.YAMLError, ValueError, TypeError) as exc:
        raise FrontmatterError(slug, f"unparseable YAML ({exc})") from exc

    meta = parsed.metadata or {}
    if not meta:
        raise FrontmatterError(slug, "missing frontmatter block")

    missing = [key for key in REQUIRED_KEYS if meta.get(key) is None]
    if missing:
        raise FrontmatterError(slug, f"missing required key '{missing[0]}'", key=missing[0])

    raw_category = meta["category"]
    try:
        category = BlogCategory(str(raw_category).strip())
    except ValueError as exc:
        raise FrontmatterError(slug, f"unknown category '{raw_category}'", key="category") from exc

    featured = meta["featured"]
    if not isinstance(featured, bool):
        raise FrontmatterError(slug, "'featured' must be true or false", key="featured")

    return (
        PostFrontmatter(
            title=_require_text(slug, meta, "title"),
            description=_require_text(slug, meta, "description"),
            date=_parse_date(slug, meta["date"]),
            category=category,
            tags=_normalize_tags(slug, meta["tags"]),
            featured=featured,
            cover_image=_optional_text(meta.get("coverImage")),
            affiliate_section=_optional_text(meta.get("affiliateSection")),
        ),
        parsed.content,
    )


def extract_excerpt(content: str, max_length: Optional[int] = None) -> str:
    """Strip markdown from ``content`` and cut it down to a preview."""
    limit = config.EXCERPT_LENGTH if max_length is None else max_length

    stripped = _fence_pattern.sub("", content)
    stripped = _open_fence_pattern.sub("", stripped)
    stripped = _heading_line_pattern.sub("", stripped)
    stripped = _image_pattern.sub("", stripped)
    stripped = _link_pattern.sub(r"\1", stripped)
    stripped = _html_comment_pattern.sub("", stripped)
    stripped = _html_tag_pattern.sub("", stripped)
    stripped = stripped.replace("`", "")
    stripped = _emphasis_pattern.sub("", stripped)
    stripped = _whitespace_pattern.sub(" ", stripped).strip()

    if len(stripped) > limit:
        return stripped[:limit].rstrip() + ELLIPSIS
    return stripped


# A fence closes on a run of the same character at least as long as the
# opener. Backtick fences cannot carry backticks in their info string.
_fence_pattern = re.compile(
    r"^[ \t]*(?P<fence>(?P<char>[`~])(?P=char){2,})(?:(?<=`)[^`\n]*|(?<=~)[^\n]*)\n"
    r".*?^[ \t]*(?P=fence)(?P=char)*[ \t]*$",
    re.MULTILINE | re.DOTALL,
)
# An unclosed fence runs to the end of the document.
_open_fence_pattern = re.compile(
    r"^[ \t]*(?P<fence>(?P<char>[`~])(?P=char){2,})(?:(?<=`)[^`\n]*|(?<=~)[^\n]*)$.*\Z",
    re.MULTILINE | re.DOTALL,
)
_heading_line_pattern = re.compile(r"^[ \t]{0,3}#{1,6}(?:[ \t].*)?$", re.MULTILINE)
_image_pattern = re.compile(r"!\[[^\]]*\]\([^)]*\)")
_link_pattern = re.compile(r"\[([^\]]+)\]\([^)]+\)")
_html_comment_pattern = re.compile(r"<!--.*?-->", re.DOTALL)
_html_tag_pattern = re.compile(r"</?[A-Za-z][^>]*>")
_emphasis_pattern = re.compile(r"\*{1,3}|~~|(?<![A-Za-z0-9])_{1,3}|_{1,3}(?![A-Za-z0-9])")


_toc_heading_pattern = re.compile(r"^(#{2,3})[ \t]+(.+)$", re.MULTILINE)


def extract_table_of_contents(content: str) -> List[TocItem]:
    return [item for _, item in _scan_headings(content)]


def _scan_headings(content: str) -> Iterator[Tuple[int, TocItem]]:
    """Yield ``(line_number, item)`` for each level 2/3 heading line."""
    seen: Set[str] = set()
    line = 0
    position = 0
    for match in _toc_heading_pattern.finditer(content):
        line += content.count("\n", position, match.start())
        position = match.start()
        text = match.group(2).strip()
        yield line, TocItem(id=_unique_id(slugify_heading(text), seen), text=text, level=len(match.group(1)))


def _unique_id(slug: str, seen: Set[str]) -> str:
    candidate = slug
    index = 1
    while candidate in seen:
        candidate = f"{slug}-{index}"
        index += 1
    seen.add(candidate)
    return candidate


def _heading_anchors(state: StateCore) -> None:
    # Ids come from the table-of-contents scan, keyed by source line.
    anchors: Dict[int, str] = {line: item.id for line, item in _scan_headings(state.src)}
    for token in state.tokens:
        if token.type != "heading_open" or token.tag not in ("h2", "h3") or not token.map:
            continue
        anchor = anchors.get(token.map[0])
        if anchor:
            token.attrSet("id", anchor)


_markdown.core.ruler.push("heading_anchors", _heading_anchors)


def render_markdown(content: str) -> str:
    return _markdown.render(content)


def _require_text(slug: str, meta: dict, key: str) -> str:
    value = meta[key]
    if isinstance(value, (dict, list)):
        raise FrontmatterError(slug, f"'{key}' must be text", key=key)
    text = str(value).strip()
    if not text:
        raise FrontmatterError(slug, f"'{key}' must not be empty", key=key)
    return text


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _parse_date(slug: str, value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()

    if isinstance(value, date):
        return value

    if isinstance(value, str):
        text = value.strip()
        try:
            return date.fromisoformat(text)
        except ValueError:
            pass
        try:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        except ValueError:
            logger.warning("Unrecognized date format '%s' in %s", value, slug)

    raise FrontmatterError(slug, f"'date' must be an ISO 8601 date, got {value!r}", key="date")


def _normalize_tags(slug: str, value: Any) -> List[str]:
    if isinstance(value, str):
        return [value.strip()] if value.strip() else []
    if not isinstance(value, list):
        raise FrontmatterError(slug, "'tags' must be a list", key="tags")
    tags: List[str] = []
    for item in value:
        if item is None or isinstance(item, (dict, list)):
            raise FrontmatterError(slug, f"invalid tag {item!r}", key="tags")
        tag = str(item).strip()
        if tag:
            tags.append(tag)
    return tags
