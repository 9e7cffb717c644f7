from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Protocol, Sequence

import aiofiles
import aiofiles.os

from sprintblog import config
from sprintblog.errors import PostNotFoundError


logger = logging.getLogger(__name__)


class ContentSource(Protocol):
    """Read-only access to post documents addressed by slug."""

    async def list_slugs(self) -> List[str]:
        ...

    async def read(self, slug: str) -> str:
        ...


class FileSystemContentSource:
    """Serve posts from a directory of ``<slug>.mdx`` / ``<slug>.md`` files.

    Extensions are tried in order, so the first one wins when a slug exists
    under both.
    """

    def __init__(self, content_dir: Path, extensions: Optional[Sequence[str]] = None) -> None:
        self.content_dir = Path(content_dir)
        self.extensions = tuple(extensions or config.CONTENT_EXTENSIONS)

    async def list_slugs(self) -> List[str]:
        if not await aiofiles.os.path.isdir(self.content_dir):
            logger.warning("Content directory %s does not exist", self.content_dir)
            return []

        slugs: List[str] = []
        seen = set()
        for name in sorted(await aiofiles.os.listdir(self.content_dir)):
            slug = self._strip_extension(name)
            if slug is None or slug in seen:
                continue
            seen.add(slug)
            slugs.append(slug)
        logger.debug("Found %d posts in %s", len(slugs), self.content_dir)
        return slugs

    async def read(self, slug: str) -> str:
        path = await self.resolve(slug)
        async with aiofiles.open(path, "r", encoding="utf-8") as fp:
            return await fp.read()

    async def resolve(self, slug: str) -> Path:
        if not slug or slug.startswith(".") or "/" in slug or "\\" in slug:
            raise PostNotFoundError(slug)
        for extension in self.extensions:
            path = self.content_dir / f"{slug}{extension}"
            if await aiofiles.os.path.isfile(path):
                return path
        raise PostNotFoundError(slug)

    def _strip_extension(self, name: str) -> Optional[str]:
        if name.startswith("."):
            return None
        for extension in self.extensions:
            if name.endswith(extension) and len(name) > len(extension):
                return name[: -len(extension)]
        return None
