from __future__ import annotations

import os
from pathlib import Path


BASE_DIR = Path(__file__).resolve().parent.parent
DEFAULT_CONTENT_DIR = BASE_DIR / "content" / "blog"
CONTENT_DIR = Path(os.getenv("SPRINTBLOG_CONTENT_DIR", str(DEFAULT_CONTENT_DIR))).expanduser()

CONTENT_EXTENSIONS = (".mdx", ".md")

EXCERPT_LENGTH = int(os.getenv("SPRINTBLOG_EXCERPT_LENGTH", "220"))
WORDS_PER_MINUTE = int(os.getenv("SPRINTBLOG_WORDS_PER_MINUTE", "200"))
