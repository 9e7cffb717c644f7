from __future__ import annotations

import math
import re
from typing import Optional

from sprintblog import config
from sprintblog.models.post import ReadingTime


# CJK ideographs are read one at a time, so each counts as a word.
_cjk_pattern = re.compile(r"[\u3040-\u30ff\u3400-\u4dbf\u4e00-\u9fff\uf900-\ufaff\uac00-\ud7af]")
_word_pattern = re.compile(r"[^\W_]+(?:['’][^\W_]+)*")


def count_words(text: str) -> int:
    cjk_count = len(_cjk_pattern.findall(text))
    remainder = _cjk_pattern.sub(" ", text)
    return cjk_count + len(_word_pattern.findall(remainder))


def estimate_reading_time(text: str, words_per_minute: Optional[int] = None) -> ReadingTime:
    """Estimate how long ``text`` takes to read.

    ``minutes`` is the unrounded estimate; ``text`` rounds it up and never
    reports less than one minute.
    """
    wpm = words_per_minute or config.WORDS_PER_MINUTE
    words = count_words(text)
    minutes = words / wpm
    displayed = max(1, math.ceil(round(minutes, 2)))
    return ReadingTime(text=f"{displayed} min read", minutes=minutes, words=words)
