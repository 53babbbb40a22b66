"""Reading-time estimate from body word count"""

import math
import re

from mdsite.core.models import ReadingTime


WORDS_PER_MINUTE = 200

# CJK ideographs, kana, and hangul are read one character at a time.
_CJK = r'\u3040-\u30ff\u3400-\u4dbf\u4e00-\u9fff\uac00-\ud7af\uf900-\ufaff'
WORD_RE = re.compile(rf'[{_CJK}]|[^\s{_CJK}]+')


def count_words(text: str) -> int:
    return len(WORD_RE.findall(text))


def estimate_reading_time(text: str, words_per_minute: int = WORDS_PER_MINUTE) -> ReadingTime:
    """Return minutes (fractional) and an 'N min read' label for text."""
    words = count_words(text)
    minutes = words / words_per_minute
    return ReadingTime(
        text=f"{math.ceil(round(minutes, 2))} min read",
        minutes=minutes,
        words=words,
    )
