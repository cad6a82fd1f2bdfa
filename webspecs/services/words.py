import math
import re

_WHITESPACE_RE = re.compile(r"\s+")


def count_words(text: str | None) -> int:
    """Return the number of whitespace-separated tokens in *text*."""
    if not text:
        return 0
    trimmed = text.strip()
    if not trimmed:
        return 0
    return len(_WHITESPACE_RE.split(trimmed))


def percentage(part: int, whole: int) -> int:
    """Return ``part / whole`` as a whole-number percentage, rounding halves up.

    Returns 0 when *whole* is not positive.
    """
    if whole <= 0:
        return 0
    return int(math.floor(part / whole * 100 + 0.5))
