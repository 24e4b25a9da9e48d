import re
from typing import Set

from .news_types import NewsItem

# Characters dropped before tokenizing. Everything else, including quotes and
# apostrophes, stays part of the word.
_PUNCTUATION_RE = re.compile(r"[.,/#!$%^&*;:{}=\-_`~()]")
_WHITESPACE_RE = re.compile(r"\s+")


def comparison_text(item: NewsItem) -> str:
    return f"{item.title} {item.description}"


def normalize_text(text: str | None) -> str:
    s = (text or "").lower()
    s = _PUNCTUATION_RE.sub("", s)
    return _WHITESPACE_RE.sub(" ", s).strip()


def token_set(text: str | None) -> Set[str]:
    normalized = normalize_text(text)
    if not normalized:
        return set()
    return set(normalized.split(" "))


def score(a: NewsItem, b: NewsItem) -> float:
    """Percentage of shared unique words, relative to the smaller word set.

    A short headline whose words all appear in a longer article scores 100.
    Returns 0.0 when either side has no words left after normalization.
    """
    a_words = token_set(comparison_text(a))
    b_words = token_set(comparison_text(b))
    smaller = min(len(a_words), len(b_words))
    if smaller == 0:
        return 0.0
    return 100.0 * len(a_words & b_words) / smaller
