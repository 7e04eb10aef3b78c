"""
Keyword extraction by word frequency
"""
import re
from collections import Counter
from typing import List, Optional

from core.config import get_settings

STOPWORDS = frozenset(
    [
        "this", "that", "with", "from", "your", "have", "will", "here", "true", "null",
        "https", "http", "about", "more", "they", "them", "their", "there", "what", "when",
        "which", "were", "been", "into", "than", "then", "also", "just", "only", "some",
        "over", "such", "very", "each", "other", "these", "those", "would", "could",
        "should", "does", "make", "like", "most", "many", "much", "both", "where", "while",
    ]
)


def extract_keywords(text: str, limit: Optional[int] = None, min_length: Optional[int] = None) -> List[str]:
    """
    Most frequent non-stopword words in ``text``

    Words are lowercase ASCII letters of at least ``min_length`` characters.
    Ties keep the order of first occurrence.
    """
    settings = get_settings()
    limit = limit or settings.keyword_limit
    min_length = min_length or settings.keyword_min_length

    words = re.findall(rf"\b[a-z]{{{min_length},}}\b", (text or "").lower())
    counts = Counter(w for w in words if w not in STOPWORDS)
    # Counter preserves insertion order and sorted() is stable
    ranked = sorted(counts.items(), key=lambda item: -item[1])
    return [word for word, _ in ranked[:limit]]
