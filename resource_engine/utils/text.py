"""
Keyword extraction for step descriptions, resource text and analysis records.
"""

import re
from typing import List

_WORD_RE = re.compile(r"[a-z0-9]+")

STOP_WORDS = frozenset([
    "a", "an", "and", "are", "as", "at", "be", "by", "for", "from",
    "has", "he", "in", "is", "it", "its", "of", "on", "that", "the",
    "to", "was", "will", "with", "you", "your", "this", "they", "their",
    "have", "can", "should", "would", "could",
])


def extract_keywords(text: str, min_length: int = 3) -> List[str]:
    """
    Lowercase, split on non-alphanumerics, drop stop words and short tokens.

    Tokens shorter than min_length are dropped (default keeps length > 2).
    Order of first appearance is kept; duplicates are removed.
    """
    if not text:
        return []
    words = _WORD_RE.findall(text.lower())
    seen = set()
    keywords = []
    for word in words:
        if len(word) < min_length or word in STOP_WORDS or word in seen:
            continue
        seen.add(word)
        keywords.append(word)
    return keywords
