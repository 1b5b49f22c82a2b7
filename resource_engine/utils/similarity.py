"""
Set similarity — Jaccard overlap used by collaborative filtering, keyword
matching and content similarity.
"""

from typing import AbstractSet, Hashable, Iterable


def jaccard_similarity(a: Iterable[Hashable], b: Iterable[Hashable]) -> float:
    """|A ∩ B| / |A ∪ B|; 0.0 when both sets are empty."""
    s1 = a if isinstance(a, AbstractSet) else set(a)
    s2 = b if isinstance(b, AbstractSet) else set(b)
    union = len(s1 | s2)
    if union == 0:
        return 0.0
    return len(s1 & s2) / union
