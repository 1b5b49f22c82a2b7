"""
Score helpers — bounding and normalization shared by the scorers.
"""

from typing import Dict, Mapping


def clamp01(value: float) -> float:
    """Bound a score to [0, 1]."""
    return min(1.0, max(0.0, value))


def saturate(value: float, cap: float) -> float:
    """value / cap, saturating at 1.0 instead of overflowing."""
    if cap <= 0:
        return 0.0
    return clamp01(value / cap)


def weighted_sum(breakdown: Mapping[str, float], weights: Mapping[str, float]) -> float:
    """Convex combination of sub-scores under fixed weights."""
    return sum(breakdown.get(name, 0.0) * w for name, w in weights.items())


def dominant_factor(scores: Dict[str, float]) -> str:
    """Name of the highest sub-score (first one wins ties)."""
    best_name = ""
    best_value = float("-inf")
    for name, value in scores.items():
        if value > best_value:
            best_name, best_value = name, value
    return best_name
