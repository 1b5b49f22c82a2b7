"""Shared utilities for scoring, set similarity, and keyword extraction."""

from .scores import clamp01, dominant_factor, saturate, weighted_sum
from .similarity import jaccard_similarity
from .text import STOP_WORDS, extract_keywords

__all__ = [
    "STOP_WORDS",
    "clamp01",
    "dominant_factor",
    "extract_keywords",
    "jaccard_similarity",
    "saturate",
    "weighted_sum",
]
