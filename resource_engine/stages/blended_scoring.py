"""
Per-candidate blended recommendation scoring.

Builds a ScoredResource from the collaborative, content and popularity terms.
Its score is the relevance blend with the non-diversity weights rescaled to
sum to 1.0; diversity re-ranking then folds in the diversity term, giving
    final = 0.40 collaborative + 0.35 content + 0.15 popularity + 0.10 diversity
"""

from typing import Dict

from ..models.config import DEFAULT_CONFIG, RecommendationConfig
from ..models.resource import Resource
from ..models.scoring import (
    COLLABORATIVE,
    CONTENT_BASED,
    POPULARITY,
    REASON_COLLABORATIVE,
    REASON_CONTENT,
    REASON_DEFAULT,
    REASON_POPULARITY,
    ScoredResource,
)
from ..utils.scores import clamp01, dominant_factor, weighted_sum

_REASONS = {
    COLLABORATIVE: REASON_COLLABORATIVE,
    CONTENT_BASED: REASON_CONTENT,
    POPULARITY: REASON_POPULARITY,
}


def recommendation_reason(breakdown: Dict[str, float]) -> str:
    """Label for the dominant factor; generic when every factor is zero."""
    relevant = {name: breakdown.get(name, 0.0) for name in _REASONS}
    if max(relevant.values()) <= 0:
        return REASON_DEFAULT
    return _REASONS[dominant_factor(relevant)]


def build_scored_resource(
    resource: Resource,
    collaborative: float,
    content: float,
    popularity: float,
    config: RecommendationConfig = DEFAULT_CONFIG,
) -> ScoredResource:
    """Blend the three relevance terms for one candidate (pre-diversity)."""
    breakdown = {
        COLLABORATIVE: clamp01(collaborative),
        CONTENT_BASED: clamp01(content),
        POPULARITY: clamp01(popularity),
    }
    weights = config.relevance_weights
    return ScoredResource(
        resource=resource,
        score=clamp01(weighted_sum(breakdown, weights)),
        score_breakdown=breakdown,
        weights=weights,
        reason=recommendation_reason(breakdown),
    )
