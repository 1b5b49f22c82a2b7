"""
Diversity re-ranking — penalize categories and resource types already seen
higher in the list so no single one monopolizes the top.

Single order-dependent pass over the score-sorted list:
    diversity = max(0, 1 - category_penalty * prior_same_category
                         - type_penalty * prior_same_type)
    adjusted  = score * (1 - diversity_weight) + diversity * diversity_weight
Counts update after each item is scored, then the list is re-sorted by the
adjusted score. Re-applying to its own output is not idempotent.
"""

from collections import Counter
from typing import Dict, List, Optional, Sequence

from ..models.config import DEFAULT_CONFIG, RecommendationConfig
from ..models.scoring import DIVERSITY, ScoredResource, sort_by_score
from ..utils.scores import clamp01


def diversity_score(
    prior_same_category: int,
    prior_same_type: int,
    config: RecommendationConfig = DEFAULT_CONFIG,
) -> float:
    """1.0 for a fresh category and type, decreasing with repeats, floored at 0."""
    penalty = (
        config.category_penalty * prior_same_category
        + config.type_penalty * prior_same_type
    )
    return max(0.0, 1.0 - penalty)


def apply_diversity_rerank(
    scored: Sequence[ScoredResource],
    config: RecommendationConfig = DEFAULT_CONFIG,
    weights: Optional[Dict[str, float]] = None,
) -> List[ScoredResource]:
    """
    Blend each item's score with its diversity score and re-sort.

    The input is sorted by score first (stable) so the walk order is the
    ranking order. weights, when given, replaces each item's weights so the
    result reports the full blend including diversity.
    """
    w = config.weight_diversity
    category_count: Counter = Counter()
    type_count: Counter = Counter()
    adjusted: List[ScoredResource] = []

    for item in sort_by_score(list(scored)):
        category = item.resource.category_id
        resource_type = item.resource.resource_type
        div = diversity_score(category_count[category], type_count[resource_type], config)
        breakdown = dict(item.score_breakdown)
        breakdown[DIVERSITY] = div
        adjusted.append(
            item.model_copy(
                update={
                    "score": clamp01(item.score * (1.0 - w) + div * w),
                    "score_breakdown": breakdown,
                    "weights": dict(weights) if weights is not None else item.weights,
                }
            )
        )
        category_count[category] += 1
        type_count[resource_type] += 1

    return sort_by_score(adjusted)
