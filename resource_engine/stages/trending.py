"""
Trending scoring: recent access volume blended with rating.

score = access_weight * (count / max count in window) + rating_weight * rating/500
"""

from typing import Dict, List, Sequence

from ..models.config import DEFAULT_CONFIG, RecommendationConfig
from ..models.resource import Resource
from .popularity import normalized_rating


def rank_trending(
    resources: Sequence[Resource],
    access_counts: Dict[int, int],
    limit: int,
    config: RecommendationConfig = DEFAULT_CONFIG,
) -> List[Resource]:
    """Active resources ordered by trending score, truncated to limit."""
    max_count = max(access_counts.values(), default=0)
    scored = []
    for resource in resources:
        if not resource.is_active:
            continue
        access = access_counts.get(resource.id, 0) / max_count if max_count > 0 else 0.0
        score = (
            config.trending_access_weight * access
            + config.trending_rating_weight * normalized_rating(resource)
        )
        scored.append((score, resource))
    scored.sort(key=lambda pair: pair[0], reverse=True)
    return [r for _, r in scored[: max(0, limit)]]
