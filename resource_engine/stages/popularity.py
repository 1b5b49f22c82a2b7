"""
Popularity scoring from engagement signals (rating, views, bookmarks).

Two blends share the same saturating normalization:
- recommendation_popularity: 0.5 rating + 0.3 views + 0.2 bookmarks
- matching_popularity: 0.7 rating + 0.3 views (step matching's popularity boost)
Both stay in [0, 1]: counters above their cap saturate instead of overflowing.
"""

from ..models.config import (
    DEFAULT_CONFIG,
    DEFAULT_MATCHING_CONFIG,
    MatchingConfig,
    RecommendationConfig,
)
from ..models.resource import MAX_RATING, Resource
from ..utils.scores import clamp01, saturate


def normalized_rating(resource: Resource) -> float:
    """Average rating 0–500 mapped to 0–1."""
    return saturate(resource.average_rating, MAX_RATING)


def recommendation_popularity(
    resource: Resource,
    config: RecommendationConfig = DEFAULT_CONFIG,
) -> float:
    """Popularity term of the recommendation blend (0–1)."""
    score = (
        config.popularity_rating_weight * normalized_rating(resource)
        + config.popularity_view_weight * saturate(resource.view_count, config.view_saturation)
        + config.popularity_bookmark_weight
        * saturate(resource.bookmark_count, config.bookmark_saturation)
    )
    return clamp01(score)


def matching_popularity(
    resource: Resource,
    config: MatchingConfig = DEFAULT_MATCHING_CONFIG,
) -> float:
    """Popularity boost for step matching (0–1); rating weighs more than views."""
    score = (
        config.popularity_rating_weight * normalized_rating(resource)
        + config.popularity_view_weight * saturate(resource.view_count, config.view_saturation)
    )
    return clamp01(score)
