"""
Scoring stages: step matching, content similarity, popularity, collaborative
filtering, blended scoring, diversity re-ranking, trending, analysis context.
"""

from .analysis_context import build_analysis_context, infer_idea_type, infer_phase
from .blended_scoring import build_scored_resource, recommendation_reason
from .candidate_pool import filter_visible, select_response
from .collaborative import (
    SimilarUser,
    collaborative_score,
    find_similar_users,
    interacted_resource_ids,
    select_similar_users,
)
from .content_similarity import (
    content_score,
    content_similarity,
    context_match,
    rank_by_similarity,
)
from .diversity import apply_diversity_rerank, diversity_score
from .matching import rank_for_context, score_resource
from .popularity import matching_popularity, recommendation_popularity
from .trending import rank_trending

__all__ = [
    "SimilarUser",
    "apply_diversity_rerank",
    "build_analysis_context",
    "build_scored_resource",
    "collaborative_score",
    "content_score",
    "content_similarity",
    "context_match",
    "diversity_score",
    "filter_visible",
    "find_similar_users",
    "infer_idea_type",
    "infer_phase",
    "interacted_resource_ids",
    "matching_popularity",
    "rank_by_similarity",
    "rank_for_context",
    "rank_trending",
    "recommendation_popularity",
    "recommendation_reason",
    "score_resource",
    "select_response",
    "select_similar_users",
]
