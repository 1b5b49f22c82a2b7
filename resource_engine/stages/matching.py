"""
Step matching: how well a resource fits a specific task.

score = 0.40 phase + 0.25 idea type + 0.20 keyword + 0.10 experience + 0.05 popularity,
rounded to 2 decimals on the 0–1 scale. Every factor is total: missing data on
either side resolves to the neutral score instead of raising.
"""

from typing import FrozenSet, List, Sequence

from ..models.config import DEFAULT_MATCHING_CONFIG, MatchingConfig
from ..models.context import MatchingContext
from ..models.resource import DIFFICULTY_ORDER, PHASE_ORDER, Phase, Resource
from ..models.scoring import (
    EXPERIENCE_MATCH,
    IDEA_TYPE_MATCH,
    KEYWORD_SIMILARITY,
    PHASE_MATCH,
    POPULARITY_BOOST,
    ScoredResource,
    sort_by_score,
)
from ..utils.scores import clamp01, weighted_sum
from ..utils.similarity import jaccard_similarity
from ..utils.text import extract_keywords
from .candidate_pool import filter_visible
from .popularity import matching_popularity


def adjacent_phases(phase: Phase) -> FrozenSet[Phase]:
    """Phases one step before and after phase in the research → launch ordering."""
    idx = PHASE_ORDER.index(phase)
    neighbours = set()
    if idx > 0:
        neighbours.add(PHASE_ORDER[idx - 1])
    if idx < len(PHASE_ORDER) - 1:
        neighbours.add(PHASE_ORDER[idx + 1])
    return frozenset(neighbours)


def phase_match(
    resource: Resource,
    context: MatchingContext,
    config: MatchingConfig = DEFAULT_MATCHING_CONFIG,
) -> float:
    """1.0 exact phase, adjacent_phase_score for a neighbouring phase, else 0."""
    if context.phase is None:
        return config.neutral_score
    if context.phase in resource.phase_relevance:
        return 1.0
    if resource.phase_relevance & adjacent_phases(context.phase):
        return config.adjacent_phase_score
    return 0.0


def idea_type_match(
    resource: Resource,
    context: MatchingContext,
    config: MatchingConfig = DEFAULT_MATCHING_CONFIG,
) -> float:
    """1.0 exact idea type, generic score when the resource lists none, else 0."""
    if context.idea_type is None:
        return config.neutral_score
    if context.idea_type in resource.idea_types:
        return 1.0
    if not resource.idea_types:
        return config.generic_idea_type_score
    return 0.0


def keyword_similarity(
    resource: Resource,
    context: MatchingContext,
    config: MatchingConfig = DEFAULT_MATCHING_CONFIG,
) -> float:
    """Jaccard similarity of step keywords vs keywords from title + description."""
    if not context.step_keywords:
        return config.neutral_score
    return jaccard_similarity(context.step_keywords, set(extract_keywords(resource.text)))


def experience_match(
    resource: Resource,
    context: MatchingContext,
    config: MatchingConfig = DEFAULT_MATCHING_CONFIG,
) -> float:
    """1.0 same level, then by level distance: one apart, two apart."""
    if context.user_experience is None or resource.difficulty_level is None:
        return config.neutral_score
    distance = abs(
        DIFFICULTY_ORDER.index(context.user_experience)
        - DIFFICULTY_ORDER.index(resource.difficulty_level)
    )
    if distance == 0:
        return 1.0
    if distance == 1:
        return config.experience_one_level_score
    return config.experience_two_level_score


def score_resource(
    resource: Resource,
    context: MatchingContext,
    config: MatchingConfig = DEFAULT_MATCHING_CONFIG,
) -> ScoredResource:
    """Relevance of one resource to a task context, with per-factor breakdown."""
    breakdown = {
        PHASE_MATCH: phase_match(resource, context, config),
        IDEA_TYPE_MATCH: idea_type_match(resource, context, config),
        KEYWORD_SIMILARITY: keyword_similarity(resource, context, config),
        EXPERIENCE_MATCH: experience_match(resource, context, config),
        POPULARITY_BOOST: matching_popularity(resource, config),
    }
    weights = config.weights
    score = round(clamp01(weighted_sum(breakdown, weights)), 2)
    return ScoredResource(
        resource=resource,
        score=score,
        score_breakdown=breakdown,
        weights=weights,
    )


def rank_for_context(
    candidates: Sequence[Resource],
    context: MatchingContext,
    limit: int,
    config: MatchingConfig = DEFAULT_MATCHING_CONFIG,
) -> List[ScoredResource]:
    """
    Score all candidates, sort descending, drop previously viewed, inactive and
    (for free tier) premium resources, then truncate to limit.
    """
    scored = sort_by_score([score_resource(r, context, config) for r in candidates])
    visible = filter_visible(
        scored,
        exclude_ids=context.previously_viewed,
        hide_premium=context.hides_premium,
    )
    return visible[: max(0, limit)]
