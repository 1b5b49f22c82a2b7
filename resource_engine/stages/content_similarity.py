"""
Content-based similarity between resources.

similarity(a, b) = 0.3 category match + 0.25 phase Jaccard + 0.25 idea-type Jaccard
+ 0.2 resource-type match. Symmetric; the caller excludes self-comparison.
content_score averages a candidate's similarity to the user's recent
resources, plus an optional analysis-context match term.
"""

from typing import List, Optional, Sequence

import numpy as np

from ..models.config import DEFAULT_CONFIG, RecommendationConfig
from ..models.context import AnalysisContext
from ..models.resource import Resource
from ..utils.scores import clamp01
from ..utils.similarity import jaccard_similarity

CATEGORY_WEIGHT = 0.3
PHASE_WEIGHT = 0.25
IDEA_TYPE_WEIGHT = 0.25
RESOURCE_TYPE_WEIGHT = 0.2


def content_similarity(a: Resource, b: Resource) -> float:
    """Attribute-overlap similarity between two resources (0–1)."""
    similarity = 0.0
    # Uncategorized resources (None == None) share a category
    if a.category_id == b.category_id:
        similarity += CATEGORY_WEIGHT
    similarity += PHASE_WEIGHT * jaccard_similarity(a.phase_relevance, b.phase_relevance)
    similarity += IDEA_TYPE_WEIGHT * jaccard_similarity(a.idea_types, b.idea_types)
    if a.resource_type == b.resource_type:
        similarity += RESOURCE_TYPE_WEIGHT
    return clamp01(similarity)


def context_match(resource: Resource, context: Optional[AnalysisContext]) -> float:
    """0.5 for phase membership + 0.5 for idea-type membership; 0 without context."""
    if context is None:
        return 0.0
    match = 0.0
    if context.phase is not None and context.phase in resource.phase_relevance:
        match += 0.5
    if context.idea_type is not None and context.idea_type in resource.idea_types:
        match += 0.5
    return match


def content_score(
    resource: Resource,
    history: Sequence[Resource],
    analysis_context: Optional[AnalysisContext] = None,
    config: RecommendationConfig = DEFAULT_CONFIG,
) -> float:
    """
    Mean similarity of resource to the user's recent resources.

    history should already be limited to the most recent content_history_limit
    resources. When an analysis context is present its match counts as one more
    term in the mean. No history and no context: neutral_content_score.
    """
    terms: List[float] = [
        content_similarity(resource, other)
        for other in history
        if other.id != resource.id
    ]
    if analysis_context is not None:
        terms.append(context_match(resource, analysis_context))
    if not terms:
        return config.neutral_content_score
    return clamp01(float(np.mean(terms)))


def rank_by_similarity(
    reference: Resource,
    candidates: Sequence[Resource],
    limit: int,
) -> List[Resource]:
    """Candidates most similar to reference, reference itself excluded."""
    scored = [
        (content_similarity(reference, c), c)
        for c in candidates
        if c.id != reference.id
    ]
    scored.sort(key=lambda pair: pair[0], reverse=True)
    return [c for _, c in scored[: max(0, limit)]]
