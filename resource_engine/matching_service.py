"""
Resource matching service — task-scoped relevance ranking.

Thin facade over stages/matching.py:
- match_resources_to_step: keywords from a plan step's description
- get_phase_resources: everything relevant to a phase, premium gated by tier
- get_similar_resources: context built from a reference resource
- match_resources / score_resources: generic entry points for any MatchingContext

Candidates are the top max(limit x 10, 50) active resources by rating.
"""

import logging
from typing import Any, List, Optional

from .models.config import MatchingConfig, resolve_matching_config
from .models.context import MatchingContext
from .models.resource import PHASE_ORDER, IdeaType, Resource, UserTier
from .models.scoring import ScoredResource
from .services.catalog import SORT_RATING, CandidateFilter, ResourceCatalog
from .services.fetch import guarded
from .stages.matching import rank_for_context
from .utils.text import extract_keywords

logger = logging.getLogger(__name__)


class ResourceMatchingService:
    """Ranks catalog resources against a task context (phase, idea type, keywords)."""

    def __init__(
        self,
        catalog: ResourceCatalog,
        config: Optional[MatchingConfig] = None,
    ):
        self.catalog = catalog
        self.config = resolve_matching_config(config)

    async def match_resources_to_step(
        self,
        step_id: str,
        step_description: str,
        phase: Any,
        idea_type: Any,
        limit: int = 3,
    ) -> List[Resource]:
        """Resources for one action-plan step."""
        context = MatchingContext(
            phase=phase,
            idea_type=idea_type,
            step_keywords=extract_keywords(step_description),
        )
        logger.debug(
            "[matching] STEP step_id=%s keywords=%s", step_id, len(context.step_keywords)
        )
        return await self.match_resources(context, limit)

    async def get_phase_resources(
        self,
        phase: Any,
        idea_type: Any,
        user_tier: Any = UserTier.FREE,
        limit: int = 10,
    ) -> List[Resource]:
        """Resources for a whole phase; the free tier never sees premium resources."""
        context = MatchingContext(phase=phase, idea_type=idea_type, user_tier=user_tier)
        return await self.match_resources(context, limit)

    async def get_similar_resources(self, resource_id: int, limit: int = 5) -> List[Resource]:
        """
        Resources matching the reference resource's first phase, first idea type
        and its own keywords. Unknown reference id: empty list.
        """
        reference = await guarded("find_by_id", self.catalog.find_by_id(resource_id))
        if reference is None:
            logger.info("[matching] REFERENCE_NOT_FOUND resource_id=%s", resource_id)
            return []

        phases = [p for p in PHASE_ORDER if p in reference.phase_relevance]
        idea_types = [t for t in IdeaType if t in reference.idea_types]
        context = MatchingContext(
            phase=phases[0] if phases else None,
            idea_type=idea_types[0] if idea_types else None,
            step_keywords=extract_keywords(reference.text),
            previously_viewed=[resource_id],
        )
        return await self.match_resources(context, limit)

    async def match_resources(self, context: MatchingContext, limit: int = 3) -> List[Resource]:
        scored = await self.score_resources(context, limit)
        return [s.resource for s in scored]

    async def score_resources(
        self,
        context: MatchingContext,
        limit: int = 3,
    ) -> List[ScoredResource]:
        """Scored, sorted and filtered matches with per-factor breakdowns."""
        candidates = await guarded(
            "find_active_candidates",
            self.catalog.find_active_candidates(
                CandidateFilter(exclude_premium=context.hides_premium),
                sort_by=SORT_RATING,
                limit=self.config.candidate_pool_size(limit),
            ),
        )
        return rank_for_context(candidates, context, limit, self.config)
