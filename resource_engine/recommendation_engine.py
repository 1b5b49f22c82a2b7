"""
Resource recommendation engine — personalized ranking with a TTL cache.

Pipeline for get_recommendations:
1. Interacted ids (bookmarks + accesses); fetched on every call.
2. Cache lookup by (user_id, analysis_id).
3. On miss: candidate pool (<= 200 active by rating, interacted excluded),
   recent history, analysis context and neighbourhood fetched concurrently.
4. Blended scoring (collaborative, content, popularity) + diversity re-rank.
5. The diversified list is cached before per-call filtering.
6. exclude_resource_ids, interacted ids, tier gate and limit applied last,
   so they hold for cached results too.

Collaborator failures surface as DataFetchError. Cache backend failures are
logged and the request continues uncached.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, List, Optional, Sequence

from .models.config import RecommendationConfig, resolve_config
from .models.context import AnalysisContext, RecommendationContext
from .models.resource import Resource, Timeframe, parse_enum
from .models.scoring import ScoredResource
from .services.analysis_store import AnalysisStore
from .services.cache import (
    InMemoryRecommendationCache,
    RecommendationCache,
    cache_key,
    user_prefix,
)
from .services.catalog import SORT_RATING, CandidateFilter, ResourceCatalog
from .services.fetch import gather_all, guarded
from .services.interaction_store import InteractionStore
from .stages.analysis_context import build_analysis_context
from .stages.blended_scoring import build_scored_resource
from .stages.candidate_pool import filter_visible, select_response
from .stages.collaborative import (
    collaborative_score,
    find_similar_users,
    interacted_resource_ids,
)
from .stages.content_similarity import content_score, rank_by_similarity
from .stages.diversity import apply_diversity_rerank
from .stages.popularity import recommendation_popularity
from .stages.trending import rank_trending

logger = logging.getLogger(__name__)


class ResourceRecommendationEngine:
    """
    Personalized recommendations, similar resources and trending resources.

    Collaborators are injected; the only state the engine owns is the cache,
    which defaults to an in-process map with the configured TTL.
    """

    def __init__(
        self,
        catalog: ResourceCatalog,
        interactions: InteractionStore,
        analyses: Optional[AnalysisStore] = None,
        cache: Optional[RecommendationCache] = None,
        config: Optional[RecommendationConfig] = None,
    ):
        self.config = resolve_config(config)
        self.catalog = catalog
        self.interactions = interactions
        self.analyses = analyses
        self.cache = (
            cache
            if cache is not None
            else InMemoryRecommendationCache(ttl_seconds=self.config.cache_ttl_seconds)
        )

    # -------------------------------------------------------------------------
    # Personalized recommendations
    # -------------------------------------------------------------------------

    async def get_recommendations(self, context: RecommendationContext) -> List[Resource]:
        scored = await self.get_scored_recommendations(context)
        return [s.resource for s in scored]

    async def get_scored_recommendations(
        self,
        context: RecommendationContext,
    ) -> List[ScoredResource]:
        """Ranked recommendations with score breakdowns and reasons."""
        interacted = await interacted_resource_ids(self.interactions, context.user_id)
        interacted_set = frozenset(interacted)

        key = cache_key(context.user_id, context.analysis_id)
        ranked = self._cache_get(key)
        if ranked is None:
            ranked = await self._rank(context, interacted)
            self._cache_set(key, ranked)

        return select_response(
            ranked,
            exclude_ids=context.exclude_resource_ids | interacted_set,
            limit=context.limit,
            hide_premium=context.hides_premium,
        )

    async def _rank(
        self,
        context: RecommendationContext,
        interacted: Sequence[int],
    ) -> List[ScoredResource]:
        config = self.config
        interacted_set = frozenset(interacted)

        candidates, history, analysis_context, similar_users = await gather_all(
            guarded(
                "find_active_candidates",
                self.catalog.find_active_candidates(
                    CandidateFilter(exclude_ids=interacted_set),
                    sort_by=SORT_RATING,
                    limit=config.candidate_pool_size,
                ),
            ),
            guarded(
                "find_by_ids",
                self.catalog.find_by_ids(list(interacted[: config.content_history_limit])),
            ),
            self._analysis_context(context.analysis_id),
            find_similar_users(context.user_id, interacted_set, self.interactions, config),
        )
        candidates = filter_visible(candidates, exclude_ids=interacted_set)

        scored = [
            build_scored_resource(
                resource,
                collaborative=collaborative_score(resource.id, similar_users),
                content=content_score(resource, history, analysis_context, config),
                popularity=recommendation_popularity(resource, config),
                config=config,
            )
            for resource in candidates
        ]
        ranked = apply_diversity_rerank(scored, config, weights=config.weights)
        logger.info(
            "[recommend] RANKED user_id=%s candidates=%s neighbours=%s history=%s",
            context.user_id, len(candidates), len(similar_users), len(history),
        )
        return ranked

    async def _analysis_context(self, analysis_id: Optional[int]) -> Optional[AnalysisContext]:
        if analysis_id is None or self.analyses is None:
            return None
        analysis = await guarded("get_analysis", self.analyses.get_analysis(analysis_id))
        if analysis is None:
            logger.info("[recommend] ANALYSIS_NOT_FOUND analysis_id=%s", analysis_id)
        return build_analysis_context(analysis)

    # -------------------------------------------------------------------------
    # Similar and trending
    # -------------------------------------------------------------------------

    async def get_similar_resources(self, resource_id: int, limit: int = 5) -> List[Resource]:
        """Most content-similar active resources; unknown reference id gives []."""
        reference = await guarded("find_by_id", self.catalog.find_by_id(resource_id))
        if reference is None:
            logger.info("[recommend] REFERENCE_NOT_FOUND resource_id=%s", resource_id)
            return []
        candidates = await guarded(
            "find_active_candidates",
            self.catalog.find_active_candidates(
                CandidateFilter(),
                sort_by=SORT_RATING,
                limit=self.config.similar_resources_pool_size,
            ),
        )
        return rank_by_similarity(reference, candidates, limit)

    async def get_trending_resources(
        self,
        timeframe: Any = Timeframe.WEEK,
        limit: int = 10,
    ) -> List[Resource]:
        """
        Resources accessed most within the timeframe, blended with rating.
        Without access data in the window, the highest-rated active resources.
        """
        limit = max(0, limit)
        window = parse_enum(timeframe, Timeframe)
        if window is None:
            logger.warning("[trending] UNKNOWN_TIMEFRAME value=%s using=week", timeframe)
            window = Timeframe.WEEK
        since = datetime.now(timezone.utc) - timedelta(days=window.days)

        most_accessed = await guarded(
            "get_most_accessed",
            self.interactions.get_most_accessed(since=since, limit=limit * 2),
        )
        if not most_accessed:
            logger.info("[trending] FALLBACK_TO_RATING timeframe=%s", window.value)
            return await guarded(
                "find_active_candidates",
                self.catalog.find_active_candidates(
                    CandidateFilter(), sort_by=SORT_RATING, limit=limit
                ),
            )

        access_counts = {resource_id: count for resource_id, count in most_accessed}
        resources = await guarded(
            "find_by_ids", self.catalog.find_by_ids(list(access_counts))
        )
        return rank_trending(resources, access_counts, limit, self.config)

    # -------------------------------------------------------------------------
    # Cache control
    # -------------------------------------------------------------------------

    def clear_cache(self, user_id: int) -> int:
        """Drop every cached ranking of one user (all analyses)."""
        removed = self.cache.delete_prefix(user_prefix(user_id))
        logger.info("[cache] CLEARED user_id=%s entries=%s", user_id, removed)
        return removed

    def clear_all_cache(self) -> None:
        self.cache.clear()
        logger.info("[cache] CLEARED_ALL")

    def invalidate(self, user_id: int) -> int:
        """Hook for write paths (bookmark, access) that change a user's history."""
        return self.clear_cache(user_id)

    def _cache_get(self, key: str) -> Optional[List[ScoredResource]]:
        try:
            cached = self.cache.get(key)
        except Exception as e:
            logger.warning("[cache] BACKEND_FAILED op=get key=%s error=%s", key, e)
            return None
        if cached is None:
            logger.debug("[cache] MISS key=%s", key)
            return None
        logger.debug("[cache] HIT key=%s", key)
        return [s.model_copy(deep=True) for s in cached]

    def _cache_set(self, key: str, ranked: List[ScoredResource]) -> None:
        try:
            self.cache.set(key, [s.model_copy(deep=True) for s in ranked])
        except Exception as e:
            logger.warning("[cache] BACKEND_FAILED op=set key=%s error=%s", key, e)
