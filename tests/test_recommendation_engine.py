"""
ResourceRecommendationEngine tests.

Fixture world (see conftest.py): user 1 accessed resources 1 and 2; users 2
and 3 share both and also accessed 3 and 5 respectively. Resource 6 is
premium, resource 7 inactive.

Covers exclusions and tier gating (also when served from cache), cold start,
cache TTL and invalidation, collaborator failures, cancellation, analysis
context, similar resources and trending.

Run:
----
    pytest tests/test_recommendation_engine.py -v
"""

import asyncio

import pytest

from resource_engine import (
    DataFetchError,
    InMemoryInteractionStore,
    InMemoryResourceCatalog,
    RecommendationConfig,
    RecommendationContext,
    ResourceRecommendationEngine,
)
from resource_engine.models.scoring import REASON_COLLABORATIVE

from conftest import access, make_resource


@pytest.fixture
def engine(catalog, interactions, analyses, cache):
    return ResourceRecommendationEngine(catalog, interactions, analyses=analyses, cache=cache)


def _ids(resources):
    return [r.id for r in resources]


class TestGetRecommendations:
    async def test_excludes_interacted_and_inactive(self, engine):
        results = await engine.get_recommendations(RecommendationContext(user_id=1))
        ids = _ids(results)
        assert sorted(ids) == [3, 4, 5, 6, 8]

    async def test_exclude_resource_ids(self, engine):
        context = RecommendationContext(user_id=1, exclude_resource_ids=[3, 5])
        ids = _ids(await engine.get_recommendations(context))
        assert 3 not in ids and 5 not in ids

    async def test_limit(self, engine):
        results = await engine.get_recommendations(RecommendationContext(user_id=1, limit=2))
        assert len(results) == 2
        assert await engine.get_recommendations(RecommendationContext(user_id=1, limit=0)) == []

    async def test_free_tier_never_sees_premium(self, engine):
        results = await engine.get_recommendations(RecommendationContext(user_id=1, user_tier="free"))
        assert all(not r.is_premium for r in results)

    async def test_collaborative_signal(self, engine):
        scored = await engine.get_scored_recommendations(RecommendationContext(user_id=1))
        by_id = {s.resource_id: s for s in scored}
        # users 2 and 3 are equally similar; each accessed one of 3 and 5
        assert by_id[3].score_breakdown["collaborative"] == pytest.approx(0.5)
        assert by_id[5].score_breakdown["collaborative"] == pytest.approx(0.5)
        assert by_id[8].score_breakdown["collaborative"] == 0.0

    async def test_scores_bounded_and_sorted(self, engine):
        scored = await engine.get_scored_recommendations(RecommendationContext(user_id=1))
        scores = [s.score for s in scored]
        assert scores == sorted(scores, reverse=True)
        for s in scored:
            assert 0.0 <= s.score <= 1.0
            assert sum(s.weights.values()) == pytest.approx(1.0)
            assert s.score == pytest.approx(sum(s.weighted_breakdown.values()))
            for name, value in s.weighted_breakdown.items():
                assert value <= s.weights[name] + 1e-9
            assert s.reason

    async def test_cold_start_is_content_and_popularity_only(self, catalog, interactions):
        context = RecommendationContext(user_id=99)
        first = ResourceRecommendationEngine(catalog, interactions)
        second = ResourceRecommendationEngine(catalog, interactions)

        scored = await first.get_scored_recommendations(context)
        assert scored
        assert all(s.score_breakdown["collaborative"] == 0.0 for s in scored)
        assert all(s.reason != REASON_COLLABORATIVE for s in scored)
        assert _ids(await second.get_recommendations(context)) == [s.resource_id for s in scored]

    async def test_concurrent_requests_agree(self, engine):
        context = RecommendationContext(user_id=1)
        results = await asyncio.gather(*(engine.get_recommendations(context) for _ in range(5)))
        assert all(_ids(r) == _ids(results[0]) for r in results)


class TestCaching:
    async def test_cached_result_still_honours_exclusions(self, engine, interactions, cache):
        context = RecommendationContext(user_id=1)
        assert 3 in _ids(await engine.get_recommendations(context))
        assert len(cache) == 1

        interactions.record_access(access(1, 3))
        second = _ids(await engine.get_recommendations(context))
        assert 3 not in second

        third = _ids(await engine.get_recommendations(
            RecommendationContext(user_id=1, exclude_resource_ids=[5], user_tier="free")
        ))
        assert 5 not in third and 6 not in third
        assert len(cache) == 1

    async def test_cached_results_isolated_from_callers(self, engine):
        context = RecommendationContext(user_id=1)
        first = await engine.get_scored_recommendations(context)
        original = dict(first[0].score_breakdown)
        first[0].score_breakdown["collaborative"] = 99.0

        second = await engine.get_scored_recommendations(context)
        assert second[0].resource_id == first[0].resource_id
        assert second[0].score_breakdown == original

        second[0].score_breakdown.clear()
        third = await engine.get_scored_recommendations(context)
        assert third[0].score_breakdown == original

    async def test_ttl_boundary_recomputes(self, engine, catalog, clock):
        context = RecommendationContext(user_id=1)
        await engine.get_recommendations(context)

        catalog.add(make_resource(30, category_id=7, resource_type="guide", average_rating=500))
        clock.advance(3599)
        assert 30 not in _ids(await engine.get_recommendations(context))

        clock.advance(1)
        assert 30 in _ids(await engine.get_recommendations(context))

    async def test_keyed_by_analysis(self, engine, cache):
        await engine.get_recommendations(RecommendationContext(user_id=1))
        await engine.get_recommendations(RecommendationContext(user_id=1, analysis_id=10))
        await engine.get_recommendations(RecommendationContext(user_id=2))
        assert len(cache) == 3

    async def test_clear_cache(self, engine, cache):
        await engine.get_recommendations(RecommendationContext(user_id=1))
        await engine.get_recommendations(RecommendationContext(user_id=1, analysis_id=10))
        await engine.get_recommendations(RecommendationContext(user_id=2))

        assert engine.clear_cache(1) == 2
        assert len(cache) == 1
        assert engine.invalidate(2) == 1

        await engine.get_recommendations(RecommendationContext(user_id=3))
        engine.clear_all_cache()
        assert len(cache) == 0

    async def test_default_cache_uses_config_ttl(self, catalog, interactions):
        engine = ResourceRecommendationEngine(
            catalog, interactions, config=RecommendationConfig(cache_ttl_seconds=5)
        )
        assert engine.cache.ttl_seconds == 5

    async def test_cache_backend_failure_falls_back(self, catalog, interactions):
        class OfflineCache:
            def get(self, key):
                raise RuntimeError("cache offline")

            def set(self, key, value):
                raise RuntimeError("cache offline")

            def delete_prefix(self, prefix):
                raise RuntimeError("cache offline")

            def clear(self):
                raise RuntimeError("cache offline")

        engine = ResourceRecommendationEngine(catalog, interactions, cache=OfflineCache())
        results = await engine.get_recommendations(RecommendationContext(user_id=1))
        assert sorted(_ids(results)) == [3, 4, 5, 6, 8]


class TestFailures:
    async def test_interaction_failure_propagates(self, catalog, cache):
        class BrokenStore(InMemoryInteractionStore):
            async def get_bookmarked_resource_ids(self, user_id):
                raise ConnectionError("history unavailable")

        engine = ResourceRecommendationEngine(catalog, BrokenStore(), cache=cache)
        with pytest.raises(DataFetchError) as exc_info:
            await engine.get_recommendations(RecommendationContext(user_id=1))
        assert exc_info.value.operation == "get_bookmarked_resource_ids"

    async def test_catalog_failure_is_not_cached(self, resources, interactions, cache):
        class BrokenCatalog(InMemoryResourceCatalog):
            async def find_active_candidates(self, filters, sort_by="rating", limit=200):
                raise TimeoutError("catalog timeout")

        engine = ResourceRecommendationEngine(BrokenCatalog(resources), interactions, cache=cache)
        with pytest.raises(DataFetchError) as exc_info:
            await engine.get_recommendations(RecommendationContext(user_id=1))
        assert exc_info.value.operation == "find_active_candidates"
        assert isinstance(exc_info.value.__cause__, TimeoutError)
        assert len(cache) == 0

    async def test_cancellation_leaves_cache_empty(self, resources, interactions, cache):
        started = asyncio.Event()

        class BlockingCatalog(InMemoryResourceCatalog):
            async def find_active_candidates(self, filters, sort_by="rating", limit=200):
                started.set()
                await asyncio.Event().wait()

        engine = ResourceRecommendationEngine(BlockingCatalog(resources), interactions, cache=cache)
        task = asyncio.ensure_future(engine.get_recommendations(RecommendationContext(user_id=1)))
        await started.wait()
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        assert len(cache) == 0


class TestAnalysisContext:
    async def test_analysis_shifts_content_scores(self, engine):
        plain = await engine.get_scored_recommendations(RecommendationContext(user_id=99))
        scoped = await engine.get_scored_recommendations(
            RecommendationContext(user_id=99, analysis_id=10)
        )
        plain_content = {s.resource_id: s.score_breakdown["content_based"] for s in plain}
        scoped_content = {s.resource_id: s.score_breakdown["content_based"] for s in scoped}
        # no history: neutral 0.5 without analysis; analysis (validation, software) match otherwise
        assert plain_content[3] == 0.5
        assert scoped_content[3] == pytest.approx(1.0)
        assert scoped_content[1] == pytest.approx(0.5)
        assert scoped_content[4] == pytest.approx(0.0)

    async def test_unknown_analysis_is_ignored(self, engine):
        scored = await engine.get_scored_recommendations(
            RecommendationContext(user_id=99, analysis_id=404)
        )
        assert all(s.score_breakdown["content_based"] == 0.5 for s in scored)


class TestSimilarResources:
    async def test_most_similar_first(self, engine):
        results = await engine.get_similar_resources(1, limit=3)
        ids = _ids(results)
        assert 1 not in ids
        assert 7 not in ids
        assert ids[0] == 2
        assert len(ids) == 3

    async def test_unknown_resource(self, engine):
        assert await engine.get_similar_resources(999) == []

    async def test_negative_limit(self, engine):
        assert await engine.get_similar_resources(1, limit=-1) == []


class TestTrending:
    async def test_recent_access_ranks_first(self, catalog):
        store = InMemoryInteractionStore([
            access(1, 5), access(2, 5), access(3, 5), access(4, 3),
        ])
        engine = ResourceRecommendationEngine(catalog, store)
        assert _ids(await engine.get_trending_resources("week", limit=5)) == [5, 3]

    async def test_timeframe_window(self, catalog):
        three_days = 3 * 24 * 60
        store = InMemoryInteractionStore([
            access(1, 5, minutes_ago=three_days),
            access(2, 5, minutes_ago=three_days),
            access(3, 3, minutes_ago=10),
        ])
        engine = ResourceRecommendationEngine(catalog, store)
        assert _ids(await engine.get_trending_resources("day")) == [3]
        assert _ids(await engine.get_trending_resources("week")) == [5, 3]

    async def test_falls_back_to_rating(self, catalog):
        engine = ResourceRecommendationEngine(catalog, InMemoryInteractionStore())
        assert _ids(await engine.get_trending_resources("month", limit=3)) == [6, 1, 2]

    async def test_unknown_timeframe_uses_week(self, catalog):
        store = InMemoryInteractionStore([access(1, 4, minutes_ago=2 * 24 * 60)])
        engine = ResourceRecommendationEngine(catalog, store)
        assert _ids(await engine.get_trending_resources("fortnight")) == [4]

    async def test_inactive_skipped(self, catalog):
        store = InMemoryInteractionStore([access(1, 7), access(2, 7), access(1, 2)])
        engine = ResourceRecommendationEngine(catalog, store)
        assert _ids(await engine.get_trending_resources()) == [2]

    async def test_negative_limit(self, catalog):
        store = InMemoryInteractionStore([access(1, 5), access(2, 3)])
        engine = ResourceRecommendationEngine(catalog, store)
        assert await engine.get_trending_resources("week", limit=-1) == []
        empty = ResourceRecommendationEngine(catalog, InMemoryInteractionStore())
        assert await empty.get_trending_resources("week", limit=-1) == []
