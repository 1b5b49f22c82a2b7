"""
Shared fixtures and factories for resource_engine tests.

Everything runs against the in-memory collaborators; no network or database.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List

import pytest

from resource_engine.models.resource import Resource
from resource_engine.services import (
    InMemoryAnalysisStore,
    InMemoryInteractionStore,
    InMemoryRecommendationCache,
    InMemoryResourceCatalog,
)

NOW = datetime.now(timezone.utc)


def make_resource(resource_id: int, **overrides: Any) -> Resource:
    """Resource with neutral defaults; keyword overrides use snake_case field names."""
    fields: Dict[str, Any] = {
        "id": resource_id,
        "title": f"Resource {resource_id}",
        "description": "",
        "category_id": 1,
        "resource_type": "article",
        "phase_relevance": ["research"],
        "idea_types": ["software"],
        "average_rating": 300,
        "view_count": 100,
        "bookmark_count": 10,
    }
    fields.update(overrides)
    return Resource(**fields)


def access(user_id: int, resource_id: int, minutes_ago: int = 0, **extra: Any) -> Dict[str, Any]:
    """Access-history row as the catalog database would hand it over (camelCase)."""
    return {
        "userId": user_id,
        "resourceId": resource_id,
        "accessType": extra.pop("access_type", "view"),
        "timestamp": NOW - timedelta(minutes=minutes_ago),
        **extra,
    }


class FakeClock:
    """Manually advanced monotonic clock for cache TTL tests."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock) -> InMemoryRecommendationCache:
    return InMemoryRecommendationCache(ttl_seconds=3600, clock=clock)


@pytest.fixture
def resources() -> List[Resource]:
    """Small mixed catalog: three categories, several types, one premium, one inactive."""
    return [
        make_resource(1, category_id=1, resource_type="article", average_rating=450, view_count=800),
        make_resource(2, category_id=1, resource_type="tool", average_rating=400),
        make_resource(3, category_id=2, resource_type="template", phase_relevance=["validation"]),
        make_resource(4, category_id=2, resource_type="guide", idea_types=["service"]),
        make_resource(5, category_id=3, resource_type="video", average_rating=350),
        make_resource(6, category_id=3, resource_type="article", is_premium=True, average_rating=490),
        make_resource(7, category_id=1, resource_type="article", is_active=False, average_rating=500),
        make_resource(8, category_id=2, resource_type="tool", phase_relevance=["development"]),
    ]


@pytest.fixture
def catalog(resources) -> InMemoryResourceCatalog:
    return InMemoryResourceCatalog(resources)


@pytest.fixture
def interactions() -> InMemoryInteractionStore:
    """
    User 1 accessed 1, 2; user 2 accessed 1, 2, 3; user 3 accessed 1, 2, 5.
    User 4 shares only resource 1 with user 1 and never qualifies as a neighbour.
    """
    return InMemoryInteractionStore(
        interactions=[
            access(1, 1, minutes_ago=30),
            access(1, 2, minutes_ago=20),
            access(2, 1), access(2, 2), access(2, 3),
            access(3, 1), access(3, 2), access(3, 5),
            access(4, 1), access(4, 8),
        ],
    )


@pytest.fixture
def analyses() -> InMemoryAnalysisStore:
    return InMemoryAnalysisStore({
        10: {"query": "validate a saas platform for freelancers", "result": "Strong market demand"},
    })
