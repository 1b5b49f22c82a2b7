"""
Resource Relevance & Recommendation Engine

Single entry point for the resource_engine package:
- models/: Resource, contexts, ScoredResource, MatchingConfig, RecommendationConfig
- stages/: matching, content similarity, popularity, collaborative, diversity, trending
- services/: catalog, interaction history, analyses, recommendation cache
- matching_service: ResourceMatchingService (task-scoped matching)
- recommendation_engine: ResourceRecommendationEngine (personalized ranking)
"""

from .config import (
    EngineSettings,
    configure_logging,
    get_settings,
    load_recommendation_config,
    reload_settings,
)
from .errors import DataFetchError, InvalidWeightConfiguration, ResourceEngineError
from .matching_service import ResourceMatchingService
from .models import (
    DEFAULT_CONFIG,
    DEFAULT_MATCHING_CONFIG,
    AnalysisContext,
    MatchingConfig,
    MatchingContext,
    RecommendationConfig,
    RecommendationContext,
    Resource,
    ScoredResource,
)
from .recommendation_engine import ResourceRecommendationEngine
from .services import (
    InMemoryAnalysisStore,
    InMemoryInteractionStore,
    InMemoryRecommendationCache,
    InMemoryResourceCatalog,
)

__all__ = [
    "DEFAULT_CONFIG",
    "DEFAULT_MATCHING_CONFIG",
    "AnalysisContext",
    "DataFetchError",
    "EngineSettings",
    "InMemoryAnalysisStore",
    "InMemoryInteractionStore",
    "InMemoryRecommendationCache",
    "InMemoryResourceCatalog",
    "InvalidWeightConfiguration",
    "MatchingConfig",
    "MatchingContext",
    "RecommendationConfig",
    "RecommendationContext",
    "Resource",
    "ResourceEngineError",
    "ResourceMatchingService",
    "ResourceRecommendationEngine",
    "ScoredResource",
    "configure_logging",
    "get_settings",
    "load_recommendation_config",
    "reload_settings",
]
