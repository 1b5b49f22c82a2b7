"""Collaborators: catalog, interaction history, analyses, and the recommendation cache."""

from .analysis_store import AnalysisStore, InMemoryAnalysisStore
from .cache import (
    InMemoryRecommendationCache,
    RecommendationCache,
    cache_key,
    user_prefix,
)
from .catalog import CandidateFilter, InMemoryResourceCatalog, ResourceCatalog
from .fetch import gather_all, guarded
from .interaction_store import InMemoryInteractionStore, InteractionStore

__all__ = [
    "AnalysisStore",
    "CandidateFilter",
    "InMemoryAnalysisStore",
    "InMemoryInteractionStore",
    "InMemoryRecommendationCache",
    "InMemoryResourceCatalog",
    "InteractionStore",
    "RecommendationCache",
    "ResourceCatalog",
    "cache_key",
    "gather_all",
    "guarded",
    "user_prefix",
]
