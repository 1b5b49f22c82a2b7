"""Data models for the resource engine."""

from .config import (
    DEFAULT_CONFIG,
    DEFAULT_MATCHING_CONFIG,
    MatchingConfig,
    RecommendationConfig,
    check_weights_sum,
    resolve_config,
    resolve_matching_config,
)
from .context import AnalysisContext, MatchingContext, RecommendationContext
from .interaction import InteractionRecord, ensure_interactions
from .resource import (
    AccessType,
    DifficultyLevel,
    IdeaType,
    Phase,
    Resource,
    ResourceType,
    Timeframe,
    UserTier,
    ensure_resources,
)
from .scoring import ScoredResource

__all__ = [
    "DEFAULT_CONFIG",
    "DEFAULT_MATCHING_CONFIG",
    "AccessType",
    "AnalysisContext",
    "DifficultyLevel",
    "IdeaType",
    "InteractionRecord",
    "MatchingConfig",
    "MatchingContext",
    "Phase",
    "RecommendationConfig",
    "RecommendationContext",
    "Resource",
    "ResourceType",
    "ScoredResource",
    "Timeframe",
    "UserTier",
    "check_weights_sum",
    "ensure_interactions",
    "ensure_resources",
    "resolve_config",
    "resolve_matching_config",
]
