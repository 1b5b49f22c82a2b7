"""
Engine configuration — step matching and recommendation parameters.

Defaults are defined here. Callers may pass a dict (e.g. loaded from the JSON
file named by RESOURCE_ENGINE_CONFIG_PATH); from_dict() merges it with these
defaults. Weight groups are validated at construction so a bad configuration
fails at startup, never mid-request.
"""

from typing import Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, model_validator

from ..errors import InvalidWeightConfiguration
from .scoring import (
    COLLABORATIVE,
    CONTENT_BASED,
    DIVERSITY,
    EXPERIENCE_MATCH,
    IDEA_TYPE_MATCH,
    KEYWORD_SIMILARITY,
    PHASE_MATCH,
    POPULARITY,
    POPULARITY_BOOST,
)

WEIGHT_TOLERANCE = 0.01


def check_weights_sum(weights: Mapping[str, float], group: str) -> None:
    """Raise InvalidWeightConfiguration unless weights are non-negative and sum to 1.0."""
    negative = [name for name, w in weights.items() if w < 0]
    if negative:
        raise InvalidWeightConfiguration(
            f"{group} weights must be non-negative, got {negative}"
        )
    total = sum(weights.values())
    if abs(total - 1.0) > WEIGHT_TOLERANCE:
        raise InvalidWeightConfiguration(
            f"{group} weights must sum to 1.0, got {total}"
        )


class MatchingConfig(BaseModel):
    """Configuration for step matching (task-scoped relevance)."""

    model_config = ConfigDict(frozen=True)

    # -------------------------------------------------------------------------
    # Relevance weights (must sum to 1.0)
    # score = phase*0.40 + idea_type*0.25 + keyword*0.20 + experience*0.10 + popularity*0.05
    # -------------------------------------------------------------------------

    weight_phase: float = 0.40
    weight_idea_type: float = 0.25
    weight_keyword: float = 0.20
    weight_experience: float = 0.10
    weight_popularity: float = 0.05

    # -------------------------------------------------------------------------
    # Factor values
    # -------------------------------------------------------------------------

    # Neutral score for any factor the context or resource has no data for.
    neutral_score: float = 0.5
    # Resource relevant to a phase one step away from the context phase.
    adjacent_phase_score: float = 0.5
    # Resource with no idea types is generic: applicable to all ideas.
    generic_idea_type_score: float = 0.6
    # Experience distance 1 and 2 (beginner <-> advanced).
    experience_one_level_score: float = 0.6
    experience_two_level_score: float = 0.2

    # -------------------------------------------------------------------------
    # Popularity boost (rating weighs more than views)
    # -------------------------------------------------------------------------

    popularity_rating_weight: float = 0.7
    popularity_view_weight: float = 0.3
    view_saturation: int = 1000

    # -------------------------------------------------------------------------
    # Candidate pool: max(limit * multiplier, minimum), sorted by rating
    # -------------------------------------------------------------------------

    candidate_pool_multiplier: int = 10
    min_candidate_pool: int = 50

    @property
    def weights(self) -> Dict[str, float]:
        return {
            PHASE_MATCH: self.weight_phase,
            IDEA_TYPE_MATCH: self.weight_idea_type,
            KEYWORD_SIMILARITY: self.weight_keyword,
            EXPERIENCE_MATCH: self.weight_experience,
            POPULARITY_BOOST: self.weight_popularity,
        }

    @model_validator(mode="after")
    def weights_sum_to_one(self):
        check_weights_sum(self.weights, "Matching")
        check_weights_sum(
            {
                "rating": self.popularity_rating_weight,
                "views": self.popularity_view_weight,
            },
            "Matching popularity",
        )
        return self

    def candidate_pool_size(self, limit: int) -> int:
        return max(limit * self.candidate_pool_multiplier, self.min_candidate_pool)


class RecommendationConfig(BaseModel):
    """Configuration for personalized recommendations."""

    model_config = ConfigDict(frozen=True)

    # -------------------------------------------------------------------------
    # Blended weights (must sum to 1.0)
    # final = collaborative*0.40 + content*0.35 + popularity*0.15 + diversity*0.10
    # -------------------------------------------------------------------------

    weight_collaborative: float = 0.40
    weight_content: float = 0.35
    weight_popularity: float = 0.15
    weight_diversity: float = 0.10

    # -------------------------------------------------------------------------
    # Collaborative filtering (user-based kNN, Jaccard similarity)
    # -------------------------------------------------------------------------

    # Similar users below this Jaccard similarity are ignored.
    min_similarity_threshold: float = 0.1
    # Candidate neighbours must share at least this many interacted resources.
    min_overlap: int = 2
    # Top-N candidate neighbours by raw overlap count.
    similar_user_limit: int = 20

    # -------------------------------------------------------------------------
    # Content-based scoring
    # -------------------------------------------------------------------------

    # Most recent interacted resources compared against each candidate.
    content_history_limit: int = 10
    # Content score when there is no history and no analysis context.
    neutral_content_score: float = 0.5

    # -------------------------------------------------------------------------
    # Popularity (rating 0-500, views capped at 1000, bookmarks capped at 100)
    # -------------------------------------------------------------------------

    popularity_rating_weight: float = 0.5
    popularity_view_weight: float = 0.3
    popularity_bookmark_weight: float = 0.2
    view_saturation: int = 1000
    bookmark_saturation: int = 100

    # -------------------------------------------------------------------------
    # Diversity re-ranking
    # diversity = max(0, 1 - category_penalty*prior_same_category - type_penalty*prior_same_type)
    # -------------------------------------------------------------------------

    category_penalty: float = 0.1
    type_penalty: float = 0.05

    # -------------------------------------------------------------------------
    # Candidate pools
    # -------------------------------------------------------------------------

    candidate_pool_size: int = 200
    similar_resources_pool_size: int = 100

    # -------------------------------------------------------------------------
    # Trending (access count in window vs rating)
    # -------------------------------------------------------------------------

    trending_access_weight: float = 0.7
    trending_rating_weight: float = 0.3

    # -------------------------------------------------------------------------
    # Cache
    # -------------------------------------------------------------------------

    cache_ttl_seconds: float = 3600.0

    @property
    def weights(self) -> Dict[str, float]:
        return {
            COLLABORATIVE: self.weight_collaborative,
            CONTENT_BASED: self.weight_content,
            POPULARITY: self.weight_popularity,
            DIVERSITY: self.weight_diversity,
        }

    @property
    def relevance_weights(self) -> Dict[str, float]:
        """Non-diversity weights rescaled to sum to 1.0 (the pre-diversity score)."""
        remaining = 1.0 - self.weight_diversity
        return {
            name: (w / remaining if remaining > 0 else 0.0)
            for name, w in self.weights.items()
            if name != DIVERSITY
        }

    @model_validator(mode="after")
    def weights_sum_to_one(self):
        check_weights_sum(self.weights, "Recommendation")
        if self.weight_diversity >= 1.0:
            raise InvalidWeightConfiguration(
                "Recommendation diversity weight must be below 1.0"
            )
        check_weights_sum(
            {
                "rating": self.popularity_rating_weight,
                "views": self.popularity_view_weight,
                "bookmarks": self.popularity_bookmark_weight,
            },
            "Popularity",
        )
        check_weights_sum(
            {
                "access": self.trending_access_weight,
                "rating": self.trending_rating_weight,
            },
            "Trending",
        )
        return self

    @classmethod
    def from_dict(cls, config_dict: Dict) -> "RecommendationConfig":
        """Create config from dictionary (e.g., loaded from JSON)."""
        flat = {}
        if "weights" in config_dict:
            w = config_dict["weights"]
            for key in ("collaborative", "content", "popularity", "diversity"):
                if key in w:
                    flat[f"weight_{key}"] = w[key]
        if "collaborative" in config_dict:
            cf = config_dict["collaborative"]
            flat["min_similarity_threshold"] = cf.get("min_similarity", 0.1)
            flat["min_overlap"] = cf.get("min_overlap", 2)
            flat["similar_user_limit"] = cf.get("max_similar_users", 20)
        if "popularity" in config_dict:
            pop = config_dict["popularity"]
            for key in ("rating", "view", "bookmark"):
                if key in pop:
                    flat[f"popularity_{key}_weight"] = pop[key]
        if "diversity" in config_dict:
            dv = config_dict["diversity"]
            flat["category_penalty"] = dv.get("category_penalty", 0.1)
            flat["type_penalty"] = dv.get("type_penalty", 0.05)
        if "trending" in config_dict:
            tr = config_dict["trending"]
            if "access" in tr:
                flat["trending_access_weight"] = tr["access"]
            if "rating" in tr:
                flat["trending_rating_weight"] = tr["rating"]
        if "cache" in config_dict:
            if "ttl_seconds" in config_dict["cache"]:
                flat["cache_ttl_seconds"] = config_dict["cache"]["ttl_seconds"]
        # Flat keys are accepted as-is
        flat.update(config_dict)
        allowed = set(cls.model_fields)
        filtered = {k: v for k, v in flat.items() if k in allowed}
        return cls.model_validate(filtered)


DEFAULT_MATCHING_CONFIG = MatchingConfig()
DEFAULT_CONFIG = RecommendationConfig()


def resolve_config(config: Optional[RecommendationConfig]) -> RecommendationConfig:
    """Return config or DEFAULT_CONFIG when none is provided."""
    return config if config is not None else DEFAULT_CONFIG


def resolve_matching_config(config: Optional[MatchingConfig]) -> MatchingConfig:
    """Return config or DEFAULT_MATCHING_CONFIG when none is provided."""
    return config if config is not None else DEFAULT_MATCHING_CONFIG
