"""
Per-call context objects.

MatchingContext scopes step matching to a task (phase, idea type, step keywords);
RecommendationContext scopes personalized recommendations to a user;
AnalysisContext is what the orchestrator infers from an analysis record.
"""

from typing import Any, FrozenSet, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .resource import DifficultyLevel, IdeaType, Phase, UserTier, parse_enum

_CONTEXT_CONFIG = ConfigDict(
    frozen=True,
    populate_by_name=True,
    alias_generator=to_camel,
    extra="ignore",
)


def _id_set(v: Any) -> FrozenSet[int]:
    if v is None:
        return frozenset()
    return frozenset(int(i) for i in v)


def _keyword_set(v: Any) -> FrozenSet[str]:
    if v is None:
        return frozenset()
    if isinstance(v, str):
        v = [v]
    return frozenset(k.strip().lower() for k in v if k and k.strip())


class MatchingContext(BaseModel):
    """
    Task-scoped matching input.

    Unknown or missing phase / idea type / experience values are stored as None
    and score neutrally. user_tier FREE hides premium resources.
    """

    model_config = _CONTEXT_CONFIG

    phase: Optional[Phase] = None
    idea_type: Optional[IdeaType] = None
    step_keywords: FrozenSet[str] = frozenset()
    user_experience: Optional[DifficultyLevel] = None
    previously_viewed: FrozenSet[int] = frozenset()
    user_tier: Optional[UserTier] = None

    @field_validator("phase", mode="before")
    @classmethod
    def _phase(cls, v: Any) -> Optional[Phase]:
        return parse_enum(v, Phase)

    @field_validator("idea_type", mode="before")
    @classmethod
    def _idea_type(cls, v: Any) -> Optional[IdeaType]:
        return parse_enum(v, IdeaType)

    @field_validator("user_experience", mode="before")
    @classmethod
    def _experience(cls, v: Any) -> Optional[DifficultyLevel]:
        return parse_enum(v, DifficultyLevel)

    @field_validator("user_tier", mode="before")
    @classmethod
    def _tier(cls, v: Any) -> Optional[UserTier]:
        return parse_enum(v, UserTier)

    @field_validator("step_keywords", mode="before")
    @classmethod
    def _keywords(cls, v: Any) -> FrozenSet[str]:
        return _keyword_set(v)

    @field_validator("previously_viewed", mode="before")
    @classmethod
    def _viewed(cls, v: Any) -> FrozenSet[int]:
        return _id_set(v)

    @property
    def hides_premium(self) -> bool:
        return self.user_tier == UserTier.FREE


class RecommendationContext(BaseModel):
    """User-scoped recommendation request."""

    model_config = _CONTEXT_CONFIG

    user_id: int
    analysis_id: Optional[int] = None
    limit: int = Field(default=10, ge=0)
    exclude_resource_ids: FrozenSet[int] = frozenset()
    user_tier: Optional[UserTier] = None

    @field_validator("exclude_resource_ids", mode="before")
    @classmethod
    def _excluded(cls, v: Any) -> FrozenSet[int]:
        return _id_set(v)

    @field_validator("user_tier", mode="before")
    @classmethod
    def _tier(cls, v: Any) -> Optional[UserTier]:
        return parse_enum(v, UserTier)

    @property
    def hides_premium(self) -> bool:
        return self.user_tier == UserTier.FREE


class AnalysisContext(BaseModel):
    """Phase and idea type inferred from an analysis record."""

    model_config = ConfigDict(frozen=True)

    phase: Optional[Phase] = None
    idea_type: Optional[IdeaType] = None
