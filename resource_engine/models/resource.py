"""
Resource model — typed catalog entry read by every scorer.

Catalog rows arrive as loosely typed dicts (camelCase keys, plain string lists
for phases and idea types). Resource.model_validate(d) normalizes them into
closed enums; unknown tags are dropped instead of failing the whole pipeline.
"""

import logging
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional, Type, Union

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)

MAX_RATING = 500


class Phase(str, Enum):
    RESEARCH = "research"
    VALIDATION = "validation"
    DEVELOPMENT = "development"
    LAUNCH = "launch"


class IdeaType(str, Enum):
    SOFTWARE = "software"
    PHYSICAL_PRODUCT = "physical_product"
    SERVICE = "service"
    MARKETPLACE = "marketplace"


class ResourceType(str, Enum):
    ARTICLE = "article"
    TOOL = "tool"
    TEMPLATE = "template"
    GUIDE = "guide"
    VIDEO = "video"
    OTHER = "other"


class DifficultyLevel(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class UserTier(str, Enum):
    FREE = "free"
    PRO = "pro"
    ENTERPRISE = "enterprise"


class AccessType(str, Enum):
    VIEW = "view"
    DOWNLOAD = "download"
    EXTERNAL_LINK = "external_link"


class Timeframe(str, Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"

    @property
    def days(self) -> int:
        return {"day": 1, "week": 7, "month": 30}[self.value]


# Adjacency for phase matching and distance for experience matching.
PHASE_ORDER: List[Phase] = [
    Phase.RESEARCH,
    Phase.VALIDATION,
    Phase.DEVELOPMENT,
    Phase.LAUNCH,
]
DIFFICULTY_ORDER: List[DifficultyLevel] = [
    DifficultyLevel.BEGINNER,
    DifficultyLevel.INTERMEDIATE,
    DifficultyLevel.ADVANCED,
]


def parse_enum(value: Any, enum_cls: Type[Enum]) -> Optional[Enum]:
    """Parse one value into enum_cls (case-insensitive); None when unknown or empty."""
    if value is None:
        return None
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        return None


def parse_enum_set(value: Any, enum_cls: Type[Enum], field_name: str = "") -> FrozenSet:
    """Parse a list/set/single value into a frozenset of enum_cls, dropping unknown tags."""
    if value is None:
        return frozenset()
    if isinstance(value, (str, Enum)):
        value = [value]
    known = set()
    dropped = []
    for item in value:
        parsed = parse_enum(item, enum_cls)
        if parsed is None:
            dropped.append(item)
        else:
            known.add(parsed)
    if dropped:
        logger.debug(
            "[resource] UNKNOWN_TAGS_DROPPED field=%s values=%s", field_name, dropped
        )
    return frozenset(known)


def _non_negative_int(value: Any) -> int:
    if value is None:
        return 0
    return max(0, int(value))


class Resource(BaseModel):
    """
    Catalog entry: article, tool, template, guide or video.

    The engine only reads resources; they are immutable for the duration of a call.
    average_rating is stored 0–500 (i.e. 0.00–5.00 scaled by 100).
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        extra="ignore",
    )

    id: int
    title: str = ""
    description: str = ""
    category_id: Optional[int] = None
    resource_type: ResourceType = ResourceType.OTHER
    phase_relevance: FrozenSet[Phase] = frozenset()
    idea_types: FrozenSet[IdeaType] = frozenset()
    difficulty_level: Optional[DifficultyLevel] = None
    average_rating: int = 0
    view_count: int = 0
    bookmark_count: int = 0
    is_active: bool = True
    is_premium: bool = False

    @field_validator("title", "description", mode="before")
    @classmethod
    def _text_or_empty(cls, v: Any) -> str:
        return "" if v is None else str(v)

    @field_validator("resource_type", mode="before")
    @classmethod
    def _known_resource_type(cls, v: Any) -> ResourceType:
        return parse_enum(v, ResourceType) or ResourceType.OTHER

    @field_validator("phase_relevance", mode="before")
    @classmethod
    def _known_phases(cls, v: Any) -> FrozenSet[Phase]:
        return parse_enum_set(v, Phase, "phase_relevance")

    @field_validator("idea_types", mode="before")
    @classmethod
    def _known_idea_types(cls, v: Any) -> FrozenSet[IdeaType]:
        return parse_enum_set(v, IdeaType, "idea_types")

    @field_validator("difficulty_level", mode="before")
    @classmethod
    def _known_difficulty(cls, v: Any) -> Optional[DifficultyLevel]:
        return parse_enum(v, DifficultyLevel)

    @field_validator("average_rating", mode="before")
    @classmethod
    def _clamp_rating(cls, v: Any) -> int:
        if v is None:
            return 0
        return min(MAX_RATING, max(0, int(round(float(v)))))

    @field_validator("view_count", "bookmark_count", mode="before")
    @classmethod
    def _clamp_counts(cls, v: Any) -> int:
        return _non_negative_int(v)

    @field_validator("is_active", "is_premium", mode="before")
    @classmethod
    def _bool_or_default(cls, v: Any, info) -> Any:
        # Non-None values go through pydantic's bool parsing ("false", "0", 0 -> False)
        if v is None:
            return info.field_name == "is_active"
        return v

    @property
    def text(self) -> str:
        """Title and description, the text keyword matching runs against."""
        return f"{self.title} {self.description}"


def ensure_resources(items: List[Union[Dict[str, Any], Resource]]) -> List[Resource]:
    """Convert list of dicts or Resources to list of Resource models."""
    return [
        Resource.model_validate(r) if isinstance(r, dict) else r
        for r in items
    ]
