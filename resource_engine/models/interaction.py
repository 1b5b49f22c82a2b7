"""
Interaction model — one access of a resource by a user (view, download, external link).

Append-only history owned by the access-history collaborator; the engine derives
each user's interacted-resource-id set from it.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .resource import AccessType, parse_enum


class InteractionRecord(BaseModel):
    """
    A single resource access.

    timestamp: sort key; newest first when deriving recent interactions.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        extra="ignore",
    )

    user_id: int
    resource_id: int
    access_type: AccessType = AccessType.VIEW
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_validator("access_type", mode="before")
    @classmethod
    def _known_access_type(cls, v: Any) -> AccessType:
        return parse_enum(v, AccessType) or AccessType.VIEW

    @field_validator("timestamp", mode="after")
    @classmethod
    def _aware_timestamp(cls, v: datetime) -> datetime:
        return v if v.tzinfo is not None else v.replace(tzinfo=timezone.utc)


def ensure_interactions(
    items: List[Union[Dict[str, Any], InteractionRecord]],
) -> List[InteractionRecord]:
    """Convert list of dicts or InteractionRecords to list of InteractionRecord models."""
    return [
        InteractionRecord.model_validate(i) if isinstance(i, dict) else i
        for i in items
    ]
