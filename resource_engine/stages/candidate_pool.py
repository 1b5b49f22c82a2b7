"""
Candidate eligibility: active, not excluded, premium hidden for the free tier.

Used before scoring (on the fetched candidate pool) and again after scoring or
a cache hit, so exclusions are honored no matter where a ranking came from.
"""

from typing import AbstractSet, List, Sequence, TypeVar, Union

from ..models.resource import Resource
from ..models.scoring import ScoredResource

T = TypeVar("T", Resource, ScoredResource)


def _resource_of(item: Union[Resource, ScoredResource]) -> Resource:
    return item.resource if isinstance(item, ScoredResource) else item


def _is_visible(
    resource: Resource,
    exclude_ids: AbstractSet[int],
    hide_premium: bool,
) -> bool:
    """True if resource is active, not excluded, and not premium-gated."""
    if not resource.is_active:
        return False
    if resource.id in exclude_ids:
        return False
    if hide_premium and resource.is_premium:
        return False
    return True


def filter_visible(
    items: Sequence[T],
    exclude_ids: AbstractSet[int] = frozenset(),
    hide_premium: bool = False,
) -> List[T]:
    """Keep items (resources or scored resources) that pass every eligibility check."""
    return [
        item for item in items
        if _is_visible(_resource_of(item), exclude_ids, hide_premium)
    ]


def select_response(
    items: Sequence[T],
    exclude_ids: AbstractSet[int],
    limit: int,
    hide_premium: bool = False,
) -> List[T]:
    """Apply per-call exclusions, then truncate to limit."""
    return filter_visible(items, exclude_ids, hide_premium)[: max(0, limit)]
