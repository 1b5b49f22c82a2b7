"""
Resource Catalog abstraction.

Supplies candidate pools and resource lookups to the engine. The catalog is
owned by an external store; the engine only reads it.
Implementations: in-memory (tests, scripts, JSON fixtures).
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, FrozenSet, List, Optional, Protocol, Sequence, Union

from ..models.resource import Resource, ensure_resources

SORT_RATING = "rating"
SORT_POPULAR = "popular"
SORT_RECENT = "recent"


@dataclass(frozen=True)
class CandidateFilter:
    """Filters applied by the catalog when fetching active candidates."""

    exclude_premium: bool = False
    exclude_ids: FrozenSet[int] = field(default_factory=frozenset)


class ResourceCatalog(Protocol):
    """Protocol for read-only catalog access."""

    async def find_active_candidates(
        self,
        filters: CandidateFilter,
        sort_by: str = SORT_RATING,
        limit: int = 200,
    ) -> List[Resource]:
        """
        Return up to limit active resources matching filters, sorted by sort_by
        (descending).
        """
        ...

    async def find_by_ids(self, ids: Sequence[int]) -> List[Resource]:
        """Return resources for ids, in the order of ids; unknown ids are skipped."""
        ...

    async def find_by_id(self, resource_id: int) -> Optional[Resource]:
        """Get one resource by id, or None."""
        ...


class InMemoryResourceCatalog:
    """
    Catalog backed by a list of resources held in memory.
    Used for local testing, scripts, and JSON fixtures.
    """

    def __init__(self, resources: Sequence[Union[Dict, Resource]] = ()):
        self._resources: List[Resource] = ensure_resources(list(resources))
        self._by_id: Dict[int, Resource] = {r.id: r for r in self._resources}

    @classmethod
    def from_json(cls, path: Union[Path, str]) -> "InMemoryResourceCatalog":
        """Load a catalog from a JSON list of resource records (camelCase or snake_case)."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Resources JSON not found: {path}")
        with open(path) as f:
            return cls(json.load(f))

    @property
    def resources(self) -> List[Resource]:
        return list(self._resources)

    def add(self, resource: Union[Dict, Resource]) -> Resource:
        typed = ensure_resources([resource])[0]
        self._resources = [r for r in self._resources if r.id != typed.id] + [typed]
        self._by_id[typed.id] = typed
        return typed

    async def find_active_candidates(
        self,
        filters: CandidateFilter,
        sort_by: str = SORT_RATING,
        limit: int = 200,
    ) -> List[Resource]:
        candidates = [
            r for r in self._resources
            if r.is_active
            and r.id not in filters.exclude_ids
            and not (filters.exclude_premium and r.is_premium)
        ]
        if sort_by == SORT_POPULAR:
            candidates.sort(key=lambda r: r.view_count, reverse=True)
        elif sort_by == SORT_RECENT:
            candidates.sort(key=lambda r: r.id, reverse=True)
        else:
            candidates.sort(key=lambda r: r.average_rating, reverse=True)
        return candidates[:limit]

    async def find_by_ids(self, ids: Sequence[int]) -> List[Resource]:
        return [self._by_id[i] for i in ids if i in self._by_id]

    async def find_by_id(self, resource_id: int) -> Optional[Resource]:
        return self._by_id.get(resource_id)
