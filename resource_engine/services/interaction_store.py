"""
Interaction Store abstraction.

Supplies bookmarks and access history (views, downloads, external links) for
collaborative filtering, content history, and trending. The store owns the
append-only history; the engine only reads it.
"""

from collections import Counter, defaultdict
from datetime import datetime, timezone
from typing import Dict, List, Optional, Protocol, Sequence, Tuple, Union

from ..models.interaction import InteractionRecord, ensure_interactions


class InteractionStore(Protocol):
    """Protocol for read access to bookmarks and resource access history."""

    async def get_bookmarked_resource_ids(self, user_id: int) -> List[int]:
        """Resource ids the user bookmarked, newest first, no duplicates."""
        ...

    async def get_accessed_resource_ids(self, user_id: int) -> List[int]:
        """Resource ids the user accessed, newest first, no duplicates."""
        ...

    async def find_users_who_accessed(
        self,
        resource_ids: Sequence[int],
        exclude_user_id: int,
        min_overlap: int = 2,
        limit: int = 20,
    ) -> List[Tuple[int, int]]:
        """
        Users (other than exclude_user_id) who accessed at least min_overlap of
        resource_ids, as (user_id, overlap_count) sorted by overlap descending.
        """
        ...

    async def get_most_accessed(
        self,
        since: Optional[datetime] = None,
        limit: int = 10,
    ) -> List[Tuple[int, int]]:
        """(resource_id, access_count) for accesses at or after since, most accessed first."""
        ...


class InMemoryInteractionStore:
    """
    Interaction store backed by in-memory access records and bookmarks.
    Used for local testing and scripts.
    """

    def __init__(
        self,
        interactions: Sequence[Union[Dict, InteractionRecord]] = (),
        bookmarks: Optional[Dict[int, Sequence[int]]] = None,
    ):
        self._records: List[InteractionRecord] = ensure_interactions(list(interactions))
        # user_id -> [(resource_id, bookmarked_at)]
        self._bookmarks: Dict[int, List[Tuple[int, datetime]]] = defaultdict(list)
        for user_id, resource_ids in (bookmarks or {}).items():
            for resource_id in resource_ids:
                self.add_bookmark(user_id, resource_id)

    def record_access(self, record: Union[Dict, InteractionRecord]) -> InteractionRecord:
        typed = ensure_interactions([record])[0]
        self._records.append(typed)
        return typed

    def add_bookmark(
        self,
        user_id: int,
        resource_id: int,
        timestamp: Optional[datetime] = None,
    ) -> None:
        self._bookmarks[user_id].append(
            (resource_id, timestamp or datetime.now(timezone.utc))
        )

    def _accessed_by(self, user_id: int) -> List[InteractionRecord]:
        return [r for r in self._records if r.user_id == user_id]

    async def get_bookmarked_resource_ids(self, user_id: int) -> List[int]:
        entries = sorted(self._bookmarks.get(user_id, []), key=lambda e: e[1], reverse=True)
        return _unique([resource_id for resource_id, _ in entries])

    async def get_accessed_resource_ids(self, user_id: int) -> List[int]:
        records = sorted(self._accessed_by(user_id), key=lambda r: r.timestamp, reverse=True)
        return _unique([r.resource_id for r in records])

    async def find_users_who_accessed(
        self,
        resource_ids: Sequence[int],
        exclude_user_id: int,
        min_overlap: int = 2,
        limit: int = 20,
    ) -> List[Tuple[int, int]]:
        wanted = set(resource_ids)
        seen_by_user: Dict[int, set] = defaultdict(set)
        for r in self._records:
            if r.user_id != exclude_user_id and r.resource_id in wanted:
                seen_by_user[r.user_id].add(r.resource_id)
        overlaps = [
            (user_id, len(seen))
            for user_id, seen in seen_by_user.items()
            if len(seen) >= min_overlap
        ]
        overlaps.sort(key=lambda pair: (-pair[1], pair[0]))
        return overlaps[:limit]

    async def get_most_accessed(
        self,
        since: Optional[datetime] = None,
        limit: int = 10,
    ) -> List[Tuple[int, int]]:
        counts = Counter(
            r.resource_id for r in self._records
            if since is None or r.timestamp >= since
        )
        return counts.most_common(limit)


def _unique(ids: List[int]) -> List[int]:
    seen = set()
    out = []
    for i in ids:
        if i not in seen:
            seen.add(i)
            out.append(i)
    return out
