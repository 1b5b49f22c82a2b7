"""
Collaborative filtering: user-based k-nearest neighbours with Jaccard similarity.

1. Candidate neighbours: users who interacted with >= min_overlap of the
   target user's resources, top similar_user_limit by raw overlap count.
2. Each neighbour's full interacted set (bookmarks + accesses) is compared
   with the target user's set; neighbours below min_similarity_threshold drop out.
3. Score for a resource = similarity mass of neighbours who interacted with it
   / similarity mass of all qualifying neighbours.

No interaction history (cold start) or no qualifying neighbours: every score is 0.
"""

import logging
from dataclasses import dataclass
from typing import AbstractSet, Dict, FrozenSet, List, Sequence, Tuple

from ..models.config import DEFAULT_CONFIG, RecommendationConfig
from ..services.fetch import gather_all, guarded
from ..services.interaction_store import InteractionStore
from ..utils.similarity import jaccard_similarity

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SimilarUser:
    """A neighbour with its Jaccard similarity to the target user."""

    user_id: int
    similarity: float
    resource_ids: FrozenSet[int]


def _rank_candidate_neighbours(
    candidates: Sequence[Tuple[int, int]],
    user_id: int,
    config: RecommendationConfig,
) -> List[Tuple[int, int]]:
    """Drop the user itself and low-overlap rows; keep the top by overlap count."""
    rows = [
        (uid, overlap) for uid, overlap in candidates
        if uid != user_id and overlap >= config.min_overlap
    ]
    rows.sort(key=lambda row: row[1], reverse=True)
    return rows[: config.similar_user_limit]


def select_similar_users(
    interacted_ids: AbstractSet[int],
    neighbour_histories: Dict[int, AbstractSet[int]],
    config: RecommendationConfig = DEFAULT_CONFIG,
) -> List[SimilarUser]:
    """Neighbours whose Jaccard similarity reaches the threshold, most similar first."""
    if not interacted_ids:
        return []
    similar = []
    for uid, history in neighbour_histories.items():
        similarity = jaccard_similarity(interacted_ids, history)
        if similarity >= config.min_similarity_threshold:
            similar.append(SimilarUser(uid, similarity, frozenset(history)))
    similar.sort(key=lambda u: u.similarity, reverse=True)
    return similar


def collaborative_score(resource_id: int, similar_users: Sequence[SimilarUser]) -> float:
    """Share of neighbour similarity mass that interacted with resource_id (0–1)."""
    total_weight = sum(u.similarity for u in similar_users)
    if total_weight <= 0:
        return 0.0
    weighted = sum(u.similarity for u in similar_users if resource_id in u.resource_ids)
    return weighted / total_weight


async def interacted_resource_ids(store: InteractionStore, user_id: int) -> List[int]:
    """Bookmarked then accessed resource ids, deduplicated, most recent first within each."""
    bookmarked, accessed = await gather_all(
        guarded("get_bookmarked_resource_ids", store.get_bookmarked_resource_ids(user_id)),
        guarded("get_accessed_resource_ids", store.get_accessed_resource_ids(user_id)),
    )
    return list(dict.fromkeys(list(bookmarked) + list(accessed)))


async def find_similar_users(
    user_id: int,
    interacted_ids: AbstractSet[int],
    store: InteractionStore,
    config: RecommendationConfig = DEFAULT_CONFIG,
) -> List[SimilarUser]:
    """
    Build the target user's neighbourhood from the interaction store.

    Neighbour histories are fetched concurrently; any fetch failure raises
    DataFetchError and cancels the remaining lookups.
    """
    if not interacted_ids:
        logger.info("[collab] COLD_START user_id=%s", user_id)
        return []

    candidates = await guarded(
        "find_users_who_accessed",
        store.find_users_who_accessed(
            sorted(interacted_ids),
            exclude_user_id=user_id,
            min_overlap=config.min_overlap,
            limit=config.similar_user_limit,
        ),
    )
    ranked = _rank_candidate_neighbours(candidates, user_id, config)
    if not ranked:
        logger.info("[collab] NO_SIMILAR_USERS user_id=%s", user_id)
        return []

    histories = await gather_all(
        *(interacted_resource_ids(store, uid) for uid, _ in ranked)
    )
    similar = select_similar_users(
        interacted_ids,
        {uid: frozenset(history) for (uid, _), history in zip(ranked, histories)},
        config,
    )
    logger.info(
        "[collab] NEIGHBOURHOOD user_id=%s candidates=%s qualifying=%s",
        user_id, len(ranked), len(similar),
    )
    return similar
