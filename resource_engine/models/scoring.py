"""
Scoring model — ScoredResource and the factor names used in score breakdowns.

Scores are on the 0–1 scale everywhere inside the engine; percentage converts
to 0–100 for callers that display match strength.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .resource import Resource

# Step matching factors
PHASE_MATCH = "phase_match"
IDEA_TYPE_MATCH = "idea_type_match"
KEYWORD_SIMILARITY = "keyword_similarity"
EXPERIENCE_MATCH = "experience_match"
POPULARITY_BOOST = "popularity_boost"

# Recommendation factors
COLLABORATIVE = "collaborative"
CONTENT_BASED = "content_based"
POPULARITY = "popularity"
DIVERSITY = "diversity"

REASON_COLLABORATIVE = "Users like you also viewed this"
REASON_CONTENT = "Similar to resources you've used"
REASON_POPULARITY = "Popular in your category"
REASON_DEFAULT = "Recommended for you"


class ScoredResource(BaseModel):
    """A resource with its combined score and per-factor sub-scores (all 0–1)."""

    model_config = ConfigDict(frozen=True)

    resource: Resource
    score: float
    score_breakdown: Dict[str, float] = Field(default_factory=dict)
    weights: Dict[str, float] = Field(default_factory=dict)
    reason: Optional[str] = None

    @property
    def resource_id(self) -> int:
        return self.resource.id

    @property
    def percentage(self) -> int:
        """Score on the 0–100 scale."""
        return int(round(self.score * 100))

    @property
    def weighted_breakdown(self) -> Dict[str, float]:
        """Contribution of each factor to score (sub-score x weight)."""
        return {
            name: value * self.weights.get(name, 0.0)
            for name, value in self.score_breakdown.items()
        }


def sort_by_score(scored: List[ScoredResource]) -> List[ScoredResource]:
    """Stable descending sort by score; ties keep candidate order."""
    return sorted(scored, key=lambda s: s.score, reverse=True)
