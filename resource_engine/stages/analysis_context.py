"""
Infer phase and idea type from an analysis record.

Simple keyword heuristics on the analysis query; first matching rule wins and
the defaults (research, software) apply when nothing matches.
"""

import re
from typing import Any, Dict, List, Optional, Pattern, Tuple

from ..models.context import AnalysisContext
from ..models.resource import IdeaType, Phase

PHASE_RULES: List[Tuple[Phase, Pattern]] = [
    (Phase.RESEARCH, re.compile(r"\b(research|market(?!place))")),
    (Phase.VALIDATION, re.compile(r"\b(validat|test)")),
    (Phase.DEVELOPMENT, re.compile(r"\b(build|develop)")),
    (Phase.LAUNCH, re.compile(r"\blaunch")),
]

IDEA_TYPE_RULES: List[Tuple[IdeaType, Pattern]] = [
    (IdeaType.SOFTWARE, re.compile(r"\b(software|apps?|saas|platform)\b")),
    (IdeaType.PHYSICAL_PRODUCT, re.compile(r"\b(physical|product)")),
    (IdeaType.SERVICE, re.compile(r"\b(service|consult)")),
    (IdeaType.MARKETPLACE, re.compile(r"\bmarketplace")),
]

DEFAULT_PHASE = Phase.RESEARCH
DEFAULT_IDEA_TYPE = IdeaType.SOFTWARE


def infer_phase(query: str) -> Phase:
    text = (query or "").lower()
    for phase, pattern in PHASE_RULES:
        if pattern.search(text):
            return phase
    return DEFAULT_PHASE


def infer_idea_type(query: str) -> IdeaType:
    text = (query or "").lower()
    for idea_type, pattern in IDEA_TYPE_RULES:
        if pattern.search(text):
            return idea_type
    return DEFAULT_IDEA_TYPE


def build_analysis_context(analysis: Optional[Dict[str, Any]]) -> Optional[AnalysisContext]:
    """AnalysisContext for an analysis record; None when the record is missing."""
    if not analysis:
        return None
    query = str(analysis.get("query") or "")
    return AnalysisContext(
        phase=infer_phase(query),
        idea_type=infer_idea_type(query),
    )
