"""
Analysis Store abstraction.

Supplies the analysis record (query and result text) a recommendation request
may be scoped to. Missing analyses yield None, never an exception.
"""

from typing import Any, Dict, Optional, Protocol


class AnalysisStore(Protocol):
    """Protocol for analysis lookup."""

    async def get_analysis(self, analysis_id: int) -> Optional[Dict[str, Any]]:
        """Return the analysis record ({"query": ..., "result": ...}) or None."""
        ...


class InMemoryAnalysisStore:
    """Analysis store backed by a dict of analysis_id -> record."""

    def __init__(self, analyses: Optional[Dict[int, Dict[str, Any]]] = None):
        self._analyses: Dict[int, Dict[str, Any]] = dict(analyses or {})

    def add(self, analysis_id: int, record: Dict[str, Any]) -> None:
        self._analyses[analysis_id] = record

    async def get_analysis(self, analysis_id: int) -> Optional[Dict[str, Any]]:
        return self._analyses.get(analysis_id)
