"""
Engine error taxonomy.

Scorers never raise for missing attributes (they return neutral values); these
exceptions cover collaborator I/O failures and invalid weight configuration.
"""

from typing import Optional


class ResourceEngineError(Exception):
    """Base class for errors raised by the resource engine."""


class DataFetchError(ResourceEngineError):
    """A catalog / interaction-history / analysis collaborator call failed."""

    def __init__(self, operation: str, detail: Optional[str] = None):
        self.operation = operation
        self.detail = detail
        message = f"{operation} failed"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class InvalidWeightConfiguration(ResourceEngineError, ValueError):
    """A weight group does not sum to 1.0."""
