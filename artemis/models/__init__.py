"""Data models for datasets, match candidates, and resolution results."""

from artemis.models.pathway import (
    ColumnRole,
    ResolutionStatus,
    Dataset,
    Pathway,
    MatchCandidate,
    ResolutionResult,
)

__all__ = [
    "ColumnRole",
    "ResolutionStatus",
    "Dataset",
    "Pathway",
    "MatchCandidate",
    "ResolutionResult",
]
