"""
Data models for audience pathway resolution.

This module defines the core data structures used throughout the Artemis agent:
- ColumnRole and ResolutionStatus enums for type safety
- Dataset for the header row and data rows fetched from the audience sheet
- MatchCandidate for a single scored row
- Pathway for the Category → Grouping → Demographic result unit
- ResolutionResult for the complete outcome of one query
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Dict, List, Any


PATHWAY_SEPARATOR = " → "


class ColumnRole(Enum):
    """Semantic purpose of a dataset column, matched against header names."""
    CATEGORY = "category"
    GROUPING = "grouping"
    DEMOGRAPHIC = "demographic"
    DESCRIPTION = "description"

    @property
    def label(self) -> str:
        """Human-readable role name (e.g. "Demographic")."""
        return self.value.capitalize()


class ResolutionStatus(Enum):
    """Outcome of a resolution call."""
    MATCHED = "matched"
    NO_MATCH = "no_match"
    MISSING_COLUMNS = "missing_columns"
    NO_DATA = "no_data"
    FETCH_ERROR = "fetch_error"


@dataclass
class Dataset:
    """
    Header row plus data rows from the audience curation sheet.

    Rows may be shorter than the header (the Sheets API drops trailing empty
    cells); use cell() to read them safely.
    """
    headers: List[str]
    rows: List[List[str]] = field(default_factory=list)

    @classmethod
    def from_values(cls, values: Optional[List[List[Any]]]) -> "Dataset":
        """
        Build a Dataset from a raw values grid whose first row is the header.

        Args:
            values: Grid as returned by the Sheets API or a CSV reader

        Returns:
            Dataset (empty headers and rows if values is empty)
        """
        if not values:
            return cls(headers=[], rows=[])

        headers = ["" if h is None else str(h) for h in values[0]]
        rows = [
            ["" if cell is None else str(cell) for cell in row]
            for row in values[1:]
        ]
        return cls(headers=headers, rows=rows)

    @property
    def is_empty(self) -> bool:
        """True when there are no data rows."""
        return len(self.rows) == 0

    def cell(self, row: List[str], column_index: int) -> str:
        """Return a cell value, or empty string if the row is short."""
        if column_index < len(row):
            return row[column_index] or ""
        return ""


@dataclass
class Pathway:
    """Resolved targeting triple presented to the end user."""
    category: str
    grouping: str
    demographic: str

    def render(self) -> str:
        """Render as 'Category → Grouping → Demographic'."""
        return PATHWAY_SEPARATOR.join([self.category, self.grouping, self.demographic])

    def to_dict(self) -> Dict[str, str]:
        return {
            "category": self.category,
            "grouping": self.grouping,
            "demographic": self.demographic,
            "pathway": self.render(),
        }

    def __str__(self) -> str:
        return self.render()


@dataclass
class MatchCandidate:
    """
    A row considered a possible match for the query.

    Pathway values are always read from their own columns, regardless of which
    column produced the match.
    """
    category: str
    grouping: str
    demographic: str
    description: str
    matched_text: str
    matched_column: Optional[ColumnRole]
    score: float
    row_position: int  # 0-based index into Dataset.rows
    match_details: List[str] = field(default_factory=list)

    @property
    def sheet_row(self) -> int:
        """1-based spreadsheet row number (header occupies row 1)."""
        return self.row_position + 2

    @property
    def pathway(self) -> Pathway:
        return Pathway(
            category=self.category,
            grouping=self.grouping,
            demographic=self.demographic,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "category": self.category,
            "grouping": self.grouping,
            "demographic": self.demographic,
            "description": self.description,
            "pathway": self.pathway.render(),
            "matchedText": self.matched_text,
            "matchedColumn": self.matched_column.label if self.matched_column else "none",
            "score": self.score,
            "row": self.sheet_row,
            "matchDetails": list(self.match_details),
        }


@dataclass
class ResolutionResult:
    """
    Complete outcome of resolving one query against one dataset.

    Structural dataset problems (missing columns, no rows) and upstream fetch
    failures are reported through status rather than raised.
    """
    status: ResolutionStatus
    query: str
    profile: str = "column_priority"
    matched_column: Optional[ColumnRole] = None
    searched_columns: List[ColumnRole] = field(default_factory=list)
    matches: List[MatchCandidate] = field(default_factory=list)
    pathways: List[Pathway] = field(default_factory=list)
    confidence: Optional[str] = None
    total_matches: int = 0
    missing_columns: List[str] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)
    message: str = ""
    response: str = ""

    @property
    def success(self) -> bool:
        """
        Whether the query was answered.

        A clean "no matches" outcome still counts as success; only structural
        and upstream problems do not.
        """
        return self.status in (ResolutionStatus.MATCHED, ResolutionStatus.NO_MATCH)

    @property
    def has_matches(self) -> bool:
        return self.status == ResolutionStatus.MATCHED

    @property
    def top_match(self) -> Optional[MatchCandidate]:
        return self.matches[0] if self.matches else None

    @property
    def top_score(self) -> float:
        return self.matches[0].score if self.matches else 0.0

    def rendered_pathways(self) -> List[str]:
        return [pathway.render() for pathway in self.pathways]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the tool payload handed back to the agent runtime."""
        top = self.top_match
        return {
            "success": self.success,
            "status": self.status.value,
            "query": self.query,
            "profile": self.profile,
            "matchedColumn": self.matched_column.label if self.matched_column else "none",
            "searchedColumns": [role.label for role in self.searched_columns],
            "pathways": self.rendered_pathways(),
            "confidence": self.confidence,
            "topMatch": top.to_dict() if top else None,
            "allMatches": [match.to_dict() for match in self.matches],
            "totalMatches": self.total_matches,
            "missingColumns": list(self.missing_columns),
            "suggestions": list(self.suggestions),
            "message": self.message,
            "response": self.response,
        }

    def __str__(self) -> str:
        return (
            f"ResolutionResult(status={self.status.value}, "
            f"query={self.query!r}, "
            f"column={self.matched_column.label if self.matched_column else 'none'}, "
            f"pathways={len(self.pathways)}, "
            f"confidence={self.confidence})"
        )
