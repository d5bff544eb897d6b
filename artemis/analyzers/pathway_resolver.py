"""
Column-prioritized pathway resolver.

This module implements the core matching logic that turns a free-text audience
description into a ranked list of Category → Grouping → Demographic pathways.
Columns are searched one at a time in priority order (Description, Demographic,
Grouping, Category) and the first column that yields a relevant row wins.
"""

from typing import Dict, List, Optional, Tuple

from artemis.analyzers.match_scorer import MatchScorer, PhraseOverlapScorer
from artemis.models.pathway import (
    ColumnRole,
    Dataset,
    MatchCandidate,
    ResolutionResult,
    ResolutionStatus,
)


REQUIRED_ROLES = [
    ColumnRole.CATEGORY,
    ColumnRole.GROUPING,
    ColumnRole.DEMOGRAPHIC,
    ColumnRole.DESCRIPTION,
]

NO_MATCH_SUGGESTIONS = [
    "Try broader search terms",
    "Describe the audience by interest or behavior (e.g. \"car enthusiasts\")",
    "Use demographic categories like \"age\", \"income\", \"household\"",
]

NO_DATA_SUGGESTIONS = [
    "Verify the sheet range contains the header row and data",
    "Check that GOOGLE_SHEET_ID points at the audience curation sheet",
]

MISSING_COLUMN_SUGGESTIONS = [
    "Make sure the header row names Category, Grouping, Demographic and Description columns",
]


def resolve_columns(headers: List[str]) -> Tuple[Dict[ColumnRole, int], List[str]]:
    """
    Map each required role to a column index by header name.

    A role resolves to the first header whose lowercased text contains the
    role name. When several headers qualify (e.g. "Sub-Category" before
    "Category") the leftmost one wins.

    Args:
        headers: Header row of the dataset

    Returns:
        Tuple of (role -> column index, labels of roles that did not resolve)
    """
    lowered = [(header or "").lower() for header in headers]
    columns: Dict[ColumnRole, int] = {}
    missing: List[str] = []

    for role in REQUIRED_ROLES:
        index = next(
            (i for i, header in enumerate(lowered) if role.value in header),
            None
        )
        if index is None:
            missing.append(role.label)
        else:
            columns[role] = index

    return columns, missing


class PathwayResolver:
    """
    Resolve audience queries into targeting pathways.

    Relevance tiers (from the scorer, 0-100):
    - Candidate: score >= 30
    - Confidence High: top score >= 80
    - Confidence Medium: top score >= 60
    - Confidence Low: anything else
    """

    profile = "column_priority"

    # Minimum relevance for a row to become a candidate
    MIN_SCORE = 30.0

    # Confidence label thresholds, applied to the top candidate's score
    HIGH_CONFIDENCE = 80.0
    MEDIUM_CONFIDENCE = 60.0

    # Number of pathways returned to the caller
    MAX_RESULTS = 3

    # Columns are searched in this order; the first non-empty one wins
    SEARCH_ORDER = [
        ColumnRole.DESCRIPTION,
        ColumnRole.DEMOGRAPHIC,
        ColumnRole.GROUPING,
        ColumnRole.CATEGORY,
    ]

    def __init__(
        self,
        scorer: Optional[MatchScorer] = None,
        min_score: float = MIN_SCORE,
        max_results: int = MAX_RESULTS
    ):
        """
        Initialize resolver.

        Args:
            scorer: Relevance scorer (default PhraseOverlapScorer)
            min_score: Minimum score for a row to be a candidate
            max_results: Maximum number of pathways to return
        """
        self.scorer = scorer or PhraseOverlapScorer()
        self.min_score = min_score
        self.max_results = max_results

    def resolve(self, query: str, dataset: Dataset) -> ResolutionResult:
        """
        Resolve a query against a freshly fetched dataset.

        Args:
            query: Free-text audience description
            dataset: Header row plus data rows

        Returns:
            ResolutionResult with status MATCHED, NO_MATCH, MISSING_COLUMNS
            or NO_DATA

        Raises:
            ValueError: If the query is empty after trimming
        """
        query = self._clean_query(query)

        problem = self._check_dataset(query, dataset)
        if problem is not None:
            return problem
        columns, _ = resolve_columns(dataset.headers)

        searched: List[ColumnRole] = []
        for role in self.SEARCH_ORDER:
            searched.append(role)
            candidates = self.search_column(query, dataset, columns, role)
            if candidates:
                return self._build_matched_result(query, role, searched, candidates)

        return self._build_no_match_result(query, searched)

    def search_column(
        self,
        query: str,
        dataset: Dataset,
        columns: Dict[ColumnRole, int],
        role: ColumnRole
    ) -> List[MatchCandidate]:
        """
        Score every row of one column and keep those above the threshold.

        Args:
            query: Cleaned query
            dataset: Dataset to scan
            columns: Resolved role -> column index mapping
            role: Column role to search

        Returns:
            Candidates in row order (unsorted)
        """
        column_index = columns[role]
        candidates = []

        for position, row in enumerate(dataset.rows):
            text = dataset.cell(row, column_index)
            if not text.strip():
                continue

            score = self.scorer.score(text, query)
            if score < self.min_score:
                continue

            details = [
                f"{detail} in {role.label}"
                for detail in self.scorer.explain(text, query)
            ]
            candidates.append(self._make_candidate(
                dataset, row, columns, position,
                matched_text=text,
                matched_column=role,
                score=score,
                match_details=details
            ))

        return candidates

    def rank(self, candidates: List[MatchCandidate]) -> List[MatchCandidate]:
        """Sort by score descending; ties keep row order."""
        return sorted(candidates, key=lambda candidate: -candidate.score)

    def classify_confidence(self, top_score: float) -> str:
        """
        Label confidence from the top candidate's score.

        Returns:
            "High" | "Medium" | "Low"
        """
        if top_score >= self.HIGH_CONFIDENCE:
            return "High"
        elif top_score >= self.MEDIUM_CONFIDENCE:
            return "Medium"
        else:
            return "Low"

    def summarize(self, result: ResolutionResult, focus: str = "") -> str:
        """One-line summary of a matched result, e.g. for the audit trail."""
        return (
            f"Found {len(result.pathways)} pathway(s) for \"{result.query}\"{focus}. "
            f"Top match has score {result.top_score:.0f}."
        )

    def generate_response(self, result: ResolutionResult) -> str:
        """
        Generate the human-readable answer relayed to the end user.

        Args:
            result: Output from resolve()

        Returns:
            Formatted response text
        """
        if result.status == ResolutionStatus.MATCHED:
            where = (
                f"the {result.matched_column.label} column"
                if result.matched_column else "all columns"
            )
            lines = [
                f"🎯 Found {len(result.pathways)} targeting pathway(s) for "
                f"\"{result.query}\" (matched on {where}, "
                f"{result.confidence} confidence):"
            ]
            for i, pathway in enumerate(result.pathways, 1):
                lines.append(f"{i}. {pathway.render()}")
            return "\n".join(lines)

        if result.status == ResolutionStatus.NO_MATCH:
            searched = ", ".join(
                role.label for role in result.searched_columns
            ) or "all columns"
            return (
                f"No relevant pathways found for \"{result.query}\" "
                f"(searched: {searched}).\n"
                + "\n".join(f"• {s}" for s in result.suggestions)
            )

        return f"⚠️ {result.message}"

    def to_dict(self) -> Dict[str, object]:
        """Export resolver configuration."""
        return {
            "profile": self.profile,
            "min_score": self.min_score,
            "max_results": self.max_results,
            "high_confidence": self.HIGH_CONFIDENCE,
            "medium_confidence": self.MEDIUM_CONFIDENCE,
            "search_order": [role.label for role in self.SEARCH_ORDER],
            "scorer": self.scorer.to_dict(),
        }

    # =================
    # Internal helpers
    # =================

    def _clean_query(self, query: str) -> str:
        cleaned = (query or "").strip()
        if not cleaned:
            raise ValueError("Query must not be empty")
        return cleaned

    def _check_dataset(self, query: str, dataset: Dataset) -> Optional[ResolutionResult]:
        """Return a NO_DATA / MISSING_COLUMNS result, or None if usable."""
        if not dataset.headers:
            return self._build_no_data_result(query)

        _, missing = resolve_columns(dataset.headers)
        if missing:
            result = ResolutionResult(
                status=ResolutionStatus.MISSING_COLUMNS,
                query=query,
                profile=self.profile,
                missing_columns=missing,
                suggestions=list(MISSING_COLUMN_SUGGESTIONS),
                message=f"Missing required columns: {', '.join(missing)}",
            )
            result.response = self.generate_response(result)
            return result

        if dataset.is_empty:
            return self._build_no_data_result(query)

        return None

    def _make_candidate(
        self,
        dataset: Dataset,
        row: List[str],
        columns: Dict[ColumnRole, int],
        position: int,
        matched_text: str,
        matched_column: Optional[ColumnRole],
        score: float,
        match_details: List[str]
    ) -> MatchCandidate:
        return MatchCandidate(
            category=dataset.cell(row, columns[ColumnRole.CATEGORY]),
            grouping=dataset.cell(row, columns[ColumnRole.GROUPING]),
            demographic=dataset.cell(row, columns[ColumnRole.DEMOGRAPHIC]),
            description=dataset.cell(row, columns[ColumnRole.DESCRIPTION]),
            matched_text=matched_text,
            matched_column=matched_column,
            score=score,
            row_position=position,
            match_details=match_details,
        )

    def _build_matched_result(
        self,
        query: str,
        role: Optional[ColumnRole],
        searched: List[ColumnRole],
        candidates: List[MatchCandidate]
    ) -> ResolutionResult:
        ranked = self.rank(candidates)
        top = ranked[:self.max_results]
        result = ResolutionResult(
            status=ResolutionStatus.MATCHED,
            query=query,
            profile=self.profile,
            matched_column=role,
            searched_columns=list(searched),
            matches=ranked,
            pathways=[candidate.pathway for candidate in top],
            confidence=self.classify_confidence(ranked[0].score),
            total_matches=len(ranked),
        )
        result.message = self.summarize(result)
        result.response = self.generate_response(result)
        return result

    def _build_no_match_result(self, query: str, searched: List[ColumnRole]) -> ResolutionResult:
        result = ResolutionResult(
            status=ResolutionStatus.NO_MATCH,
            query=query,
            profile=self.profile,
            searched_columns=list(searched),
            suggestions=list(NO_MATCH_SUGGESTIONS),
            message=(
                f"No relevant data found for \"{query}\". "
                f"Try different search terms or check the sheet contents."
            ),
        )
        result.response = self.generate_response(result)
        return result

    def _build_no_data_result(self, query: str) -> ResolutionResult:
        result = ResolutionResult(
            status=ResolutionStatus.NO_DATA,
            query=query,
            profile=self.profile,
            suggestions=list(NO_DATA_SUGGESTIONS),
            message="No data found in the Google Sheet",
        )
        result.response = self.generate_response(result)
        return result
