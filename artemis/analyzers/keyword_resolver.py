"""
Global keyword resolver (alternate profile).

Scores every cell of every row instead of searching one column at a time, with
extra weight for location and demographic hints and a small boost for rows
that carry geographic or demographic data. Results are still reported as
pathways, so the four required columns must resolve.
"""

from typing import Dict, List, Optional

from artemis.analyzers.pathway_resolver import PathwayResolver, resolve_columns
from artemis.models.pathway import ColumnRole, Dataset, MatchCandidate, ResolutionResult


class KeywordResolver(PathwayResolver):
    """
    Point-based resolver across all columns.

    Points per cell:
    - Query word (length > 2) found: +5
    - Location word found: +8
    - Demographic word found: +8
    - Whole query found: +12

    Points per row:
    - Non-empty cell under a geographic header: +3
    - Non-empty cell under a demographic header: +3

    The earlier global-search tool kept any row with a positive score. Here
    a row only qualifies once a query, location or demographic term
    (or the whole query) matched one of its cells. Header boosts alone never
    make a row a candidate.
    """

    profile = "keyword"

    QUERY_TERM_POINTS = 5
    LOCATION_TERM_POINTS = 8
    DEMOGRAPHIC_TERM_POINTS = 8
    EXACT_PHRASE_POINTS = 12
    HEADER_BOOST_POINTS = 3

    GEO_KEYWORDS = ["city", "state", "zip", "county", "region", "area", "district"]
    DEMO_KEYWORDS = ["age", "income", "household", "population", "gender", "education"]

    # Points are unbounded, so confidence tiers differ from the 0-100 profile
    HIGH_CONFIDENCE = 30.0
    MEDIUM_CONFIDENCE = 15.0

    MAX_RESULTS = 5

    def __init__(self, max_results: int = MAX_RESULTS):
        super().__init__(min_score=0.0, max_results=max_results)

    def resolve(
        self,
        query: str,
        dataset: Dataset,
        location: Optional[str] = None,
        demographic: Optional[str] = None
    ) -> ResolutionResult:
        """
        Resolve a query by scoring every cell of every row.

        Args:
            query: Free-text audience description
            dataset: Header row plus data rows
            location: Optional geographic focus (e.g. "Austin Texas")
            demographic: Optional demographic focus (e.g. "age 25-34")

        Returns:
            ResolutionResult (matched_column is always None)
        """
        query = self._clean_query(query)

        problem = self._check_dataset(query, dataset)
        if problem is not None:
            return problem
        columns, _ = resolve_columns(dataset.headers)

        query_terms = self.qualifying_terms(query)
        location_terms = (location or "").lower().split()
        demographic_terms = (demographic or "").lower().split()
        boost = self.header_boosts(dataset.headers)

        candidates = []
        for position, row in enumerate(dataset.rows):
            candidate = self.score_row(
                query, dataset, row, columns, position,
                query_terms, location_terms, demographic_terms, boost
            )
            if candidate is not None:
                candidates.append(candidate)

        if not candidates:
            return self._build_no_match_result(query, [])

        result = self._build_matched_result(query, None, [], candidates)
        focus = self.focus_text(location, demographic)
        if focus:
            result.message = self.summarize(result, focus)
        return result

    def qualifying_terms(self, query: str) -> List[str]:
        return [term for term in query.lower().split() if len(term) > 2]

    def focus_text(self, location: Optional[str] = None, demographic: Optional[str] = None) -> str:
        """Summary suffix naming the focus that was scored, e.g. ' in Texas'."""
        text = ""
        if location and location.strip():
            text += f" in {location.strip()}"
        if demographic and demographic.strip():
            text += f" for {demographic.strip()} demographics"
        return text

    def to_dict(self) -> Dict[str, object]:
        """Export resolver configuration."""
        return {
            "profile": self.profile,
            "max_results": self.max_results,
            "high_confidence": self.HIGH_CONFIDENCE,
            "medium_confidence": self.MEDIUM_CONFIDENCE,
            "points": {
                "query_term": self.QUERY_TERM_POINTS,
                "location_term": self.LOCATION_TERM_POINTS,
                "demographic_term": self.DEMOGRAPHIC_TERM_POINTS,
                "exact_phrase": self.EXACT_PHRASE_POINTS,
                "header_boost": self.HEADER_BOOST_POINTS,
            },
            "geo_keywords": list(self.GEO_KEYWORDS),
            "demo_keywords": list(self.DEMO_KEYWORDS),
        }

    def header_boosts(self, headers: List[str]) -> Dict[int, int]:
        """Boost points earned by a non-empty cell, per column index."""
        boosts = {}
        for i, header in enumerate(headers):
            header_lower = (header or "").lower()
            points = 0
            if any(keyword in header_lower for keyword in self.GEO_KEYWORDS):
                points += self.HEADER_BOOST_POINTS
            if any(keyword in header_lower for keyword in self.DEMO_KEYWORDS):
                points += self.HEADER_BOOST_POINTS
            if points:
                boosts[i] = points
        return boosts

    def score_row(
        self,
        query: str,
        dataset: Dataset,
        row: List[str],
        columns: Dict[ColumnRole, int],
        position: int,
        query_terms: List[str],
        location_terms: List[str],
        demographic_terms: List[str],
        boost: Dict[int, int]
    ) -> Optional[MatchCandidate]:
        """
        Score one row; None if no term matched anywhere in it.

        Header boosts only add to rows that already matched a term.
        """
        phrase = query.lower()
        score = 0
        details = []

        for i, header in enumerate(dataset.headers):
            cell = dataset.cell(row, i).lower()
            if not cell:
                continue

            for term in query_terms:
                if term in cell:
                    score += self.QUERY_TERM_POINTS
                    details.append(f'"{term}" found in {header}')

            for term in location_terms:
                if term in cell:
                    score += self.LOCATION_TERM_POINTS
                    details.append(f'Location "{term}" found in {header}')

            for term in demographic_terms:
                if term in cell:
                    score += self.DEMOGRAPHIC_TERM_POINTS
                    details.append(f'Demographic "{term}" found in {header}')

            if phrase in cell:
                score += self.EXACT_PHRASE_POINTS
                details.append(f"Exact query match in {header}")

        if score == 0:
            return None

        for i, points in boost.items():
            if dataset.cell(row, i).strip():
                score += points

        description = dataset.cell(row, columns[ColumnRole.DESCRIPTION])
        return self._make_candidate(
            dataset, row, columns, position,
            matched_text=description,
            matched_column=None,
            score=float(score),
            match_details=details
        )
