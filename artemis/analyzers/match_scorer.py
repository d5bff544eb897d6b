"""
Match scorers for query-to-cell relevance.

A scorer turns (cell text, query) into a relevance score from 0 to 100. The
resolver only depends on the MatchScorer interface, so the ranking function
can be swapped without touching the column search logic:
- PhraseOverlapScorer: exact phrase (100) or proportional word overlap (x80)
- EditDistanceScorer: same shape, but words match on Levenshtein similarity
  so typos like "enthusiast" vs "enthusiats" still count
"""

import re
from typing import Dict, List
from Levenshtein import distance as levenshtein_distance


class MatchScorer:
    """
    Base interface for relevance scorers.

    Subclasses implement score() and may override explain().
    """

    # Score awarded when the cell contains the whole query
    EXACT_PHRASE_SCORE = 100.0

    # Maximum score for partial (word-level) matches
    WORD_OVERLAP_WEIGHT = 80.0

    # Words this short or shorter are ignored ("a", "of", "in", ...)
    MIN_WORD_LENGTH = 3

    name = "base"

    def score(self, cell_text: str, query: str) -> float:
        """
        Score how well a cell matches the query.

        Args:
            cell_text: Raw cell value from the dataset
            query: Free-text user query

        Returns:
            Score from 0.0 (no match) to 100.0 (exact phrase match)
        """
        raise NotImplementedError

    def explain(self, cell_text: str, query: str) -> List[str]:
        """Describe why a cell scored the way it did."""
        return []

    def qualifying_words(self, query: str) -> List[str]:
        """Lowercased query words long enough to take part in scoring."""
        return [
            word for word in query.lower().split()
            if len(word) >= self.MIN_WORD_LENGTH
        ]

    def to_dict(self) -> Dict[str, object]:
        """Export scorer configuration."""
        return {
            "name": self.name,
            "exact_phrase_score": self.EXACT_PHRASE_SCORE,
            "word_overlap_weight": self.WORD_OVERLAP_WEIGHT,
            "min_word_length": self.MIN_WORD_LENGTH,
        }


class PhraseOverlapScorer(MatchScorer):
    """
    Exact-phrase and word-overlap scorer.

    - Cell contains the full query: 100
    - Otherwise: (matched words / qualifying words) x 80, where a word matches
      when it appears anywhere in the cell as a substring
    - No qualifying words, or none match: 0
    """

    name = "phrase_overlap"

    def score(self, cell_text: str, query: str) -> float:
        cell = (cell_text or "").lower()
        phrase = (query or "").lower()

        if phrase and phrase in cell:
            return self.EXACT_PHRASE_SCORE

        words = self.qualifying_words(phrase)
        if not words:
            return 0.0

        matched = sum(1 for word in words if word in cell)
        if matched == 0:
            return 0.0

        return matched / len(words) * self.WORD_OVERLAP_WEIGHT

    def explain(self, cell_text: str, query: str) -> List[str]:
        cell = (cell_text or "").lower()
        phrase = (query or "").lower()

        if phrase and phrase in cell:
            return [f'Exact phrase "{phrase}" found']

        return [
            f'"{word}" found'
            for word in self.qualifying_words(phrase)
            if word in cell
        ]


class EditDistanceScorer(MatchScorer):
    """
    Typo-tolerant scorer based on Levenshtein similarity.

    A query word matches when some word of the cell has similarity
    1 - (edit_distance / max_length) at or above word_similarity.
    """

    name = "edit_distance"

    WORD_SIMILARITY = 0.8

    _TOKEN_PATTERN = re.compile(r"[a-z0-9]+")

    def __init__(self, word_similarity: float = WORD_SIMILARITY):
        """
        Initialize scorer.

        Args:
            word_similarity: Minimum per-word similarity (0.0 to 1.0)
        """
        if not 0.0 < word_similarity <= 1.0:
            raise ValueError(
                f"word_similarity must be in (0, 1], got {word_similarity}"
            )
        self.word_similarity = word_similarity

    def similarity(self, left: str, right: str) -> float:
        """Normalized Levenshtein similarity between two words."""
        if left == right:
            return 1.0

        max_len = max(len(left), len(right))
        if max_len == 0:
            return 1.0

        return max(0.0, 1.0 - levenshtein_distance(left, right) / max_len)

    def best_match(self, word: str, cell_tokens: List[str]) -> float:
        """Highest similarity between word and any cell token."""
        best = 0.0
        for token in cell_tokens:
            best = max(best, self.similarity(word, token))
            if best == 1.0:
                break
        return best

    def score(self, cell_text: str, query: str) -> float:
        cell = (cell_text or "").lower()
        phrase = (query or "").lower()

        if phrase and phrase in cell:
            return self.EXACT_PHRASE_SCORE

        words = self.qualifying_words(phrase)
        if not words:
            return 0.0

        cell_tokens = self._TOKEN_PATTERN.findall(cell)
        matched = sum(
            1 for word in words
            if self.best_match(word, cell_tokens) >= self.word_similarity
        )
        if matched == 0:
            return 0.0

        return matched / len(words) * self.WORD_OVERLAP_WEIGHT

    def explain(self, cell_text: str, query: str) -> List[str]:
        cell = (cell_text or "").lower()
        phrase = (query or "").lower()

        if phrase and phrase in cell:
            return [f'Exact phrase "{phrase}" found']

        cell_tokens = self._TOKEN_PATTERN.findall(cell)
        details = []
        for word in self.qualifying_words(phrase):
            similarity = self.best_match(word, cell_tokens)
            if similarity >= self.word_similarity:
                details.append(f'"{word}" matched ({similarity:.0%} similar)')
        return details

    def to_dict(self) -> Dict[str, object]:
        config = super().to_dict()
        config["word_similarity"] = self.word_similarity
        return config


SCORERS = {
    PhraseOverlapScorer.name: PhraseOverlapScorer,
    EditDistanceScorer.name: EditDistanceScorer,
}


def get_scorer(name: str) -> MatchScorer:
    """
    Build a scorer by name.

    Args:
        name: "phrase_overlap" or "edit_distance"

    Returns:
        New MatchScorer instance
    """
    try:
        return SCORERS[name]()
    except KeyError:
        raise ValueError(
            f"Unknown scorer '{name}'. Choose one of: {', '.join(SCORERS)}"
        ) from None
