"""
Unit tests for match scorers.

Tests exact phrase scoring, proportional word overlap, the short-word filter,
and the Levenshtein-based alternative.
"""

import pytest
from artemis.analyzers.match_scorer import (
    PhraseOverlapScorer,
    EditDistanceScorer,
    get_scorer,
)


CAR_DESCRIPTION = "Car enthusiasts interested in performance vehicles"


@pytest.fixture
def scorer():
    """Create PhraseOverlapScorer."""
    return PhraseOverlapScorer()


@pytest.fixture
def fuzzy_scorer():
    """Create EditDistanceScorer with default similarity."""
    return EditDistanceScorer()


class TestPhraseOverlapScorer:
    """Test the exact-phrase / word-overlap heuristic."""

    def test_exact_phrase_scores_100(self, scorer):
        """Test that a contained query scores 100."""
        assert scorer.score(CAR_DESCRIPTION, "car enthusiasts") == 100.0

    def test_exact_phrase_case_insensitive(self, scorer):
        """Test that case is ignored on both sides."""
        assert scorer.score(CAR_DESCRIPTION.upper(), "Car Enthusiasts") == 100.0

    def test_partial_word_overlap(self, scorer):
        """Test that 1 of 2 qualifying words scores 40."""
        # "performance" matches, "cars" does not
        assert scorer.score(CAR_DESCRIPTION, "performance cars") == pytest.approx(40.0)

    def test_all_words_without_phrase(self, scorer):
        """Test that all words matching out of order scores 80, not 100."""
        assert scorer.score(CAR_DESCRIPTION, "vehicles performance") == pytest.approx(80.0)

    def test_short_words_ignored(self, scorer):
        """Test that words of two characters or fewer are not counted."""
        # "in" and "of" are dropped, so 1 of 1 qualifying word matches
        assert scorer.score(CAR_DESCRIPTION, "in of vehicles") == pytest.approx(80.0)

    def test_no_qualifying_words(self, scorer):
        """Test that a query of only short words scores 0."""
        assert scorer.score("a big ox", "an ox") == 0.0

    def test_no_match(self, scorer):
        """Test that unrelated queries score 0."""
        assert scorer.score(CAR_DESCRIPTION, "xyz nonsense") == 0.0

    def test_words_match_as_substrings(self, scorer):
        """Test that a word matches inside a longer word."""
        assert scorer.score("Oscar winners", "car fans") == pytest.approx(40.0)

    def test_empty_cell(self, scorer):
        """Test that an empty cell scores 0."""
        assert scorer.score("", "car enthusiasts") == 0.0
        assert scorer.score(None, "car enthusiasts") == 0.0

    def test_score_bounds(self, scorer):
        """Test that scores stay within [0, 100]."""
        for query in ["car", "car enthusiasts", "performance cars", "zzz", "a"]:
            score = scorer.score(CAR_DESCRIPTION, query)
            assert 0.0 <= score <= 100.0

    def test_explain_exact(self, scorer):
        """Test explanation for an exact phrase."""
        details = scorer.explain(CAR_DESCRIPTION, "car enthusiasts")
        assert details == ['Exact phrase "car enthusiasts" found']

    def test_explain_words(self, scorer):
        """Test explanation lists only the matched words."""
        details = scorer.explain(CAR_DESCRIPTION, "performance cars")
        assert details == ['"performance" found']


class TestEditDistanceScorer:
    """Test the Levenshtein-based scorer."""

    def test_exact_phrase_scores_100(self, fuzzy_scorer):
        """Test that exact phrases still score 100."""
        assert fuzzy_scorer.score(CAR_DESCRIPTION, "car enthusiasts") == 100.0

    def test_typo_tolerance(self, fuzzy_scorer, scorer):
        """Test that a one-letter typo still counts as a word match."""
        assert fuzzy_scorer.score(CAR_DESCRIPTION, "car enthusiats") == pytest.approx(80.0)
        assert scorer.score(CAR_DESCRIPTION, "car enthusiats") == pytest.approx(40.0)

    def test_dissimilar_words_do_not_match(self, fuzzy_scorer):
        """Test that unrelated words score 0."""
        assert fuzzy_scorer.score(CAR_DESCRIPTION, "xyz nonsense") == 0.0

    def test_similarity(self, fuzzy_scorer):
        """Test normalized similarity values."""
        assert fuzzy_scorer.similarity("dog", "dog") == 1.0
        assert fuzzy_scorer.similarity("abc", "xyz") == 0.0
        assert fuzzy_scorer.similarity("enthusiats", "enthusiasts") == pytest.approx(1 - 1 / 11)

    def test_strict_similarity(self):
        """Test that a strict threshold rejects typos."""
        strict = EditDistanceScorer(word_similarity=1.0)
        assert strict.score(CAR_DESCRIPTION, "car enthusiats") == pytest.approx(40.0)

    def test_invalid_similarity(self):
        """Test that out-of-range thresholds raise error."""
        with pytest.raises(ValueError, match="word_similarity"):
            EditDistanceScorer(word_similarity=0.0)

        with pytest.raises(ValueError, match="word_similarity"):
            EditDistanceScorer(word_similarity=1.5)

    def test_explain(self, fuzzy_scorer):
        """Test explanation includes similarity."""
        details = fuzzy_scorer.explain(CAR_DESCRIPTION, "car enthusiats")
        assert details[0] == '"car" matched (100% similar)'
        assert details[1].startswith('"enthusiats" matched')

    def test_to_dict(self, fuzzy_scorer):
        """Test configuration export."""
        config = fuzzy_scorer.to_dict()
        assert config["name"] == "edit_distance"
        assert config["word_similarity"] == 0.8


class TestGetScorer:
    """Test scorer lookup by name."""

    def test_known_scorers(self):
        assert isinstance(get_scorer("phrase_overlap"), PhraseOverlapScorer)
        assert isinstance(get_scorer("edit_distance"), EditDistanceScorer)

    def test_unknown_scorer(self):
        with pytest.raises(ValueError, match="Unknown scorer"):
            get_scorer("tfidf")
