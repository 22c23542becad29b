"""Tests for the Ranking services."""

from django.core.exceptions import ImproperlyConfigured
from django.test import SimpleTestCase, override_settings

from apps.ranking.exceptions import InvalidCandidateError, RankingError
from apps.ranking.services import PersonalizationService, SearchService, validate_candidates
from apps.ranking.types import Catalog

from .factories import make_course, make_profile, sample_catalog


class ValidateCandidatesTests(SimpleTestCase):
    """Tests for validate_candidates."""

    def test_accepts_valid_list(self):
        """Test that a well-formed list passes through."""
        candidates = [make_course("a"), make_course("b")]
        self.assertEqual(validate_candidates(candidates), candidates)

    def test_rejects_missing_list(self):
        """Test that None instead of a list is rejected."""
        with self.assertRaises(InvalidCandidateError):
            validate_candidates(None)

    def test_rejects_none_entry(self):
        """Test that a None entry is rejected with its position."""
        with self.assertRaisesMessage(InvalidCandidateError, "position 1"):
            validate_candidates([make_course("a"), None])

    def test_rejects_foreign_objects(self):
        """Test that non-Candidate entries are rejected."""
        with self.assertRaises(InvalidCandidateError):
            validate_candidates([{"id": "a", "title": "Dict"}])

    def test_rejects_duplicate_ids(self):
        """Test that duplicate candidate ids are rejected."""
        with self.assertRaisesMessage(InvalidCandidateError, "Duplicate candidate id 'a'"):
            validate_candidates([make_course("a"), make_course("a", "Other")])

    def test_error_is_a_ranking_error(self):
        """Test the exception hierarchy."""
        self.assertTrue(issubclass(InvalidCandidateError, RankingError))


class PersonalizationServiceTests(SimpleTestCase):
    """Tests for PersonalizationService.recommend."""

    def setUp(self):
        self.candidates = list(sample_catalog().candidates)
        self.profile = make_profile(interests=["business"])

    def test_recommend_uses_default_limit(self):
        """Test that the configured default limit applies when none is given."""
        with override_settings(RANKING_ENGINE={"DEFAULT_RECOMMENDATION_LIMIT": 2}):
            results = PersonalizationService.recommend(self.profile, self.candidates)
        self.assertEqual(len(results), 2)

    def test_recommend_rejects_invalid_candidates(self):
        """Test that invalid candidate lists raise before scoring."""
        with self.assertRaises(InvalidCandidateError):
            PersonalizationService.recommend(self.profile, self.candidates + [None])

    @override_settings(RANKING_ENGINE={"WEIGHTS": {"INTEREST_MATCH": 0.0}})
    def test_configured_weights_are_used(self):
        """Test that weight overrides from settings reach the factors."""
        results = PersonalizationService.recommend(self.profile, self.candidates)
        interest = next(f for f in results[0].factors if f.name == "Interest Match")
        self.assertEqual(interest.weight, 0.0)

    @override_settings(RANKING_ENGINE={"WEIGHTS": {"INTEREST_MATCH": -1}})
    def test_negative_weight_is_improperly_configured(self):
        """Test that a negative configured weight is rejected."""
        with self.assertRaises(ImproperlyConfigured):
            PersonalizationService.recommend(self.profile, self.candidates)

    @override_settings(RANKING_ENGINE={"PARALLEL_THRESHOLD": 1, "MAX_WORKERS": 2})
    def test_parallel_settings_give_same_ranking(self):
        """Test that enabling the worker pool does not change the ranking."""
        parallel = PersonalizationService.recommend(self.profile, self.candidates)
        with override_settings(RANKING_ENGINE={"PARALLEL_THRESHOLD": 1000}):
            inline = PersonalizationService.recommend(self.profile, self.candidates)
        self.assertEqual(parallel, inline)


class SearchServiceTests(SimpleTestCase):
    """Tests for SearchService."""

    def setUp(self):
        self.catalog = sample_catalog()

    def test_search_empty_query(self):
        """Test that an empty query returns no results."""
        self.assertEqual(SearchService.search(self.catalog, ""), [])

    @override_settings(RANKING_ENGINE={"DEFAULT_SEARCH_LIMIT": 1})
    def test_search_default_limit(self):
        """Test that the configured default search limit applies."""
        results = SearchService.search(self.catalog, "business")
        self.assertEqual([m.candidate.id for m in results], ["course1"])

    @override_settings(RANKING_ENGINE={"HIGHLIGHT_RADIUS": 3})
    def test_highlight_radius_setting(self):
        """Test that the highlight radius comes from settings."""
        match = SearchService.search(self.catalog, "fundamentals")[0]
        self.assertEqual(match.highlights[0].snippet, "...ss Fundamentals...")

    def test_search_rejects_duplicate_candidates(self):
        """Test that a catalog with duplicate ids is rejected."""
        catalog = Catalog(candidates=(make_course("a"), make_course("a")))
        with self.assertRaises(InvalidCandidateError):
            SearchService.search(catalog, "course")

    @override_settings(RANKING_ENGINE={"DEFAULT_SUGGESTION_LIMIT": 1})
    def test_suggest_default_limit(self):
        """Test that the configured suggestion limit applies."""
        self.assertEqual(SearchService.suggest(self.catalog, "bus"), ["Business Fundamentals"])

    def test_popular_searches(self):
        """Test popular query ranking through the service."""
        self.assertEqual(
            SearchService.popular_searches(["finance", "Finance", "tax"]),
            [("finance", 2), ("tax", 1)],
        )
        self.assertEqual(SearchService.popular_searches(None), [])
