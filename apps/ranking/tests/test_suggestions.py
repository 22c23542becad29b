"""Tests for search suggestions and popular queries."""

from django.test import SimpleTestCase

from apps.ranking.suggestions import generate_suggestions, normalize_query, popular_searches
from apps.ranking.types import Catalog

from .factories import make_course, sample_catalog


class GenerateSuggestionsTests(SimpleTestCase):
    """Tests for generate_suggestions."""

    def setUp(self):
        self.catalog = sample_catalog()

    def test_titles_come_before_categories_and_tags(self):
        """Test the priority order of suggestion sources."""
        self.assertEqual(
            generate_suggestions(self.catalog, "bus"),
            ["Business Fundamentals", "Business", "business", "business strategy"],
        )

    def test_instructor_names_are_suggested(self):
        """Test that instructor names are a suggestion source."""
        self.assertEqual(generate_suggestions(self.catalog, "okafor"), ["Amara Okafor"])

    def test_case_insensitive_substring(self):
        """Test that the prefix matches anywhere in the string, ignoring case."""
        self.assertIn("Digital Marketing", generate_suggestions(self.catalog, "KETING"))

    def test_limit_caps_results(self):
        """Test that no more than limit suggestions are returned."""
        self.assertEqual(len(generate_suggestions(self.catalog, "a", limit=3)), 3)

    def test_empty_prefix(self):
        """Test that an empty prefix suggests nothing."""
        self.assertEqual(generate_suggestions(self.catalog, ""), [])
        self.assertEqual(generate_suggestions(self.catalog, "   "), [])

    def test_duplicates_removed(self):
        """Test that repeated strings appear once."""
        catalog = Catalog(
            candidates=(
                make_course("c1", "Finance", category="Finance", tags=("Finance",)),
                make_course("c2", "Finance", category="Finance"),
            ),
            categories=("Finance",),
        )
        self.assertEqual(generate_suggestions(catalog, "fin"), ["Finance"])


class PopularSearchesTests(SimpleTestCase):
    """Tests for popular_searches."""

    def test_counts_normalized_queries(self):
        """Test that queries are grouped after case and whitespace normalization."""
        log = [
            "Business  Fundamentals",
            "business fundamentals",
            "marketing",
            "finance",
            "marketing",
            "  business fundamentals ",
        ]
        self.assertEqual(
            popular_searches(log),
            [("business fundamentals", 3), ("marketing", 2), ("finance", 1)],
        )

    def test_ties_sort_alphabetically(self):
        """Test that equal counts order by query text."""
        self.assertEqual(
            popular_searches(["zeta", "alpha", "mid"]),
            [("alpha", 1), ("mid", 1), ("zeta", 1)],
        )

    def test_limit_and_blank_entries(self):
        """Test that blank queries are ignored and the limit applies."""
        self.assertEqual(popular_searches(["", "  ", "a", "b"], limit=1), [("a", 1)])
        self.assertEqual(popular_searches(["a"], limit=0), [])

    def test_normalize_query(self):
        """Test whitespace collapsing and lower-casing."""
        self.assertEqual(normalize_query("  Data   SCIENCE "), "data science")
