"""Tests for ranking engine settings."""

from django.core.exceptions import ImproperlyConfigured
from django.test import SimpleTestCase, override_settings

from apps.ranking.conf import WeightTable, get_engine_setting


class WeightTableTests(SimpleTestCase):
    """Tests for WeightTable."""

    def test_default_weights(self):
        """Test the built-in weight table."""
        weights = WeightTable()

        self.assertEqual(weights.interest_match, 0.25)
        self.assertEqual(weights.similar_user_preference, 0.30)
        self.assertEqual(weights.device_context, 0.05)
        self.assertEqual(len(weights.as_dict()), 14)

    def test_from_mapping_is_case_insensitive(self):
        """Test that override keys ignore case and unset keys keep defaults."""
        weights = WeightTable.from_mapping({"INTEREST_MATCH": 0.5, "popularity": 0})

        self.assertEqual(weights.interest_match, 0.5)
        self.assertEqual(weights.popularity, 0)
        self.assertEqual(weights.education_level, 0.15)

    def test_from_mapping_empty(self):
        """Test that no overrides give the defaults."""
        self.assertEqual(WeightTable.from_mapping(None), WeightTable())
        self.assertEqual(WeightTable.from_mapping({}), WeightTable())

    def test_unknown_weight_key(self):
        """Test that an unknown weight name is rejected."""
        with self.assertRaisesMessage(ImproperlyConfigured, "Unknown ranking weight 'LUCK'"):
            WeightTable.from_mapping({"LUCK": 1.0})

    def test_invalid_weight_values(self):
        """Test that negative, boolean and non-numeric weights are rejected."""
        with self.assertRaises(ImproperlyConfigured):
            WeightTable(interest_match=-0.1)
        with self.assertRaises(ImproperlyConfigured):
            WeightTable(interest_match=True)
        with self.assertRaises(ImproperlyConfigured):
            WeightTable(interest_match="high")

    def test_table_is_immutable(self):
        """Test that a weight table cannot be modified after creation."""
        weights = WeightTable()
        with self.assertRaises(AttributeError):
            weights.interest_match = 1.0

    @override_settings(RANKING_ENGINE={"WEIGHTS": {"TIME_SPENT": 0.4}})
    def test_from_settings(self):
        """Test that weights load from the RANKING_ENGINE setting."""
        self.assertEqual(WeightTable.from_settings().time_spent, 0.4)


class GetEngineSettingTests(SimpleTestCase):
    """Tests for get_engine_setting."""

    @override_settings(RANKING_ENGINE={"DEFAULT_SEARCH_LIMIT": 5})
    def test_override_and_fallback(self):
        """Test that set options win and missing options use defaults."""
        self.assertEqual(get_engine_setting("DEFAULT_SEARCH_LIMIT"), 5)
        self.assertEqual(get_engine_setting("HIGHLIGHT_RADIUS"), 20)

    @override_settings(RANKING_ENGINE=None)
    def test_missing_setting_uses_defaults(self):
        """Test that an absent RANKING_ENGINE dict falls back entirely."""
        self.assertEqual(get_engine_setting("PARALLEL_THRESHOLD"), 64)

    def test_unknown_option(self):
        """Test that unknown option names are a configuration error."""
        with self.assertRaises(ImproperlyConfigured):
            get_engine_setting("NOT_AN_OPTION")
