"""Tests for PersonalizedRecommender."""

from django.test import SimpleTestCase

from apps.ranking.conf import WeightTable
from apps.ranking.factors import JaccardSimilarity
from apps.ranking.recommenders import PersonalizedRecommender
from apps.ranking.types import FactorGroup, RecommendationType

from .factories import (
    completed,
    make_behavior,
    make_context,
    make_course,
    make_profile,
    sample_catalog,
)


class PersonalizedRecommenderInitTests(SimpleTestCase):
    """Tests for PersonalizedRecommender initialization."""

    def test_init_with_defaults(self):
        """Test initialization with default values."""
        recommender = PersonalizedRecommender()

        self.assertEqual(recommender.weights, WeightTable())
        self.assertIsNone(recommender.max_workers)
        self.assertEqual(recommender.parallel_threshold, 64)
        self.assertEqual(len(recommender.calculators), 4)

    def test_init_with_custom_weights(self):
        """Test that a custom weight table reaches every calculator."""
        weights = WeightTable(interest_match=0.5)
        recommender = PersonalizedRecommender(weights=weights)

        for calculator in recommender.calculators:
            self.assertIs(calculator.weights, weights)


class PersonalizedRecommenderRecommendTests(SimpleTestCase):
    """Tests for PersonalizedRecommender.recommend()."""

    def setUp(self):
        self.recommender = PersonalizedRecommender()
        self.catalog = sample_catalog()
        self.candidates = list(self.catalog.candidates)
        self.profile = make_profile(
            "user-42",
            interests=["business", "marketing"],
            education_level="bachelor",
            experience_level="Entry Level (0-2 years)",
            country="Nigeria",
        )

    def test_completed_candidates_are_excluded(self):
        """Test that completed candidates never appear in the output."""
        results = self.recommender.recommend(
            self.profile, self.candidates, progress=completed("course1")
        )
        ids = [r.candidate.id for r in results]

        self.assertNotIn("course1", ids)
        self.assertEqual(len(ids), len(self.candidates) - 1)

    def test_scores_and_confidence_in_range(self):
        """Test that every score and confidence lies in [0, 1]."""
        results = self.recommender.recommend(
            self.profile,
            self.candidates,
            progress=completed("course1"),
            behavior=make_behavior(views={"course2": 3}),
            context=make_context(hour=9, device_type="mobile"),
        )
        for result in results:
            self.assertGreaterEqual(result.score, 0.0)
            self.assertLessEqual(result.score, 1.0)
            self.assertGreaterEqual(result.confidence, 0.0)
            self.assertLessEqual(result.confidence, 1.0)
            for factor in result.factors:
                self.assertGreaterEqual(factor.score, 0.0)
                self.assertLessEqual(factor.score, 1.0)

    def test_ordered_by_score_then_id(self):
        """Test that results run from best score down, ties by id."""
        results = self.recommender.recommend(self.profile, self.candidates)
        keys = [(-r.score, r.candidate.id) for r in results]
        self.assertEqual(keys, sorted(keys))

    def test_identical_candidates_tie_by_id(self):
        """Test that candidates with identical content order by id."""
        candidates = [make_course("b", "Finance"), make_course("a", "Finance")]
        results = self.recommender.recommend(self.profile, candidates)

        self.assertEqual(results[0].score, results[1].score)
        self.assertEqual([r.candidate.id for r in results], ["a", "b"])

    def test_repeated_calls_are_identical(self):
        """Test that identical inputs give identical output."""
        kwargs = {
            "progress": completed("course1"),
            "behavior": make_behavior(search_queries=["marketing"]),
            "context": make_context(hour=20),
        }
        first = self.recommender.recommend(self.profile, self.candidates, **kwargs)
        second = self.recommender.recommend(self.profile, self.candidates, **kwargs)
        self.assertEqual(first, second)

    def test_limit(self):
        """Test that the output is truncated to limit."""
        self.assertEqual(len(self.recommender.recommend(self.profile, self.candidates, limit=2)), 2)
        self.assertEqual(self.recommender.recommend(self.profile, self.candidates, limit=0), [])

    def test_empty_catalog(self):
        """Test that an empty catalog yields no recommendations."""
        self.assertEqual(self.recommender.recommend(self.profile, []), [])

    def test_interest_in_title_scores_full_match(self):
        """Test that an interest appearing in the title gives Interest Match 1.0."""
        profile = make_profile(interests=["business"])
        course = make_course("c1", "Business Fundamentals")
        result = self.recommender.recommend(profile, [course])[0]

        interest = next(f for f in result.factors if f.name == "Interest Match")
        self.assertEqual(interest.score, 1.0)
        self.assertEqual(result.label, RecommendationType.PROFILE_BASED)

    def test_no_profile_no_behavior_gives_base_confidence(self):
        """Test that a cold-start subject gets confidence 0.5."""
        results = self.recommender.recommend(None, self.candidates, context=make_context())

        for result in results:
            self.assertEqual(result.confidence, 0.5)
            groups = {f.group for f in result.factors}
            self.assertNotIn(FactorGroup.PROFILE, groups)
            self.assertNotIn(FactorGroup.BEHAVIOR, groups)
            self.assertEqual(result.label, RecommendationType.COLLABORATIVE)

    def test_profile_without_interests_gives_base_confidence(self):
        """Test that a location-only or blank-interest profile earns no profile bonus."""
        course = make_course("c1", "Accounting")

        result = self.recommender.recommend(make_profile(country="Nigeria"), [course], context=make_context())[0]
        self.assertEqual(result.confidence, 0.5)

        result = self.recommender.recommend(make_profile(interests=["  "]), [course], context=make_context())[0]
        self.assertEqual(result.confidence, 0.5)
        self.assertNotIn(FactorGroup.PROFILE, {f.group for f in result.factors})

    def test_full_signals_are_hybrid(self):
        """Test that profile, behavior and collaborative factors yield a hybrid label."""
        results = self.recommender.recommend(
            self.profile,
            self.candidates,
            progress=completed("course1"),
            context=make_context(),
        )
        for result in results:
            self.assertEqual(result.label, RecommendationType.HYBRID)
            self.assertAlmostEqual(result.confidence, 1.0)

    def test_parallel_scoring_matches_inline(self):
        """Test that worker-pool scoring gives the same ranking as inline scoring."""
        candidates = [
            make_course(f"c{i:02d}", f"Course {i}", category="Business" if i % 2 else "Finance",
                        progress_events=i, completion_events=i % 3)
            for i in range(40)
        ]
        kwargs = {
            "progress": completed("c01"),
            "behavior": make_behavior(views={"c03": 2, "c04": 1}),
            "context": make_context(hour=10),
        }
        inline = PersonalizedRecommender(parallel_threshold=1000).recommend(
            self.profile, candidates, limit=40, **kwargs
        )
        parallel = PersonalizedRecommender(parallel_threshold=1, max_workers=4).recommend(
            self.profile, candidates, limit=40, **kwargs
        )
        self.assertEqual(inline, parallel)

    def test_inputs_are_not_mutated(self):
        """Test that the caller's candidate list is left untouched."""
        before = list(self.candidates)
        self.recommender.recommend(self.profile, self.candidates, progress=completed("course1"))
        self.assertEqual(self.candidates, before)

    def test_custom_similarity_strategy(self):
        """Test that an injected similarity strategy drives Similar Users."""
        recommender = PersonalizedRecommender(
            similarity=JaccardSimilarity({"peer": {"course1", "course2"}})
        )
        results = recommender.recommend(None, self.candidates, progress=completed("course1"))

        by_id = {r.candidate.id: r for r in results}
        similar = {f.name: f for f in by_id["course2"].factors}["Similar Users"]
        self.assertEqual(similar.score, 1.0)
        similar = {f.name: f for f in by_id["course3"].factors}["Similar Users"]
        self.assertEqual(similar.score, 0.0)


class PersonalizedRecommenderExplainTests(SimpleTestCase):
    """Tests for PersonalizedRecommender.explain()."""

    def test_contributions_sorted_and_normalized(self):
        """Test that contributions are strongest first and sum to the score."""
        recommender = PersonalizedRecommender()
        profile = make_profile(interests=["business"], country="Nigeria")
        result = recommender.recommend(profile, [make_course("c1", "Business Basics")])[0]

        explanation = recommender.explain(result)
        contributions = [f["contribution"] for f in explanation["factors"]]

        self.assertEqual(explanation["id"], "c1")
        self.assertEqual(explanation["label"], result.label)
        self.assertEqual(contributions, sorted(contributions, reverse=True))
        self.assertAlmostEqual(sum(contributions), result.score, places=3)
