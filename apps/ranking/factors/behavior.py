"""Factors derived from the subject's own interaction history."""

from ..types import Candidate, Factor, FactorGroup
from .base import FactorCalculator, ScoringInputs

NO_HISTORY_SCORE = 0.5
SAME_CATEGORY_SCORE = 0.8
OTHER_CATEGORY_SCORE = 0.3
SEARCH_HIT_SCORE = 0.3


class BehaviorFactorCalculator(FactorCalculator):
    group = FactorGroup.BEHAVIOR

    def calculate(self, candidate: Candidate, inputs: ScoringInputs) -> list[Factor]:
        if not inputs.has_behavior_data:
            return []

        return [
            self.make_factor(
                'Completion Pattern',
                self.weights.completion_pattern,
                self.completion_pattern(candidate, inputs),
                'Based on your course completion history',
            ),
            self.make_factor(
                'Viewing Pattern',
                self.weights.viewing_pattern,
                self.viewing_pattern(candidate, inputs),
                'Based on your viewing behavior',
            ),
            self.make_factor(
                'Search Pattern',
                self.weights.search_pattern,
                self.search_pattern(candidate, inputs),
                'Based on your search history',
            ),
            self.make_factor(
                'Time Spent',
                self.weights.time_spent,
                self.time_spent(candidate, inputs),
                'Based on your engagement patterns',
            ),
        ]

    @staticmethod
    def completion_pattern(candidate: Candidate, inputs: ScoringInputs) -> float:
        if not inputs.completed_ids:
            return NO_HISTORY_SCORE
        if candidate.category and candidate.category in inputs.completed_categories:
            return SAME_CATEGORY_SCORE
        return OTHER_CATEGORY_SCORE

    @staticmethod
    def viewing_pattern(candidate: Candidate, inputs: ScoringInputs) -> float:
        if inputs.behavior is None or inputs.total_views <= 0:
            return NO_HISTORY_SCORE
        views = inputs.behavior.views.get(candidate.id, 0)
        return min(views / inputs.total_views * 2, 1.0)

    @staticmethod
    def search_pattern(candidate: Candidate, inputs: ScoringInputs) -> float:
        if inputs.behavior is None:
            return 0.0
        text = candidate.text
        hits = [q for q in inputs.behavior.search_queries if q and q.lower() in text]
        return min(len(hits) * SEARCH_HIT_SCORE, 1.0)

    @staticmethod
    def time_spent(candidate: Candidate, inputs: ScoringInputs) -> float:
        if inputs.behavior is None:
            return 0.0
        spent = inputs.behavior.time_spent.get(candidate.id, 0)
        return min(spent / inputs.average_time_spent, 1.0)
