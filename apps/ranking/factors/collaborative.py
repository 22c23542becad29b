"""
Collaborative factors: signals from other learners rather than content.

"Similar users" goes through a SimilarityStrategy so the coarse completion
tier placeholder can be replaced by a real user-user similarity without
touching aggregation.
"""

import logging
from abc import ABC, abstractmethod

from ..types import Candidate, Factor, FactorGroup
from .base import FactorCalculator, ScoringInputs

logger = logging.getLogger(__name__)


class SimilarityStrategy(ABC):
    """Scores how strongly learners similar to the subject favour a candidate."""

    @abstractmethod
    def score(self, candidate: Candidate, inputs: ScoringInputs) -> float | None:
        """Returns a score in [0, 1], or None when there is no signal."""
        pass


class CompletionTierSimilarity(SimilarityStrategy):
    """
    Placeholder similarity: more completions put the subject in a higher tier.

    Every candidate gets the same score for a given subject.
    """

    TIERS = (
        (5, 0.8),
        (2, 0.6),
    )
    BASE_SCORE = 0.4

    def score(self, candidate: Candidate, inputs: ScoringInputs) -> float:
        completed = len(inputs.completed_ids)
        for threshold, tier_score in self.TIERS:
            if completed > threshold:
                return tier_score
        return self.BASE_SCORE


class JaccardSimilarity(SimilarityStrategy):
    """
    User-user similarity over completed-candidate sets.

    score = sum(J(subject, peer) for peers who completed the candidate)
            / sum(J(subject, peer) for all peers)
    """

    def __init__(self, peer_completions: dict):
        self.peer_completions = {
            peer_id: frozenset(completed)
            for peer_id, completed in peer_completions.items()
        }

    @staticmethod
    def jaccard(left: frozenset, right: frozenset) -> float:
        union = left | right
        if not union:
            return 0.0
        return len(left & right) / len(union)

    def score(self, candidate: Candidate, inputs: ScoringInputs) -> float | None:
        subject_completed = inputs.completed_ids
        if not subject_completed:
            return None

        total = 0.0
        favourable = 0.0
        for completed in self.peer_completions.values():
            similarity = self.jaccard(subject_completed, completed)
            if similarity <= 0:
                continue
            total += similarity
            if candidate.id in completed:
                favourable += similarity

        if total <= 0:
            return None
        return favourable / total


class CollaborativeFactorCalculator(FactorCalculator):
    group = FactorGroup.COLLABORATIVE

    def __init__(self, weights=None, similarity: SimilarityStrategy | None = None):
        super().__init__(weights)
        self.similarity = similarity or CompletionTierSimilarity()

    def calculate(self, candidate: Candidate, inputs: ScoringInputs) -> list[Factor]:
        factors = []

        similar_score = self.similarity.score(candidate, inputs)
        if similar_score is not None:
            factors.append(self.make_factor(
                'Similar Users',
                self.weights.similar_user_preference,
                similar_score,
                'Liked by users similar to you',
            ))

        popularity = inputs.popularity.get(candidate.id)
        if popularity is not None:
            factors.append(self.make_factor(
                'Popularity',
                self.weights.popularity,
                popularity,
                'Popular among all learners',
            ))

        return factors
