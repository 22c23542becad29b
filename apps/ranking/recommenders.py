"""
Personalized recommendation scoring.

The recommender combines four factor groups (profile, behavior, collaborative
and contextual) into one explainable score per candidate. It holds only its
immutable configuration, so a single instance can serve concurrent requests
for different subjects.
"""

import logging
import os
from concurrent.futures import ThreadPoolExecutor

from .aggregation import aggregate_score, calculate_confidence, classify
from .conf import WeightTable
from .factors import (
    BehaviorFactorCalculator,
    CollaborativeFactorCalculator,
    ContextualFactorCalculator,
    ProfileFactorCalculator,
    ScoringInputs,
    SimilarityStrategy,
)
from .ordering import rank_results
from .types import Candidate, ScoredResult

logger = logging.getLogger(__name__)


class PersonalizedRecommender:
    """Scores and ranks candidates for one subject."""

    def __init__(
        self,
        weights: WeightTable | None = None,
        similarity: SimilarityStrategy | None = None,
        max_workers: int | None = None,
        parallel_threshold: int = 64,
    ):
        """
        Initialize the recommender.

        Args:
            weights: Factor weight table. Defaults to the built-in weights.
            similarity: Strategy behind the "Similar Users" factor.
            max_workers: Worker pool bound. Defaults to the number of CPUs.
            parallel_threshold: Catalog size from which candidates are scored
                on a worker pool instead of inline.
        """
        self.weights = weights or WeightTable()
        self.max_workers = max_workers
        self.parallel_threshold = parallel_threshold
        self.calculators = (
            ProfileFactorCalculator(self.weights),
            BehaviorFactorCalculator(self.weights),
            CollaborativeFactorCalculator(self.weights, similarity=similarity),
            ContextualFactorCalculator(self.weights),
        )

    def recommend(
        self,
        profile,
        candidates: list[Candidate],
        progress=(),
        behavior=None,
        context=None,
        limit: int = 12,
    ) -> list[ScoredResult]:
        """
        Generate recommendations, best first.

        Args:
            profile: The subject's SubjectProfile, or None.
            candidates: Catalog snapshot. Completed candidates stay in the
                snapshot for category and popularity lookups but are never
                returned.
            progress: The subject's ProgressRecord list.
            behavior: BehaviorSnapshot, or None.
            context: SessionContext, or None.
            limit: Maximum number of results.

        Returns:
            ScoredResults ordered by score descending, ties by candidate id.
        """
        if limit <= 0:
            return []

        inputs = ScoringInputs.collect(profile, candidates, progress, behavior, context)
        eligible = [c for c in candidates if c.id not in inputs.completed_ids]

        results = self._score_all(eligible, inputs)
        ranked = rank_results(results)

        logger.info(
            f"Scored {len(eligible)} candidates for subject "
            f"{getattr(profile, 'id', None)} "
            f"({len(candidates) - len(eligible)} completed excluded)"
        )
        return ranked[:limit]

    def score(self, candidate: Candidate, inputs: ScoringInputs) -> ScoredResult:
        factors = []
        for calculator in self.calculators:
            factors.extend(calculator.calculate(candidate, inputs))

        return ScoredResult(
            candidate=candidate,
            score=aggregate_score(factors),
            confidence=calculate_confidence(factors, inputs.profile),
            factors=tuple(factors),
            label=classify(factors),
        )

    def _score_all(self, candidates: list[Candidate], inputs: ScoringInputs) -> list[ScoredResult]:
        """
        Scores every candidate, on a thread pool for large catalogs.

        Scoring is pure Python, so the pool is bounded by the GIL and gives no
        CPU speed-up on its own; it pays off when a SimilarityStrategy waits
        on I/O or runs numpy code that releases the GIL. executor.map keeps
        input order, so results match inline scoring exactly.
        """
        if len(candidates) < self.parallel_threshold:
            return [self.score(candidate, inputs) for candidate in candidates]

        workers = min(self.max_workers or os.cpu_count() or 1, len(candidates))
        logger.debug(f"Scoring {len(candidates)} candidates on {workers} workers")
        with ThreadPoolExecutor(max_workers=workers) as executor:
            return list(executor.map(lambda c: self.score(c, inputs), candidates))

    def explain(self, result: ScoredResult) -> dict:
        """Factor breakdown of a result, strongest contribution first."""
        total_weight = sum(f.weight for f in result.factors)
        contributions = sorted(
            result.factors,
            key=lambda f: (-(f.weight * f.score), f.name),
        )
        return {
            'id': result.candidate.id,
            'score': round(result.score, 4),
            'label': result.label,
            'factors': [
                {
                    **factor.to_dict(),
                    'contribution': round(
                        factor.weight * factor.score / total_weight if total_weight else 0.0, 4
                    ),
                }
                for factor in contributions
            ],
        }
