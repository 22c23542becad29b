"""
Combines fired factors into one score, a confidence and a label.

Groups are blended by total-weight-normalized averaging, so weights inside a
group need not sum to 1.
"""

import numpy as np

from .types import Factor, FactorGroup, RecommendationType, SubjectProfile

BASE_CONFIDENCE = 0.5
PROFILE_CONFIDENCE_BONUS = 0.2
BEHAVIOR_CONFIDENCE_BONUS = 0.2
FACTOR_COUNT_CONFIDENCE_BONUS = 0.1
FACTOR_COUNT_THRESHOLD = 5

# First group present wins when the result is not hybrid
LABEL_PRIORITY = (
    (FactorGroup.PROFILE, RecommendationType.PROFILE_BASED),
    (FactorGroup.BEHAVIOR, RecommendationType.BEHAVIOR_BASED),
    (FactorGroup.COLLABORATIVE, RecommendationType.COLLABORATIVE),
    (FactorGroup.CONTEXTUAL, RecommendationType.CONTEXTUAL),
)

HYBRID_GROUPS = frozenset({
    FactorGroup.PROFILE,
    FactorGroup.BEHAVIOR,
    FactorGroup.COLLABORATIVE,
})


def aggregate_score(factors: list[Factor]) -> float:
    """Weighted mean of factor scores; 0.0 when no weight fired."""
    if not factors:
        return 0.0
    weights = np.array([f.weight for f in factors], dtype=float)
    scores = np.array([f.score for f in factors], dtype=float)
    total_weight = weights.sum()
    if total_weight <= 0:
        return 0.0
    return float(np.clip(np.dot(weights, scores) / total_weight, 0.0, 1.0))


def calculate_confidence(factors: list[Factor], profile: SubjectProfile | None) -> float:
    confidence = BASE_CONFIDENCE
    if profile is not None and profile.has_profile_data:
        confidence += PROFILE_CONFIDENCE_BONUS
    if any(f.group == FactorGroup.BEHAVIOR for f in factors):
        confidence += BEHAVIOR_CONFIDENCE_BONUS
    if len(factors) > FACTOR_COUNT_THRESHOLD:
        confidence += FACTOR_COUNT_CONFIDENCE_BONUS
    return min(confidence, 1.0)


def classify(factors: list[Factor]) -> str:
    groups = {f.group for f in factors}
    if HYBRID_GROUPS <= groups:
        return RecommendationType.HYBRID
    for group, label in LABEL_PRIORITY:
        if group in groups:
            return label
    return RecommendationType.HYBRID
