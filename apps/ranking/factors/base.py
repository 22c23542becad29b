import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

import numpy as np
from sklearn.preprocessing import normalize

from ..conf import WeightTable
from ..types import (
    BehaviorSnapshot,
    Candidate,
    Factor,
    ProgressRecord,
    SessionContext,
    SubjectProfile,
)

logger = logging.getLogger(__name__)

# Engagement weighting used for catalog popularity
PROGRESS_EVENT_WEIGHT = 0.3
COMPLETION_EVENT_WEIGHT = 0.7


def contains_any(text: str, keywords) -> bool:
    return any(keyword in text for keyword in keywords)


def engagement_score(candidate: Candidate) -> float:
    return (
        candidate.progress_events * PROGRESS_EVENT_WEIGHT
        + candidate.completion_events * COMPLETION_EVENT_WEIGHT
    )


def scaled_popularity(candidates) -> dict[str, float]:
    """
    Scales engagement into [0, 1] by the catalog maximum.

    Returns an empty mapping when the catalog carries no engagement at all,
    which suppresses the popularity factor.
    """
    if not candidates:
        return {}
    raw = np.array([[engagement_score(c) for c in candidates]], dtype=float)
    if raw.max() <= 0:
        return {}
    scaled = normalize(raw, norm="max", axis=1)[0]
    return {c.id: float(s) for c, s in zip(candidates, scaled)}


@dataclass(frozen=True)
class ScoringInputs:
    """
    Everything the calculators need for one recommendation request.

    Catalog-wide aggregates are computed once here so per-candidate scoring
    stays independent and can run in parallel.
    """

    profile: SubjectProfile | None
    progress: tuple[ProgressRecord, ...] = ()
    behavior: BehaviorSnapshot | None = None
    context: SessionContext | None = None
    completed_ids: frozenset = frozenset()
    completed_categories: frozenset = frozenset()
    popularity: dict = field(default_factory=dict)
    total_views: int = 0
    average_time_spent: float = 1.0

    @classmethod
    def collect(cls, profile, candidates, progress=(), behavior=None, context=None) -> "ScoringInputs":
        progress = tuple(progress or ())
        completed_ids = frozenset(p.candidate_id for p in progress if p.completed)
        categories_by_id = {c.id: c.category for c in candidates}
        completed_categories = frozenset(
            categories_by_id[cid] for cid in completed_ids if categories_by_id.get(cid)
        )

        total_views = 0
        average_time_spent = 1.0
        if behavior is not None:
            total_views = sum(behavior.views.values())
            if behavior.time_spent:
                average_time_spent = sum(behavior.time_spent.values()) / len(behavior.time_spent)
            if average_time_spent <= 0:
                average_time_spent = 1.0

        return cls(
            profile=profile,
            progress=progress,
            behavior=behavior,
            context=context,
            completed_ids=completed_ids,
            completed_categories=completed_categories,
            popularity=scaled_popularity(candidates),
            total_views=total_views,
            average_time_spent=average_time_spent,
        )

    @property
    def has_behavior_data(self) -> bool:
        return bool(self.progress) or (self.behavior is not None and not self.behavior.is_empty)


class FactorCalculator(ABC):
    """Emits the named, weighted factors of one signal group."""

    group: str = ""

    def __init__(self, weights: WeightTable | None = None):
        self.weights = weights or WeightTable()

    @abstractmethod
    def calculate(self, candidate: Candidate, inputs: ScoringInputs) -> list[Factor]:
        """Returns the factors this group can compute; missing signals emit nothing."""
        pass

    def make_factor(self, name: str, weight: float, score: float, description: str) -> Factor:
        return Factor(
            name=name,
            group=self.group,
            weight=weight,
            score=min(max(float(score), 0.0), 1.0),
            description=description,
        )
