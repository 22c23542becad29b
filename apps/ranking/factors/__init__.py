from .base import FactorCalculator, ScoringInputs, scaled_popularity
from .behavior import BehaviorFactorCalculator
from .collaborative import (
    CollaborativeFactorCalculator,
    CompletionTierSimilarity,
    JaccardSimilarity,
    SimilarityStrategy,
)
from .contextual import ContextualFactorCalculator
from .profile import ProfileFactorCalculator

__all__ = [
    'BehaviorFactorCalculator',
    'CollaborativeFactorCalculator',
    'CompletionTierSimilarity',
    'ContextualFactorCalculator',
    'FactorCalculator',
    'JaccardSimilarity',
    'ProfileFactorCalculator',
    'ScoringInputs',
    'SimilarityStrategy',
    'scaled_popularity',
]
