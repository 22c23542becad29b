"""Factors from the current session: time of day, session length, device."""

from ..types import Candidate, Factor, FactorGroup, SessionContext
from .base import FactorCalculator, ScoringInputs, contains_any

MATCH_SCORE = 0.8
TIME_DEFAULT_SCORE = 0.5
MISMATCH_SCORE = 0.4
MEDIUM_SESSION_SCORE = 0.6
UNKNOWN_DEVICE_SCORE = 0.5
TABLET_SCORE = 0.6

SHORT_SESSION_SECONDS = 300
LONG_SESSION_SECONDS = 1800

TIME_OF_DAY_KEYWORDS = {
    'morning': ('morning', 'start'),
    'afternoon': ('afternoon', 'work'),
    'evening': ('evening', 'relax'),
}

DEVICE_KEYWORDS = {
    'mobile': ('mobile', 'quick'),
    'desktop': ('desktop', 'comprehensive'),
}


def time_of_day(hour: int) -> str:
    if 6 <= hour < 12:
        return 'morning'
    if 12 <= hour < 18:
        return 'afternoon'
    return 'evening'


class ContextualFactorCalculator(FactorCalculator):
    group = FactorGroup.CONTEXTUAL

    def calculate(self, candidate: Candidate, inputs: ScoringInputs) -> list[Factor]:
        context: SessionContext | None = inputs.context
        if context is None:
            return []

        return [
            self.make_factor(
                'Time Relevance',
                self.weights.time_of_day,
                self.time_relevance(candidate, context),
                'Optimal for current time',
            ),
            self.make_factor(
                'Session Context',
                self.weights.session_context,
                self.session_relevance(candidate, context),
                'Fits your current session',
            ),
            self.make_factor(
                'Device Context',
                self.weights.device_context,
                self.device_relevance(candidate, context),
                'Optimized for your device',
            ),
        ]

    @staticmethod
    def time_relevance(candidate: Candidate, context: SessionContext) -> float:
        bucket = time_of_day(context.current_time.hour)
        if contains_any(candidate.text, TIME_OF_DAY_KEYWORDS[bucket]):
            return MATCH_SCORE
        return TIME_DEFAULT_SCORE

    @staticmethod
    def session_relevance(candidate: Candidate, context: SessionContext) -> float:
        text = candidate.text
        if context.session_duration < SHORT_SESSION_SECONDS:
            return MATCH_SCORE if contains_any(text, ('quick', 'intro')) else MISMATCH_SCORE
        if context.session_duration > LONG_SESSION_SECONDS:
            return MATCH_SCORE if contains_any(text, ('advanced', 'comprehensive')) else MISMATCH_SCORE
        return MEDIUM_SESSION_SCORE

    @staticmethod
    def device_relevance(candidate: Candidate, context: SessionContext) -> float:
        device = (context.device_type or '').lower()
        if device in DEVICE_KEYWORDS:
            return MATCH_SCORE if contains_any(candidate.text, DEVICE_KEYWORDS[device]) else MISMATCH_SCORE
        if device == 'tablet':
            return TABLET_SCORE
        return UNKNOWN_DEVICE_SCORE
