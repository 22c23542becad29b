"""
Settings access for the ranking engine.

All options live in the RANKING_ENGINE settings dict. The factor weight table
is materialized as an immutable WeightTable and injected into the engine, so
tests and callers can swap in alternate weight sets without touching globals.
"""

import logging
from dataclasses import asdict, dataclass, fields

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

logger = logging.getLogger(__name__)


ENGINE_DEFAULTS = {
    "WEIGHTS": {},
    "MAX_WORKERS": None,
    "PARALLEL_THRESHOLD": 64,
    "HIGHLIGHT_RADIUS": 20,
    "DEFAULT_RECOMMENDATION_LIMIT": 12,
    "DEFAULT_SEARCH_LIMIT": 20,
    "DEFAULT_SUGGESTION_LIMIT": 8,
    "DEFAULT_POPULAR_SEARCH_LIMIT": 10,
}


def get_engine_setting(name: str):
    """Returns a RANKING_ENGINE option, falling back to the built-in default."""
    if name not in ENGINE_DEFAULTS:
        raise ImproperlyConfigured(f"Unknown RANKING_ENGINE option '{name}'.")
    engine_settings = getattr(settings, "RANKING_ENGINE", None) or {}
    return engine_settings.get(name, ENGINE_DEFAULTS[name])


@dataclass(frozen=True)
class WeightTable:
    """Fixed per-factor weights, grouped the way the calculators use them."""

    # Profile-based
    interest_match: float = 0.25
    education_level: float = 0.15
    experience_level: float = 0.15
    industry_match: float = 0.10
    geographic_relevance: float = 0.05

    # Behavior-based
    completion_pattern: float = 0.20
    viewing_pattern: float = 0.15
    search_pattern: float = 0.10
    time_spent: float = 0.10

    # Collaborative
    similar_user_preference: float = 0.30
    popularity: float = 0.15

    # Contextual
    time_of_day: float = 0.05
    session_context: float = 0.10
    device_context: float = 0.05

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ImproperlyConfigured(
                    f"Weight '{f.name}' must be a number, got {value!r}."
                )
            if value < 0:
                raise ImproperlyConfigured(
                    f"Weight '{f.name}' must be non-negative, got {value}."
                )

    @classmethod
    def from_mapping(cls, overrides: dict | None) -> "WeightTable":
        """
        Builds a table from default weights plus overrides.

        Keys are case-insensitive factor keys such as 'INTEREST_MATCH'.
        """
        if not overrides:
            return cls()

        known = {f.name for f in fields(cls)}
        values = {}
        for key, value in overrides.items():
            name = str(key).lower()
            if name not in known:
                raise ImproperlyConfigured(
                    f"Unknown ranking weight '{key}'. Valid weights: {sorted(known)}"
                )
            values[name] = value
        return cls(**values)

    @classmethod
    def from_settings(cls) -> "WeightTable":
        table = cls.from_mapping(get_engine_setting("WEIGHTS"))
        logger.debug(f"Loaded ranking weight table: {table.as_dict()}")
        return table

    def as_dict(self) -> dict:
        return asdict(self)
