import logging

from .conf import WeightTable, get_engine_setting
from .exceptions import InvalidCandidateError
from .recommenders import PersonalizedRecommender
from .search import SearchEngine
from .suggestions import popular_searches
from .types import Candidate, Catalog, SortKey, SortOrder

logger = logging.getLogger(__name__)


def validate_candidates(candidates) -> list[Candidate]:
    """
    Rejects candidate lists that break the engine contract.

    None entries, non-Candidate entries and duplicate ids are programming
    errors in the caller and are raised here, never handled inside the engine.
    """
    if candidates is None:
        raise InvalidCandidateError("Candidate list is required.")

    validated = list(candidates)
    seen = set()
    for index, candidate in enumerate(validated):
        if candidate is None:
            raise InvalidCandidateError(f"Candidate at position {index} is None.")
        if not isinstance(candidate, Candidate):
            raise InvalidCandidateError(
                f"Candidate at position {index} is {type(candidate).__name__}, expected Candidate."
            )
        if candidate.id in seen:
            raise InvalidCandidateError(f"Duplicate candidate id '{candidate.id}'.")
        seen.add(candidate.id)
    return validated


class PersonalizationService:
    """Entry point for personalized recommendations."""

    @staticmethod
    def recommend(
        profile,
        candidates,
        progress=(),
        behavior=None,
        context=None,
        limit: int | None = None,
        weights: WeightTable | None = None,
        similarity=None,
    ) -> list:
        """
        Ranks candidates for a subject.

        Args:
            profile: SubjectProfile of the requesting user, or None.
            candidates: Catalog snapshot (list of Candidate).
            progress: ProgressRecords of the subject.
            behavior: BehaviorSnapshot, or None.
            context: SessionContext, or None.
            limit: Maximum results. Defaults to DEFAULT_RECOMMENDATION_LIMIT.
            weights: Alternate weight table. Defaults to the configured one.
            similarity: Alternate SimilarityStrategy for "Similar Users".

        Returns:
            List of ScoredResult, best first.

        Raises:
            InvalidCandidateError: If the candidate list breaks the contract.
        """
        candidates = validate_candidates(candidates)
        if limit is None:
            limit = get_engine_setting("DEFAULT_RECOMMENDATION_LIMIT")

        recommender = PersonalizedRecommender(
            weights=weights or WeightTable.from_settings(),
            similarity=similarity,
            max_workers=get_engine_setting("MAX_WORKERS"),
            parallel_threshold=get_engine_setting("PARALLEL_THRESHOLD"),
        )
        return recommender.recommend(
            profile,
            candidates,
            progress=progress,
            behavior=behavior,
            context=context,
            limit=limit,
        )


class SearchService:
    """Entry point for catalog search, suggestions and popular queries."""

    @staticmethod
    def _engine() -> SearchEngine:
        return SearchEngine(highlight_radius=get_engine_setting("HIGHLIGHT_RADIUS"))

    @staticmethod
    def search(
        catalog: Catalog,
        query: str,
        filters=None,
        limit: int | None = None,
        offset: int = 0,
        sort_by: str = SortKey.RELEVANCE,
        sort_order: str = SortOrder.DESC,
    ) -> list:
        """Relevance-ranked search. Empty queries return []."""
        validate_candidates(catalog.candidates)
        if limit is None:
            limit = get_engine_setting("DEFAULT_SEARCH_LIMIT")
        return SearchService._engine().search(
            catalog,
            query,
            filters=filters,
            limit=limit,
            offset=offset,
            sort_by=sort_by,
            sort_order=sort_order,
        )

    @staticmethod
    def suggest(catalog: Catalog, prefix: str, limit: int | None = None) -> list[str]:
        validate_candidates(catalog.candidates)
        if limit is None:
            limit = get_engine_setting("DEFAULT_SUGGESTION_LIMIT")
        return SearchService._engine().suggest(catalog, prefix, limit)

    @staticmethod
    def popular_searches(query_log, limit: int | None = None) -> list[tuple[str, int]]:
        if limit is None:
            limit = get_engine_setting("DEFAULT_POPULAR_SEARCH_LIMIT")
        return popular_searches(query_log or (), limit)
