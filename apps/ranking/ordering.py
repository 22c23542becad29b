"""
Deterministic ordering and pagination.

Every sort breaks ties by candidate id ascending, whatever the direction, so
repeated calls over identical input always produce identical output.
"""

import logging
from datetime import datetime

from .types import ScoredResult, SearchMatch, SortKey, SortOrder

logger = logging.getLogger(__name__)


def _date_key(match: SearchMatch) -> float:
    created_at: datetime | None = match.candidate.created_at
    return created_at.timestamp() if created_at else float("-inf")


SORT_KEYS = {
    SortKey.RELEVANCE: lambda m: m.relevance,
    SortKey.POPULARITY: lambda m: m.candidate.popularity,
    SortKey.RATING: lambda m: m.candidate.rating,
    SortKey.DATE: _date_key,
    SortKey.TITLE: lambda m: m.candidate.title.casefold(),
}


def sort_matches(
    matches: list[SearchMatch],
    sort_by: str = SortKey.RELEVANCE,
    sort_order: str = SortOrder.DESC,
) -> list[SearchMatch]:
    """
    Sorts search matches by the selected key.

    Descending unless sort_order is 'asc'. Unknown keys fall back to relevance.
    """
    key = SORT_KEYS.get(sort_by)
    if key is None:
        logger.warning(f"Unknown sort key '{sort_by}', falling back to relevance")
        key = SORT_KEYS[SortKey.RELEVANCE]

    # Python's sort is stable, so sorting by id first fixes the tie order
    by_id = sorted(matches, key=lambda m: m.candidate.id)
    return sorted(by_id, key=key, reverse=sort_order != SortOrder.ASC)


def rank_results(results: list[ScoredResult]) -> list[ScoredResult]:
    """Orders recommendations by score descending, then candidate id ascending."""
    return sorted(results, key=lambda r: (-r.score, r.candidate.id))


def paginate(items: list, offset: int = 0, limit: int | None = None) -> list:
    """Offset/limit slice. Negative offsets clamp to 0; a limit <= 0 yields []."""
    start = max(offset or 0, 0)
    if limit is None:
        return list(items[start:])
    if limit <= 0:
        return []
    return list(items[start:start + limit])
