"""
Structured search filters.

Filters form an AND-conjunction applied after matching. An unset filter is a
no-op and an unknown value simply matches nothing; filtering never raises.
"""

import logging

from .types import Candidate, SearchFilters, SearchMatch

logger = logging.getLogger(__name__)


def _same(left: str, right: str) -> bool:
    return (left or "").casefold() == (right or "").casefold()


def _category(candidate: Candidate, filters: SearchFilters) -> bool:
    return filters.category is None or _same(candidate.category, filters.category)


def _instructor(candidate: Candidate, filters: SearchFilters) -> bool:
    if filters.instructor is None:
        return True
    # Ids compare exactly, display names case-insensitively
    return filters.instructor == candidate.instructor_id or (
        bool(candidate.instructor_name) and _same(candidate.instructor_name, filters.instructor)
    )


def _difficulty(candidate: Candidate, filters: SearchFilters) -> bool:
    return filters.difficulty is None or _same(candidate.difficulty, filters.difficulty)


def _duration(candidate: Candidate, filters: SearchFilters) -> bool:
    return filters.duration is None or _same(candidate.duration, filters.duration)


def _rating(candidate: Candidate, filters: SearchFilters) -> bool:
    return filters.min_rating is None or candidate.rating >= filters.min_rating


def _language(candidate: Candidate, filters: SearchFilters) -> bool:
    return filters.language is None or _same(candidate.language, filters.language)


def _tags(candidate: Candidate, filters: SearchFilters) -> bool:
    if not filters.tags:
        return True
    wanted = {tag.casefold() for tag in filters.tags}
    return any(tag.casefold() in wanted for tag in candidate.tags)


def _flags(candidate: Candidate, filters: SearchFilters) -> bool:
    # Transcript and subtitle filters only ever require the feature
    if filters.has_transcript and not candidate.has_transcript:
        return False
    if filters.has_subtitles and not candidate.has_subtitles:
        return False
    if filters.is_free is not None and candidate.is_free != filters.is_free:
        return False
    if filters.is_featured is not None and candidate.is_featured != filters.is_featured:
        return False
    return True


FILTER_PIPELINE = (
    _category,
    _instructor,
    _difficulty,
    _duration,
    _rating,
    _language,
    _tags,
    _flags,
)


def passes_filters(candidate: Candidate, filters: SearchFilters | None) -> bool:
    if filters is None:
        return True
    return all(check(candidate, filters) for check in FILTER_PIPELINE)


def apply_filters(matches: list[SearchMatch], filters: SearchFilters | None) -> list[SearchMatch]:
    """Keeps the matches whose candidates satisfy every set filter."""
    if filters is None or filters == SearchFilters():
        return list(matches)

    kept = [m for m in matches if passes_filters(m.candidate, filters)]
    logger.debug(f"Filters kept {len(kept)} of {len(matches)} matches")
    return kept
