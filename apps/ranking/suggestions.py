"""Search-box completions and popular query ranking."""

import re
from collections import Counter

from .types import Catalog, CandidateKind


def _suggestion_sources(catalog: Catalog):
    """Yields suggestion strings in priority order: titles, names, categories, tags."""
    for course in catalog.of_kind(CandidateKind.COURSE):
        yield course.title
    for instructor in catalog.of_kind(CandidateKind.INSTRUCTOR):
        yield instructor.title
    yield from catalog.categories
    for candidate in catalog.candidates:
        if candidate.category:
            yield candidate.category
    for candidate in catalog.candidates:
        yield from candidate.tags


def generate_suggestions(catalog: Catalog, prefix: str, limit: int = 8) -> list[str]:
    """
    Returns up to `limit` strings containing `prefix`, case-insensitively.

    Duplicates are removed by exact string; insertion order is kept.
    """
    needle = (prefix or "").strip().lower()
    if not needle or limit <= 0:
        return []

    suggestions = {}
    for value in _suggestion_sources(catalog):
        if value and needle in value.lower():
            suggestions.setdefault(value, None)
            if len(suggestions) >= limit:
                break
    return list(suggestions)


def normalize_query(query: str) -> str:
    return re.sub(r"\s+", " ", (query or "").strip()).lower()


def popular_searches(query_log, limit: int = 10) -> list[tuple[str, int]]:
    """Most frequent queries in a log, by count descending then query ascending."""
    if limit <= 0:
        return []
    counts = Counter(q for q in (normalize_query(entry) for entry in query_log) if q)
    ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    return ranked[:limit]
