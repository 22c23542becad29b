"""
Weighted multi-field term matching for search.

Each candidate kind has an ordered table of (field, label, weight) entries.
Relevance is the sum over fields and terms of whole-word occurrence count
times field weight; candidates that match nothing are dropped.
"""

import logging
import re
from functools import lru_cache

from .types import Candidate, CandidateKind, Highlight, SearchMatch

logger = logging.getLogger(__name__)

TAGS_FIELD = "tags"

FIELD_WEIGHTS = {
    CandidateKind.COURSE: (
        ("title", "Title", 3.0),
        ("description", "Description", 2.0),
        ("body", "Content", 1.0),
        (TAGS_FIELD, "Tags", 1.5),
    ),
    CandidateKind.INSTRUCTOR: (
        ("title", "Name", 3.0),
        ("description", "Title", 2.0),
        ("body", "Bio", 1.0),
        (TAGS_FIELD, "Expertise", 1.5),
    ),
    CandidateKind.LESSON: (
        ("title", "Lesson", 3.0),
        ("description", "Description", 2.0),
    ),
    CandidateKind.TRANSCRIPT: (
        ("body", "Transcript", 0.8),
    ),
}


@lru_cache(maxsize=1024)
def _word_pattern(term: str) -> re.Pattern:
    return re.compile(rf"\b{re.escape(term)}\b", re.IGNORECASE)


def match_text(terms: list[str], text: str, radius: int = 20) -> tuple[int, str]:
    """
    Counts whole-word occurrences of every term in text.

    Returns (count, snippet); the snippet surrounds the first occurrence of the
    first term that matched, `radius` characters either side.
    """
    if not text:
        return 0, ""

    count = 0
    snippet = ""
    for term in terms:
        occurrences = list(_word_pattern(term).finditer(text))
        if not occurrences:
            continue
        count += len(occurrences)
        if not snippet:
            first = occurrences[0]
            start = max(0, first.start() - radius)
            end = min(len(text), first.end() + radius)
            snippet = f"...{text[start:end]}..."
    return count, snippet


def match_tags(terms: list[str], tags: tuple[str, ...]) -> tuple[int, str]:
    """Counts, per term, every tag containing it as a whole word."""
    count = 0
    matched = []
    for term in terms:
        pattern = _word_pattern(term)
        for tag in tags:
            if pattern.search(tag):
                count += 1
                if tag not in matched:
                    matched.append(tag)
    return count, ", ".join(matched)


class FieldMatcher:
    """Scores candidates against a tokenized query."""

    def __init__(self, highlight_radius: int = 20, field_weights: dict | None = None):
        self.highlight_radius = highlight_radius
        self.field_weights = field_weights or FIELD_WEIGHTS

    def match(self, candidate: Candidate, terms: list[str]) -> SearchMatch | None:
        """Returns a SearchMatch, or None when no field matched any term."""
        table = self.field_weights.get(candidate.kind)
        if not table or not terms:
            return None

        relevance = 0.0
        highlights = []
        matched_fields = []

        for field_name, label, weight in table:
            if field_name == TAGS_FIELD:
                count, snippet = match_tags(terms, candidate.tags)
            else:
                count, snippet = match_text(
                    terms, getattr(candidate, field_name), self.highlight_radius
                )
            if count == 0:
                continue
            relevance += count * weight
            matched_fields.append(field_name)
            highlights.append(Highlight(label=label, snippet=snippet))

        if relevance <= 0:
            return None

        return SearchMatch(
            candidate=candidate,
            relevance=relevance,
            highlights=tuple(highlights),
            matched_fields=tuple(matched_fields),
        )

    def match_all(self, candidates, terms: list[str]) -> list[SearchMatch]:
        matches = []
        for candidate in candidates:
            result = self.match(candidate, terms)
            if result is not None:
                matches.append(result)
        logger.debug(
            f"Matched {len(matches)} of {len(candidates)} candidates for terms {terms}"
        )
        return matches
