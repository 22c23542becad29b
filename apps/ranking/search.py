"""
Relevance-ranked search across courses, instructors, lessons and transcripts.

Tokenizer -> FieldMatcher -> filter pipeline -> ordering -> offset/limit.
"""

import logging

from .filters import apply_filters
from .matching import FieldMatcher
from .ordering import paginate, sort_matches
from .suggestions import generate_suggestions
from .tokenizer import tokenize
from .types import Catalog, SearchFilters, SearchMatch, SortKey, SortOrder

logger = logging.getLogger(__name__)


class SearchEngine:
    """Stateless search over an in-memory catalog snapshot."""

    def __init__(self, highlight_radius: int = 20):
        self.matcher = FieldMatcher(highlight_radius=highlight_radius)

    def search(
        self,
        catalog: Catalog,
        query: str,
        filters: SearchFilters | None = None,
        limit: int = 20,
        offset: int = 0,
        sort_by: str = SortKey.RELEVANCE,
        sort_order: str = SortOrder.DESC,
    ) -> list[SearchMatch]:
        """
        Search the catalog.

        An empty or whitespace-only query, or one whose terms are all too
        short, returns no results rather than the whole catalog.
        """
        terms = tokenize(query)
        if not terms:
            return []

        matches = self.matcher.match_all(catalog.candidates, terms)
        matches = apply_filters(matches, filters)
        ordered = sort_matches(matches, sort_by, sort_order)
        page = paginate(ordered, offset, limit)

        logger.debug(
            f"Search '{query}' matched {len(ordered)} candidates, "
            f"returning {len(page)} (offset={offset}, limit={limit})"
        )
        return page

    def suggest(self, catalog: Catalog, prefix: str, limit: int = 8) -> list[str]:
        return generate_suggestions(catalog, prefix, limit)
