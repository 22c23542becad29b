"""Query normalization shared by search and the behavior factors."""

import re

MIN_TERM_LENGTH = 3

# Apostrophes separate words, so contractions fall apart into short fragments
_TERM_SEPARATORS = re.compile(r"[\s'’]+")


def normalize_token(token: str) -> str:
    """Strips every non-alphanumeric character and lower-cases the rest."""
    return "".join(ch for ch in token if ch.isalnum()).lower()


def tokenize(query: str | None) -> list[str]:
    """
    Splits a raw query into search terms.

    Order and duplicates are preserved so highlights follow the query.
    Terms shorter than MIN_TERM_LENGTH are dropped, which makes an empty
    result the caller's signal that there is nothing to search for.

        >>> tokenize("It's a GREAT course!!")
        ['great', 'course']
    """
    if not query:
        return []
    terms = (normalize_token(token) for token in _TERM_SEPARATORS.split(query))
    return [term for term in terms if len(term) >= MIN_TERM_LENGTH]
