class RankingError(Exception):
    """Base class for errors raised at the ranking engine boundary."""
    pass


class InvalidCandidateError(RankingError):
    """Raised when a candidate list violates the engine's input contract."""
    pass
