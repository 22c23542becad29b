"""
Ranking engine for the education platform.

Two pure entry points share one shape: decompose an item against a query or a
subject into weighted factors, aggregate, sort deterministically and return an
auditable breakdown.

- Personalized recommendations: apps.ranking.services.PersonalizationService
- Multi-field search and suggestions: apps.ranking.services.SearchService
"""
