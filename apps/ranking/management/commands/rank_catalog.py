import json
from pathlib import Path

from django.core.management.base import BaseCommand, CommandError
from rest_framework.exceptions import ValidationError

from apps.ranking.exceptions import RankingError
from apps.ranking.serializers import (
    CatalogSerializer,
    RecommendationRequestSerializer,
    ScoredResultSerializer,
    SearchMatchSerializer,
    SearchRequestSerializer,
)
from apps.ranking.services import PersonalizationService, SearchService
from apps.ranking.types import SortKey, SortOrder


class Command(BaseCommand):
    help = (
        "Run the ranking engine over a JSON catalog file and print the results as JSON. "
        "The file holds a 'catalog' object and, for recommendations, optional "
        "'profile', 'progress', 'behavior' and 'context' objects; 'query_log' feeds --popular."
    )

    def add_arguments(self, parser):
        parser.add_argument("catalog_file", type=str, help="Path to the JSON catalog file.")

        mode = parser.add_mutually_exclusive_group(required=True)
        mode.add_argument("--recommend", action="store_true", help="Rank recommendations for the file's subject.")
        mode.add_argument("--search", type=str, metavar="QUERY", help="Search the catalog.")
        mode.add_argument("--suggest", type=str, metavar="PREFIX", help="List search suggestions.")
        mode.add_argument("--popular", action="store_true", help="Rank the file's query_log.")

        parser.add_argument("--limit", type=int, default=None, help="Maximum number of results.")
        parser.add_argument("--offset", type=int, default=0, help="Search result offset.")
        parser.add_argument("--sort-by", choices=SortKey.values, default=SortKey.RELEVANCE)
        parser.add_argument("--sort-order", choices=SortOrder.values, default=SortOrder.DESC)
        parser.add_argument("--category", type=str, default=None, help="Search filter: category.")
        parser.add_argument("--min-rating", type=float, default=None, help="Search filter: rating floor.")

    def handle(self, *args, **options):
        payload = self._load(options["catalog_file"])

        try:
            if options["popular"]:
                result = [
                    {"query": query, "count": count}
                    for query, count in SearchService.popular_searches(
                        payload.get("query_log", []), limit=options["limit"]
                    )
                ]
            else:
                catalog = self._build(CatalogSerializer, payload.get("catalog", {}))
                if options["recommend"]:
                    result = self._recommend(catalog, payload, options)
                elif options["search"] is not None:
                    result = self._search(catalog, options)
                else:
                    result = SearchService.suggest(catalog, options["suggest"], limit=options["limit"])
        except ValidationError as e:
            raise CommandError(f"Invalid catalog file: {e.detail}")
        except RankingError as e:
            raise CommandError(str(e))

        self.stdout.write(json.dumps(result, indent=2, default=str))

    def _load(self, path_str):
        path = Path(path_str)
        if not path.exists():
            raise CommandError(f"Catalog file not found: {path}")
        try:
            with path.open(encoding="utf-8") as f:
                payload = json.load(f)
        except json.JSONDecodeError as e:
            raise CommandError(f"Catalog file is not valid JSON: {e}")
        if not isinstance(payload, dict):
            raise CommandError("Catalog file must contain a JSON object.")
        return payload

    @staticmethod
    def _build(serializer_class, data):
        serializer = serializer_class(data=data)
        serializer.is_valid(raise_exception=True)
        return serializer.save()

    def _recommend(self, catalog, payload, options):
        request = self._build(
            RecommendationRequestSerializer,
            {key: payload[key] for key in ("profile", "progress", "behavior", "context") if key in payload},
        )
        results = PersonalizationService.recommend(
            request["profile"],
            list(catalog.candidates),
            progress=request["progress"],
            behavior=request["behavior"],
            context=request["context"],
            limit=options["limit"] or request["limit"],
        )
        return ScoredResultSerializer(results, many=True).data

    def _search(self, catalog, options):
        filters = {}
        if options["category"] is not None:
            filters["category"] = options["category"]
        if options["min_rating"] is not None:
            filters["min_rating"] = options["min_rating"]

        request = self._build(
            SearchRequestSerializer,
            {
                "query": options["search"],
                "filters": filters or None,
                "limit": options["limit"],
                "offset": options["offset"],
                "sort_by": options["sort_by"],
                "sort_order": options["sort_order"],
            },
        )
        results = SearchService.search(catalog, **request)
        return SearchMatchSerializer(results, many=True).data
