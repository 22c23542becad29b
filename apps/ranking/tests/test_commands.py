"""Tests for the rank_catalog management command."""

import json
import tempfile
from io import StringIO
from pathlib import Path

from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import SimpleTestCase

import apps.ranking

FIXTURE = Path(apps.ranking.__file__).resolve().parent / "fixtures" / "sample_catalog.json"


class RankCatalogCommandTests(SimpleTestCase):
    """Tests for rank_catalog."""

    def _run(self, *args):
        out = StringIO()
        call_command("rank_catalog", str(FIXTURE), *args, stdout=out)
        return json.loads(out.getvalue())

    def _write(self, content):
        handle = tempfile.NamedTemporaryFile("w", suffix=".json", delete=False, encoding="utf-8")
        with handle:
            handle.write(content)
        self.addCleanup(Path(handle.name).unlink)
        return handle.name

    def test_recommend(self):
        """Test that recommendations exclude completed courses and are ordered."""
        results = self._run("--recommend")
        ids = [r["id"] for r in results]

        self.assertNotIn("course1", ids)
        self.assertEqual(len(ids), 7)
        scores = [r["score"] for r in results]
        self.assertEqual(scores, sorted(scores, reverse=True))
        self.assertTrue(all(r["label"] == "hybrid" for r in results))

    def test_recommend_limit(self):
        """Test that --limit caps recommendations."""
        self.assertEqual(len(self._run("--recommend", "--limit", "3")), 3)

    def test_search(self):
        """Test that search returns relevance-ordered hits with highlights."""
        results = self._run("--search", "business")

        self.assertEqual(results[0]["id"], "course1")
        self.assertTrue(results[0]["highlights"][0].startswith("Title: "))
        relevances = [r["relevance"] for r in results]
        self.assertEqual(relevances, sorted(relevances, reverse=True))

    def test_search_with_filters(self):
        """Test the category and rating filter options."""
        results = self._run("--search", "marketing", "--category", "Marketing", "--min-rating", "4")
        self.assertEqual([r["id"] for r in results], ["course3"])

    def test_empty_search(self):
        """Test that a blank query prints an empty list."""
        self.assertEqual(self._run("--search", ""), [])

    def test_suggest(self):
        """Test search suggestions."""
        self.assertEqual(self._run("--suggest", "found")[0], "Financial Management for Founders")

    def test_popular(self):
        """Test popular search ranking from the query log."""
        self.assertEqual(
            self._run("--popular"),
            [
                {"query": "business fundamentals", "count": 3},
                {"query": "marketing", "count": 2},
                {"query": "finance", "count": 1},
            ],
        )

    def test_missing_file(self):
        """Test that a missing catalog file is a command error."""
        with self.assertRaisesMessage(CommandError, "Catalog file not found"):
            call_command("rank_catalog", "/nonexistent/catalog.json", "--popular")

    def test_invalid_json(self):
        """Test that a malformed file is a command error."""
        path = self._write("{not json")
        with self.assertRaisesMessage(CommandError, "not valid JSON"):
            call_command("rank_catalog", path, "--popular")

    def test_invalid_catalog(self):
        """Test that an invalid catalog payload is a command error."""
        path = self._write(json.dumps({"catalog": {"candidates": [None]}}))
        with self.assertRaisesMessage(CommandError, "Invalid catalog file"):
            call_command("rank_catalog", path, "--search", "business")
