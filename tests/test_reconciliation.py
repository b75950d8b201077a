"""
Unit tests for the consistency audit.

This module contains tests for the ReconciliationEngine and the
ReconciliationReport it produces.
"""

import asyncio
import json
import unittest

from imagesync.core.errors import StoreUnavailable
from imagesync.models.report import ReconciliationReport
from imagesync.reconciliation.engine import ReconciliationEngine

from tests.fakes import InMemoryBlobStore, InMemoryCatalog


class TestReconciliationEngine(unittest.IsolatedAsyncioTestCase):
    """Unit tests for the ReconciliationEngine class."""

    def setUp(self):
        """Set up the test environment."""
        self.catalog = InMemoryCatalog()
        self.blob_store = InMemoryBlobStore()
        self.engine = ReconciliationEngine(self.catalog, self.blob_store)

    async def test_reports_differences_in_both_directions(self):
        """Test the report for a catalog and blob store that disagree."""
        self.catalog.names = {"a.jpg", "b.jpg"}
        self.blob_store = InMemoryBlobStore(["a.jpg", "c.jpg"])
        self.engine.blob_store = self.blob_store

        report = await self.engine.audit("test")

        self.assertFalse(report.consistent)
        self.assertEqual(report.missing_in_blob_store, {"b.jpg"})
        self.assertEqual(report.extra_in_blob_store, {"c.jpg"})
        self.assertEqual(report.source, "test")

    async def test_consistent_when_sets_match(self):
        """Test that equal name and key sets yield a consistent report."""
        self.catalog.names = {"a.jpg", "b.png"}
        self.engine.blob_store = InMemoryBlobStore(["b.png", "a.jpg"])

        report = await self.engine.audit("test")

        self.assertTrue(report.consistent)
        self.assertEqual(report.missing_in_blob_store, frozenset())
        self.assertEqual(report.extra_in_blob_store, frozenset())

    async def test_empty_stores_are_consistent(self):
        """Test that two empty stores agree."""
        report = await self.engine.audit("test")

        self.assertTrue(report.consistent)

    async def test_reserved_prefix_keys_are_excluded(self):
        """Test that keys owned by the hosting application are not compared."""
        self.catalog.names = {"cat.jpg"}
        self.engine.blob_store = InMemoryBlobStore(["app/logo.png", "cat.jpg"])

        report = await self.engine.audit("test")

        self.assertTrue(report.consistent)

    async def test_reserved_prefix_is_a_directory_prefix(self):
        """Test that names merely starting with the prefix text are still compared."""
        self.catalog.names = set()
        self.engine.blob_store = InMemoryBlobStore(["apple.jpg", "app/style.css"])

        report = await self.engine.audit("test")

        self.assertEqual(report.extra_in_blob_store, {"apple.jpg"})

    async def test_custom_reserved_prefixes(self):
        """Test that several reserved prefixes can be configured."""
        engine = ReconciliationEngine(
            InMemoryCatalog(),
            InMemoryBlobStore(["static/a.css", "thumbs/a.jpg", "a.jpg"]),
            reserved_prefixes=["static/", "thumbs/"],
        )

        report = await engine.audit("test")

        self.assertEqual(report.extra_in_blob_store, {"a.jpg"})

    async def test_audit_is_idempotent(self):
        """Test that consecutive audits of unchanged stores give identical reports."""
        self.catalog.names = {"a.jpg", "b.jpg"}
        self.engine.blob_store = InMemoryBlobStore(["a.jpg", "c.jpg"])

        first = await self.engine.audit("test")
        second = await self.engine.audit("test")

        self.assertEqual(first, second)

    async def test_audit_does_not_modify_stores(self):
        """Test that the audit only reads."""
        self.catalog.names = {"a.jpg"}
        self.engine.blob_store = InMemoryBlobStore(["c.jpg"])

        await self.engine.audit("test")

        self.assertEqual(self.catalog.names, {"a.jpg"})
        self.assertEqual(set(self.engine.blob_store.objects), {"c.jpg"})

    async def test_catalog_unavailable_propagates(self):
        """Test that a catalog failure aborts the audit without a report."""
        self.catalog.unavailable = True

        with self.assertRaises(StoreUnavailable) as ctx:
            await self.engine.audit("test")

        self.assertEqual(ctx.exception.store, "catalog")

    async def test_blob_store_unavailable_propagates(self):
        """Test that a blob store failure aborts the audit without a report."""
        self.catalog.names = {"a.jpg"}
        self.blob_store.unavailable = True

        with self.assertRaises(StoreUnavailable) as ctx:
            await self.engine.audit("test")

        self.assertEqual(ctx.exception.store, "blob store")

    async def test_concurrent_audits(self):
        """Test that audits running concurrently each see the full stores."""
        self.catalog.names = {"a.jpg", "b.jpg"}
        self.engine.blob_store = InMemoryBlobStore(["a.jpg", "c.jpg"])

        reports = await asyncio.gather(*(self.engine.audit(f"run-{i}") for i in range(5)))

        for report in reports:
            self.assertEqual(report.missing_in_blob_store, {"b.jpg"})
            self.assertEqual(report.extra_in_blob_store, {"c.jpg"})
        self.assertEqual({r.source for r in reports}, {f"run-{i}" for i in range(5)})

    def test_is_reserved(self):
        """Test reserved key detection."""
        self.assertTrue(self.engine.is_reserved("app/index.html"))
        self.assertFalse(self.engine.is_reserved("apple.jpg"))
        self.assertFalse(ReconciliationEngine(None, None, reserved_prefixes=[]).is_reserved("app/x"))


class TestReconciliationReport(unittest.TestCase):
    """Unit tests for the ReconciliationReport model."""

    def test_compare(self):
        """Test the set arithmetic of compare."""
        names = {"x", "y", "z"}
        keys = {"y", "z", "w"}

        report = ReconciliationReport.compare(names, keys, "test")

        self.assertEqual(report.missing_in_blob_store, names - keys)
        self.assertEqual(report.extra_in_blob_store, keys - names)
        self.assertEqual(report.consistent, names == keys)

    def test_json_serialization(self):
        """Test that sets are serialized as sorted lists with the consistency flag."""
        report = ReconciliationReport.compare({"b.jpg", "a.jpg"}, set(), "Scheduled Event")

        data = json.loads(report.model_dump_json())

        self.assertEqual(data["missing_in_blob_store"], ["a.jpg", "b.jpg"])
        self.assertEqual(data["extra_in_blob_store"], [])
        self.assertFalse(data["consistent"])
        self.assertEqual(data["source"], "Scheduled Event")

    def test_default_source(self):
        """Test the default trigger label."""
        self.assertEqual(ReconciliationReport().source, "Unknown")
        self.assertTrue(ReconciliationReport().consistent)


if __name__ == "__main__":
    unittest.main()
