"""
Unit tests for the scheduled and command-line audit triggers.
"""

import io
import json
import unittest
from contextlib import redirect_stdout
from unittest.mock import AsyncMock, MagicMock, patch

from imagesync.core.errors import StoreUnavailable
from imagesync.models.report import ReconciliationReport
from imagesync.reconciliation import handler


class TestAuditTriggers(unittest.TestCase):
    """Unit tests for lambda_handler and the imagesync-audit command."""

    def setUp(self):
        """Set up the test environment."""
        self.engine = MagicMock()
        self.engine.audit = AsyncMock(side_effect=lambda source: ReconciliationReport.compare(
            {"a.jpg"}, {"a.jpg", "b.jpg"}, source
        ))
        self.db_engine = MagicMock()

        factory_patcher = patch.object(
            handler, "create_reconciliation_engine", return_value=(self.engine, self.db_engine)
        )
        dispose_patcher = patch.object(handler, "dispose_engine", new_callable=AsyncMock)
        logging_patcher = patch.object(handler, "configure_logging")
        logger_patcher = patch.object(handler, "logger")
        self.create_engine = factory_patcher.start()
        self.dispose_engine = dispose_patcher.start()
        self.addCleanup(factory_patcher.stop)
        self.addCleanup(dispose_patcher.stop)
        logging_patcher.start()
        logger_patcher.start()
        self.addCleanup(logging_patcher.stop)
        self.addCleanup(logger_patcher.stop)

    def test_source_from_event(self):
        """Test extracting the trigger label."""
        self.assertEqual(handler.source_from_event({"detail-type": "Scheduled Event"}), "Scheduled Event")
        self.assertEqual(handler.source_from_event({"DetailType": "Nightly"}), "Nightly")
        self.assertEqual(handler.source_from_event({}), "Unknown")
        self.assertEqual(handler.source_from_event(None), "Unknown")

    def test_lambda_handler(self):
        """Test the scheduled trigger response."""
        response = handler.lambda_handler({"detail-type": "Scheduled Event"}, None)

        self.assertEqual(response["statusCode"], 200)
        body = json.loads(response["body"])
        self.assertEqual(body["extra_in_blob_store"], ["b.jpg"])
        self.assertEqual(body["source"], "Scheduled Event")
        self.engine.audit.assert_awaited_once_with("Scheduled Event")
        self.dispose_engine.assert_awaited_once_with(self.db_engine)

    def test_lambda_handler_propagates_store_failure(self):
        """Test that a store failure fails the invocation and still releases the pool."""
        self.engine.audit = AsyncMock(side_effect=StoreUnavailable("blob store", "timeout"))

        with self.assertRaises(StoreUnavailable):
            handler.lambda_handler({}, None)

        self.dispose_engine.assert_awaited_once_with(self.db_engine)

    def test_cli_prints_report(self):
        """Test the audit command output."""
        stdout = io.StringIO()
        with redirect_stdout(stdout):
            status = handler.main(["--source", "ops"])

        self.assertEqual(status, 0)
        report = json.loads(stdout.getvalue())
        self.assertEqual(report["source"], "ops")
        self.assertFalse(report["consistent"])

    def test_cli_exits_non_zero_when_store_unavailable(self):
        """Test the audit command exit status on a store failure."""
        self.engine.audit = AsyncMock(side_effect=StoreUnavailable("catalog", "refused"))

        stdout = io.StringIO()
        with redirect_stdout(stdout):
            status = handler.main([])

        self.assertEqual(status, 1)
        self.engine.audit.assert_awaited_once_with("cli")


if __name__ == "__main__":
    unittest.main()
