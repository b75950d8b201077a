"""
Unit tests for settings and dependency wiring.
"""

import os
import tempfile
import unittest
from unittest.mock import MagicMock, patch

from imagesync.core import dependencies
from imagesync.core.config import Settings
from imagesync.publisher.sns import SnsNotificationFanout
from imagesync.queues.sqs import SqsNotificationQueue
from imagesync.reconciliation.engine import ReconciliationEngine
from imagesync.storage.local_store import LocalBlobStore
from imagesync.storage.s3_store import S3BlobStore


class TestSettings(unittest.TestCase):
    """Unit tests for the Settings class."""

    def test_postgres_uri_assembled(self):
        """Test that the catalog URI is built from its components."""
        settings = Settings(
            POSTGRES_HOST="db",
            POSTGRES_PORT="5433",
            POSTGRES_USER="sync",
            POSTGRES_PASSWORD="secret",
            POSTGRES_DB="images",
        )

        self.assertEqual(settings.POSTGRES_URI, "postgresql+asyncpg://sync:secret@db:5433/images")

    def test_explicit_postgres_uri_kept(self):
        """Test that an explicit URI wins."""
        settings = Settings(POSTGRES_URI="sqlite+aiosqlite:///catalog.db")

        self.assertEqual(settings.POSTGRES_URI, "sqlite+aiosqlite:///catalog.db")

    def test_relay_defaults(self):
        """Test the relay defaults."""
        settings = Settings()

        self.assertEqual(settings.RELAY_BATCH_SIZE, 10)
        self.assertEqual(settings.RESERVED_KEY_PREFIXES, ["app/"])

    def test_bare_reserved_prefix_from_environment(self):
        """Test that the bare prefix match can be restored through the environment."""
        with patch.dict(os.environ, {"RESERVED_KEY_PREFIXES": '["app"]'}):
            settings = Settings()

        engine = ReconciliationEngine(None, None, reserved_prefixes=settings.RESERVED_KEY_PREFIXES)

        self.assertEqual(settings.RESERVED_KEY_PREFIXES, ["app"])
        self.assertTrue(engine.is_reserved("apple.jpg"))

    def test_batch_size_bounds(self):
        """Test that the batch size is validated."""
        with self.assertRaises(ValueError):
            Settings(RELAY_BATCH_SIZE=11)


class TestDependencies(unittest.TestCase):
    """Unit tests for the collaborator factories."""

    def test_local_blob_store(self):
        """Test building the local blob store."""
        with tempfile.TemporaryDirectory() as temp_dir:
            store = dependencies.create_blob_store(
                Settings(STORAGE_TYPE="local", LOCAL_STORAGE_PATH=temp_dir)
            )

            self.assertIsInstance(store, LocalBlobStore)

    @patch("imagesync.core.dependencies.boto3")
    def test_s3_blob_store(self, mock_boto3):
        """Test building the S3 blob store."""
        store = dependencies.create_blob_store(
            Settings(STORAGE_TYPE="s3", S3_BUCKET="images", AWS_REGION="eu-west-1")
        )

        self.assertIsInstance(store, S3BlobStore)
        self.assertEqual(store.bucket_name, "images")
        mock_boto3.client.assert_called_once_with("s3", region_name="eu-west-1")

    def test_s3_requires_bucket(self):
        """Test that a missing bucket is reported."""
        with self.assertRaises(ValueError):
            dependencies.create_blob_store(Settings(STORAGE_TYPE="s3", S3_BUCKET=None))

    @patch("imagesync.core.dependencies.boto3")
    def test_relay_worker(self, mock_boto3):
        """Test building the relay worker."""
        mock_boto3.client.return_value = MagicMock()

        worker = dependencies.create_relay_worker(Settings(
            SQS_QUEUE_URL="https://sqs.example/queue",
            SNS_TOPIC_ARN="arn:aws:sns:us-east-1:1:uploads",
            RELAY_POLL_INTERVAL=30,
            RELAY_BATCH_SIZE=5,
        ))

        self.assertIsInstance(worker.queue, SqsNotificationQueue)
        self.assertIsInstance(worker.fanout, SnsNotificationFanout)
        self.assertEqual(worker.poll_interval, 30)
        self.assertEqual(worker.batch_size, 5)

    def test_relay_worker_requires_queue_and_topic(self):
        """Test that missing relay settings are reported."""
        with self.assertRaises(ValueError):
            dependencies.create_relay_worker(Settings(SQS_QUEUE_URL=None, SNS_TOPIC_ARN=None))


if __name__ == "__main__":
    unittest.main()
