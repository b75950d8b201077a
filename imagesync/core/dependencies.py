"""
Dependency wiring for the Image Store Sync service.

This module builds the collaborator clients from settings and hands them to
the reconciliation engine and the relay worker. Clients are created once per
process by the entrypoints and passed down explicitly.
"""

from typing import Callable, Dict, Tuple

import boto3
import structlog
from fastapi import Request
from google.cloud import storage
from sqlalchemy.ext.asyncio import AsyncEngine

from imagesync.catalog.sql_catalog import SqlMetadataCatalog
from imagesync.core.config import Settings, StorageType
from imagesync.db.session import create_engine, create_session_factory
from imagesync.publisher.sns import SnsNotificationFanout
from imagesync.queues.sqs import SqsNotificationQueue
from imagesync.reconciliation.engine import ReconciliationEngine
from imagesync.relay.worker import RelayWorker
from imagesync.storage.base import BlobStore
from imagesync.storage.gcs_store import GCSBlobStore
from imagesync.storage.local_store import LocalBlobStore
from imagesync.storage.s3_store import S3BlobStore

logger = structlog.get_logger(__name__)


def _require(settings: Settings, *names: str) -> None:
    missing = [name for name in names if not getattr(settings, name)]
    if missing:
        raise ValueError(f"Missing required settings: {', '.join(missing)}")


def _create_s3_store(settings: Settings) -> BlobStore:
    _require(settings, "S3_BUCKET")
    client = boto3.client("s3", region_name=settings.S3_REGION or settings.AWS_REGION)
    return S3BlobStore(client, settings.S3_BUCKET)


def _create_gcs_store(settings: Settings) -> BlobStore:
    _require(settings, "GCS_BUCKET")
    client = storage.Client(project=settings.GCS_PROJECT_ID)
    return GCSBlobStore(client, settings.GCS_BUCKET)


def _create_local_store(settings: Settings) -> BlobStore:
    return LocalBlobStore(settings.LOCAL_STORAGE_PATH)


def create_blob_store(settings: Settings) -> BlobStore:
    """
    Create the blob store selected by ``STORAGE_TYPE``.

    Args:
        settings: Application settings

    Returns:
        Blob store instance

    Raises:
        ValueError: If the storage type is unsupported or not configured
    """
    factories: Dict[str, Callable[[Settings], BlobStore]] = {
        StorageType.S3.value: _create_s3_store,
        StorageType.GCS.value: _create_gcs_store,
        StorageType.LOCAL.value: _create_local_store,
    }

    storage_type = StorageType(settings.STORAGE_TYPE).value
    if storage_type not in factories:
        raise ValueError(
            f"Unsupported storage type: {storage_type}. "
            f"Supported types: {', '.join(factories.keys())}"
        )

    return factories[storage_type](settings)


def create_reconciliation_engine(settings: Settings) -> Tuple[ReconciliationEngine, AsyncEngine]:
    """
    Create the reconciliation engine and the catalog database engine it reads through.

    The caller owns the database engine and must dispose of it on shutdown.

    Args:
        settings: Application settings

    Returns:
        Tuple of (reconciliation engine, database engine)
    """
    db_engine = create_engine(settings.POSTGRES_URI, echo=settings.DEBUG)
    catalog = SqlMetadataCatalog(create_session_factory(db_engine))

    engine = ReconciliationEngine(
        catalog=catalog,
        blob_store=create_blob_store(settings),
        reserved_prefixes=settings.RESERVED_KEY_PREFIXES,
    )
    logger.info(
        "Reconciliation engine configured",
        storage_type=settings.STORAGE_TYPE,
        reserved_prefixes=list(engine.reserved_prefixes),
    )
    return engine, db_engine


def create_relay_worker(settings: Settings) -> RelayWorker:
    """
    Create the relay worker wired to SQS and SNS.

    Args:
        settings: Application settings

    Returns:
        Relay worker
    """
    _require(settings, "SQS_QUEUE_URL", "SNS_TOPIC_ARN")

    queue = SqsNotificationQueue(
        boto3.client("sqs", region_name=settings.AWS_REGION),
        settings.SQS_QUEUE_URL,
    )
    fanout = SnsNotificationFanout(
        boto3.client("sns", region_name=settings.AWS_REGION),
        settings.SNS_TOPIC_ARN,
    )

    return RelayWorker(
        queue=queue,
        fanout=fanout,
        poll_interval=settings.RELAY_POLL_INTERVAL,
        batch_size=settings.RELAY_BATCH_SIZE,
        wait_seconds=settings.RELAY_WAIT_SECONDS,
    )


def get_reconciliation_engine(request: Request) -> ReconciliationEngine:
    """
    FastAPI dependency returning the engine created at application startup.

    Args:
        request: The incoming request

    Returns:
        The reconciliation engine
    """
    return request.app.state.reconciliation_engine
