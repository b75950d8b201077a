"""
Google Cloud Storage blob store.

This module provides the blob store implementation for a GCS bucket. The
google-cloud-storage client is synchronous, so calls run in the default
executor to avoid blocking the event loop.
"""

import asyncio
from typing import Set, Tuple

import structlog
from google.api_core.exceptions import GoogleAPIError, NotFound
from google.auth.exceptions import GoogleAuthError
from google.cloud import storage

from imagesync.core.errors import BlobNotFound, StoreUnavailable
from imagesync.storage.base import BlobStore

logger = structlog.get_logger(__name__)


class GCSBlobStore(BlobStore):
    """Blob store for a Google Cloud Storage bucket."""

    def __init__(self, gcs_client: storage.Client, bucket_name: str) -> None:
        """
        Initialize the GCS blob store.

        Args:
            gcs_client: Google Cloud Storage client
            bucket_name: Bucket holding the images
        """
        self.gcs_client = gcs_client
        self.bucket_name = bucket_name
        self.bucket = self.gcs_client.bucket(bucket_name)

    def _list_names(self) -> Set[str]:
        # The iterator fetches further pages lazily; exhaust it here
        return {blob.name for blob in self.gcs_client.list_blobs(self.bucket_name)}

    async def list_all_keys(self) -> Set[str]:
        loop = asyncio.get_event_loop()
        try:
            keys = await loop.run_in_executor(None, self._list_names)
        except (GoogleAPIError, GoogleAuthError, OSError) as e:
            logger.error("Error listing objects in GCS", bucket=self.bucket_name, error=str(e))
            raise StoreUnavailable("blob store", str(e)) from e

        logger.debug("Listed GCS objects", bucket=self.bucket_name, count=len(keys))
        return keys

    async def get(self, key: str) -> Tuple[bytes, str]:
        loop = asyncio.get_event_loop()
        try:
            blob = await loop.run_in_executor(None, self.bucket.get_blob, key)
            if blob is None:
                raise BlobNotFound(key)
            content = await loop.run_in_executor(None, blob.download_as_bytes)
        except NotFound as e:
            raise BlobNotFound(key) from e
        except (GoogleAPIError, GoogleAuthError, OSError) as e:
            logger.error("Error retrieving object from GCS", key=key, error=str(e))
            raise StoreUnavailable("blob store", str(e)) from e

        return content, blob.content_type or self._guess_content_type(key)

    async def put(self, key: str, content: bytes, content_type: str) -> None:
        blob = self.bucket.blob(key)
        loop = asyncio.get_event_loop()
        try:
            await loop.run_in_executor(
                None,
                lambda: blob.upload_from_string(content, content_type=content_type)
            )
        except (GoogleAPIError, GoogleAuthError, OSError) as e:
            logger.error("Error storing object in GCS", key=key, error=str(e))
            raise StoreUnavailable("blob store", str(e)) from e

        logger.info("Object stored", key=key, size=len(content), content_type=content_type)

    async def delete(self, key: str) -> bool:
        blob = self.bucket.blob(key)
        loop = asyncio.get_event_loop()
        try:
            await loop.run_in_executor(None, blob.delete)
        except NotFound:
            return False
        except (GoogleAPIError, GoogleAuthError, OSError) as e:
            logger.error("Error deleting object from GCS", key=key, error=str(e))
            raise StoreUnavailable("blob store", str(e)) from e

        logger.info("Object deleted", key=key)
        return True
