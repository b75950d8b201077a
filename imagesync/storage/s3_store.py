"""
Amazon S3 blob store.

This module provides the blob store implementation for an S3 bucket. The
boto3 client is synchronous, so calls run in the default executor to avoid
blocking the event loop.
"""

import asyncio
from typing import Any, Set, Tuple

import structlog
from botocore.exceptions import BotoCoreError, ClientError

from imagesync.core.errors import BlobNotFound, StoreUnavailable
from imagesync.storage.base import BlobStore

logger = structlog.get_logger(__name__)

_NOT_FOUND_CODES = {"NoSuchKey", "404", "NotFound"}


class S3BlobStore(BlobStore):
    """Blob store for an Amazon S3 bucket."""

    def __init__(self, s3_client: Any, bucket_name: str) -> None:
        """
        Initialize the S3 blob store.

        Args:
            s3_client: boto3 S3 client
            bucket_name: Bucket holding the images
        """
        self.s3_client = s3_client
        self.bucket_name = bucket_name

    def _list_keys(self) -> Set[str]:
        keys: Set[str] = set()

        # Use paginator to follow continuation tokens until the listing is exhausted
        paginator = self.s3_client.get_paginator("list_objects_v2")
        for page in paginator.paginate(Bucket=self.bucket_name):
            for obj in page.get("Contents", []):
                keys.add(obj["Key"])

        return keys

    async def list_all_keys(self) -> Set[str]:
        loop = asyncio.get_event_loop()
        try:
            keys = await loop.run_in_executor(None, self._list_keys)
        except (ClientError, BotoCoreError) as e:
            logger.error("Error listing objects in S3", bucket=self.bucket_name, error=str(e))
            raise StoreUnavailable("blob store", str(e)) from e

        logger.debug("Listed S3 objects", bucket=self.bucket_name, count=len(keys))
        return keys

    def _read_object(self, key: str) -> Tuple[bytes, str]:
        response = self.s3_client.get_object(Bucket=self.bucket_name, Key=key)
        content = response["Body"].read()
        return content, response.get("ContentType") or self._guess_content_type(key)

    async def get(self, key: str) -> Tuple[bytes, str]:
        loop = asyncio.get_event_loop()
        try:
            return await loop.run_in_executor(None, self._read_object, key)
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in _NOT_FOUND_CODES:
                raise BlobNotFound(key) from e
            logger.error("Error retrieving object from S3", key=key, error=str(e))
            raise StoreUnavailable("blob store", str(e)) from e
        except BotoCoreError as e:
            logger.error("Error retrieving object from S3", key=key, error=str(e))
            raise StoreUnavailable("blob store", str(e)) from e

    async def put(self, key: str, content: bytes, content_type: str) -> None:
        loop = asyncio.get_event_loop()
        try:
            await loop.run_in_executor(
                None,
                lambda: self.s3_client.put_object(
                    Bucket=self.bucket_name,
                    Key=key,
                    Body=content,
                    ContentType=content_type,
                )
            )
        except (ClientError, BotoCoreError) as e:
            logger.error("Error storing object in S3", key=key, error=str(e))
            raise StoreUnavailable("blob store", str(e)) from e

        logger.info("Object stored", key=key, size=len(content), content_type=content_type)

    async def delete(self, key: str) -> bool:
        loop = asyncio.get_event_loop()
        try:
            await loop.run_in_executor(
                None,
                lambda: self.s3_client.delete_object(Bucket=self.bucket_name, Key=key)
            )
        except (ClientError, BotoCoreError) as e:
            logger.error("Error deleting object from S3", key=key, error=str(e))
            raise StoreUnavailable("blob store", str(e)) from e

        logger.info("Object deleted", key=key)
        return True
