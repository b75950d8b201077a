"""
Blob store package.

This package provides the blob store interface and its implementations for
Amazon S3, Google Cloud Storage and the local filesystem.
"""

from imagesync.storage.base import BlobStore
from imagesync.storage.gcs_store import GCSBlobStore
from imagesync.storage.local_store import LocalBlobStore
from imagesync.storage.s3_store import S3BlobStore

__all__ = ["BlobStore", "GCSBlobStore", "LocalBlobStore", "S3BlobStore"]
