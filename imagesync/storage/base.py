"""
Base blob store for abstracting object storage access.

This module defines the abstract base class for blob stores,
ensuring a consistent interface across different storage implementations.
"""

import abc
import mimetypes
from typing import Set, Tuple


class BlobStore(abc.ABC):
    """Abstract base class for blob stores."""

    @abc.abstractmethod
    async def list_all_keys(self) -> Set[str]:
        """
        List every object key in the store.

        Multi-page listings are followed until the store reports no further
        pages; callers always receive the complete set.

        Returns:
            Set of object keys

        Raises:
            StoreUnavailable: If any page of the listing cannot be read
        """

    @abc.abstractmethod
    async def get(self, key: str) -> Tuple[bytes, str]:
        """
        Read an object.

        Args:
            key: Object key

        Returns:
            Tuple of (content, content_type)

        Raises:
            BlobNotFound: If the key does not exist
            StoreUnavailable: If the store cannot be reached
        """

    @abc.abstractmethod
    async def put(self, key: str, content: bytes, content_type: str) -> None:
        """
        Write an object, replacing any existing object with the same key.

        Args:
            key: Object key
            content: Object bytes
            content_type: MIME type

        Raises:
            StoreUnavailable: If the store cannot be reached
        """

    @abc.abstractmethod
    async def delete(self, key: str) -> bool:
        """
        Delete an object.

        Args:
            key: Object key

        Returns:
            Whether an object was removed (stores that cannot tell return True)

        Raises:
            StoreUnavailable: If the store cannot be reached
        """

    @staticmethod
    def _guess_content_type(key: str) -> str:
        """
        Guess the MIME type of an object based on its extension.

        Args:
            key: Object key

        Returns:
            Guessed MIME type
        """
        mime_type, _ = mimetypes.guess_type(key)
        return mime_type or "application/octet-stream"
