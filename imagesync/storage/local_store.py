"""
Local filesystem blob store.

Keys are paths relative to the storage root, always using forward slashes, so
``app/logo.png`` maps to ``<root>/app/logo.png``.
"""

import asyncio
import os
from pathlib import Path
from typing import Set, Tuple, Union

import aiofiles
import structlog

from imagesync.core.errors import BlobNotFound, StoreUnavailable
from imagesync.storage.base import BlobStore

logger = structlog.get_logger(__name__)


class LocalBlobStore(BlobStore):
    """Blob store for a local directory."""

    def __init__(self, root: Union[str, Path]) -> None:
        """
        Initialize the local blob store.

        Args:
            root: Directory holding the objects
        """
        self.root = Path(root)
        os.makedirs(self.root, exist_ok=True)

    def _path_for(self, key: str) -> Path:
        path = (self.root / key).resolve()
        if self.root.resolve() not in path.parents:
            raise ValueError(f"Key escapes the storage root: {key}")
        return path

    def _walk_keys(self) -> Set[str]:
        keys: Set[str] = set()

        def on_error(error: OSError) -> None:
            raise error

        for dirpath, _, filenames in os.walk(self.root, onerror=on_error):
            for filename in filenames:
                full_path = Path(dirpath) / filename
                keys.add(full_path.relative_to(self.root).as_posix())

        return keys

    async def list_all_keys(self) -> Set[str]:
        loop = asyncio.get_event_loop()
        try:
            keys = await loop.run_in_executor(None, self._walk_keys)
        except OSError as e:
            logger.error("Error scanning directory", root=str(self.root), error=str(e))
            raise StoreUnavailable("blob store", str(e)) from e

        return keys

    async def get(self, key: str) -> Tuple[bytes, str]:
        path = self._path_for(key)
        if not path.is_file():
            raise BlobNotFound(key)

        try:
            async with aiofiles.open(path, "rb") as f:
                content = await f.read()
        except OSError as e:
            raise StoreUnavailable("blob store", str(e)) from e

        return content, self._guess_content_type(key)

    async def put(self, key: str, content: bytes, content_type: str) -> None:
        path = self._path_for(key)
        try:
            os.makedirs(path.parent, exist_ok=True)
            async with aiofiles.open(path, "wb") as f:
                await f.write(content)
        except OSError as e:
            raise StoreUnavailable("blob store", str(e)) from e

        logger.info("Object stored", key=key, size=len(content), content_type=content_type)

    async def delete(self, key: str) -> bool:
        path = self._path_for(key)
        if not path.is_file():
            return False

        try:
            os.remove(path)
        except OSError as e:
            raise StoreUnavailable("blob store", str(e)) from e

        logger.info("Object deleted", key=key)
        return True
