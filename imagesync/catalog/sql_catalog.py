"""
Relational metadata catalog.

This module reads catalog entries from the ``ImageMetadata`` table through an
SQLAlchemy async session factory.
"""

from typing import Set

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from imagesync.catalog.base import MetadataCatalog
from imagesync.core.errors import StoreUnavailable
from imagesync.db.models.image_metadata import ImageMetadata

logger = structlog.get_logger(__name__)


class SqlMetadataCatalog(MetadataCatalog):
    """Catalog backed by the relational image metadata table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """
        Initialize the catalog.

        Args:
            session_factory: Factory producing sessions bound to the catalog database
        """
        self.session_factory = session_factory

    async def list_all_names(self) -> Set[str]:
        try:
            async with self.session_factory() as session:
                names = await ImageMetadata.all_names(session)
        except (SQLAlchemyError, OSError) as e:
            logger.error("Error reading catalog names", error=str(e))
            raise StoreUnavailable("catalog", str(e)) from e

        logger.debug("Read catalog names", count=len(names))
        return set(names)
