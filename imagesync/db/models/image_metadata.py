"""
Image metadata model for the catalog.

This module defines the catalog entry recorded for every uploaded image. The
table and column names match the schema the upload side writes.
"""

from datetime import datetime, timezone
from typing import List

from sqlalchemy import BigInteger, DateTime, String, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Mapped, mapped_column

from imagesync.db.base import Base


class ImageMetadata(Base):
    """
    Catalog entry for an image.

    ``name`` is the join key with the blob store: a consistent system has
    exactly one blob per catalog name.
    """

    __tablename__ = "ImageMetadata"

    name: Mapped[str] = mapped_column("Name", String, primary_key=True)
    last_updated: Mapped[datetime] = mapped_column(
        "LastUpdated",
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    file_extension: Mapped[str] = mapped_column("FileExtension", String, nullable=False)
    size_bytes: Mapped[int] = mapped_column("Size", BigInteger, nullable=False)

    @classmethod
    async def all_names(cls, db: AsyncSession) -> List[str]:
        """
        Read every image name in a single scan.

        Args:
            db: Database session

        Returns:
            All catalog names
        """
        result = await db.execute(select(cls.name))
        return list(result.scalars().all())

    def __repr__(self) -> str:
        return f"ImageMetadata(name={self.name!r}, size_bytes={self.size_bytes})"
