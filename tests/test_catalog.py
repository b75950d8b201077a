"""
Unit tests for the SQL metadata catalog.

The catalog is exercised against a SQLite database through aiosqlite.
"""

import tempfile
import unittest
from pathlib import Path

from imagesync.catalog.sql_catalog import SqlMetadataCatalog
from imagesync.core.errors import StoreUnavailable
from imagesync.db.base import Base
from imagesync.db.models.image_metadata import ImageMetadata
from imagesync.db.session import create_engine, create_session_factory, dispose_engine


class TestSqlMetadataCatalog(unittest.IsolatedAsyncioTestCase):
    """Unit tests for the SqlMetadataCatalog class."""

    async def asyncSetUp(self):
        """Set up the test environment."""
        self.temp_dir = tempfile.TemporaryDirectory()
        db_path = Path(self.temp_dir.name) / "catalog.db"
        self.engine = create_engine(f"sqlite+aiosqlite:///{db_path}")
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        self.session_factory = create_session_factory(self.engine)
        self.catalog = SqlMetadataCatalog(self.session_factory)

    async def asyncTearDown(self):
        """Clean up the test environment."""
        await dispose_engine(self.engine)
        self.temp_dir.cleanup()

    async def add_images(self, *names):
        async with self.session_factory() as session:
            session.add_all([
                ImageMetadata(name=name, file_extension=Path(name).suffix, size_bytes=100)
                for name in names
            ])
            await session.commit()

    async def test_empty_catalog(self):
        """Test that an empty table yields no names."""
        self.assertEqual(await self.catalog.list_all_names(), set())

    async def test_list_all_names(self):
        """Test reading every catalog name."""
        await self.add_images("a.jpg", "b.png", "c.gif")

        self.assertEqual(await self.catalog.list_all_names(), {"a.jpg", "b.png", "c.gif"})

    async def test_last_updated_defaults(self):
        """Test that entries get a modification timestamp."""
        await self.add_images("a.jpg")

        async with self.session_factory() as session:
            entry = await session.get(ImageMetadata, "a.jpg")

        self.assertIsNotNone(entry.last_updated)
        self.assertEqual(entry.size_bytes, 100)

    async def test_missing_table_is_store_unavailable(self):
        """Test that database errors are translated."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

        with self.assertRaises(StoreUnavailable) as ctx:
            await self.catalog.list_all_names()

        self.assertEqual(ctx.exception.store, "catalog")


if __name__ == "__main__":
    unittest.main()
