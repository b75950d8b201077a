"""
Metadata catalog package.

This package provides the catalog interface read by the consistency audit
and its relational implementation.
"""

from imagesync.catalog.base import MetadataCatalog
from imagesync.catalog.sql_catalog import SqlMetadataCatalog

__all__ = ["MetadataCatalog", "SqlMetadataCatalog"]
