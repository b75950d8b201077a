"""
SQLAlchemy models for the metadata catalog.
"""

# Import models to register them with the SQLAlchemy metadata
from imagesync.db.models.image_metadata import ImageMetadata

__all__ = ["ImageMetadata"]
