"""
Base catalog for abstracting metadata store access.

This module defines the abstract base class for metadata catalogs,
ensuring a consistent interface across different catalog implementations.
"""

import abc
from typing import Set


class MetadataCatalog(abc.ABC):
    """Abstract base class for metadata catalogs."""

    @abc.abstractmethod
    async def list_all_names(self) -> Set[str]:
        """
        List every image name known to the catalog.

        The full set is materialized before returning, whatever paging the
        underlying store does internally.

        Returns:
            Set of image names

        Raises:
            StoreUnavailable: If the catalog cannot be read
        """
