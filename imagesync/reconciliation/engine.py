"""
Consistency reconciliation between the metadata catalog and the blob store.

The audit is read-only: it never repairs what it finds. Both stores are read
in full on every call, so there is no state shared between audits and any
number of audits may run concurrently.
"""

import time
from typing import Iterable, Sequence, Set

import structlog

from imagesync.catalog.base import MetadataCatalog
from imagesync.core.errors import StoreUnavailable
from imagesync.models.report import ReconciliationReport
from imagesync.storage.base import BlobStore
from imagesync.utils.metrics import record_audit, record_audit_failure

logger = structlog.get_logger(__name__)

DEFAULT_RESERVED_PREFIXES = ("app/",)


class ReconciliationEngine:
    """Compares catalog names with blob keys and reports the differences."""

    def __init__(
            self,
            catalog: MetadataCatalog,
            blob_store: BlobStore,
            reserved_prefixes: Sequence[str] = DEFAULT_RESERVED_PREFIXES,
    ) -> None:
        """
        Initialize the engine.

        Args:
            catalog: Metadata catalog to read names from
            blob_store: Blob store to read keys from
            reserved_prefixes: Key prefixes owned by the hosting application;
                matching keys are left out of the comparison
        """
        self.catalog = catalog
        self.blob_store = blob_store
        self.reserved_prefixes = tuple(p for p in reserved_prefixes if p)

    def is_reserved(self, key: str) -> bool:
        """Whether a blob key belongs to the hosting application rather than the catalog."""
        return key.startswith(self.reserved_prefixes) if self.reserved_prefixes else False

    def comparable_keys(self, keys: Iterable[str]) -> Set[str]:
        return {key for key in keys if not self.is_reserved(key)}

    async def audit(self, source: str) -> ReconciliationReport:
        """
        Run one consistency audit.

        Args:
            source: Label of what triggered the audit (for observability only)

        Returns:
            The reconciliation report

        Raises:
            StoreUnavailable: If either store could not be read in full; no
                partial report is produced
        """
        start_time = time.time()
        log = logger.bind(source=source)

        try:
            catalog_names = await self.catalog.list_all_names()
            blob_keys = self.comparable_keys(await self.blob_store.list_all_keys())
        except StoreUnavailable as e:
            record_audit_failure()
            log.error("Consistency audit failed", store=e.store, error=str(e))
            raise

        report = ReconciliationReport.compare(catalog_names, blob_keys, source)
        duration = time.time() - start_time

        record_audit(
            consistent=report.consistent,
            missing=len(report.missing_in_blob_store),
            extra=len(report.extra_in_blob_store),
            duration=duration,
        )
        log.info(
            "Consistency audit completed",
            consistent=report.consistent,
            catalog_names=len(catalog_names),
            blob_keys=len(blob_keys),
            missing_in_blob_store=len(report.missing_in_blob_store),
            extra_in_blob_store=len(report.extra_in_blob_store),
            duration=round(duration, 3),
        )

        return report
