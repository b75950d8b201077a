"""Consistency audit between the metadata catalog and the blob store."""

from imagesync.reconciliation.engine import ReconciliationEngine

__all__ = ["ReconciliationEngine"]
