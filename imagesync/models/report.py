"""
Reconciliation report model.
"""

from typing import FrozenSet, Iterable, List

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_serializer


class ReconciliationReport(BaseModel):
    """
    Result of comparing catalog names against blob keys.

    The report is built per audit and never persisted. ``source`` is a free-form
    label describing what triggered the audit and has no effect on the result.
    """

    model_config = ConfigDict(frozen=True)

    missing_in_blob_store: FrozenSet[str] = Field(default_factory=frozenset)
    extra_in_blob_store: FrozenSet[str] = Field(default_factory=frozenset)
    source: str = "Unknown"

    @computed_field
    @property
    def consistent(self) -> bool:
        return not self.missing_in_blob_store and not self.extra_in_blob_store

    @field_serializer("missing_in_blob_store", "extra_in_blob_store")
    def _sorted(self, names: FrozenSet[str]) -> List[str]:
        return sorted(names)

    @classmethod
    def compare(
            cls, catalog_names: Iterable[str], blob_keys: Iterable[str], source: str
    ) -> "ReconciliationReport":
        """
        Build a report from the two full name sets.

        Args:
            catalog_names: Every name known to the metadata catalog
            blob_keys: Every comparable key in the blob store
            source: Label of the audit trigger

        Returns:
            The report
        """
        names = frozenset(catalog_names)
        keys = frozenset(blob_keys)
        return cls(
            missing_in_blob_store=names - keys,
            extra_in_blob_store=keys - names,
            source=source,
        )
