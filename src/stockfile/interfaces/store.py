"""Protocol definitions for the record store."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Protocol, runtime_checkable

from ..core.types import Index, Product


@runtime_checkable
class RecordSource(Protocol):
    """Read-only view consumed by report generation."""

    def count(self) -> int:
        """Number of whole records in the backing file."""
        ...

    def read_all(self) -> Iterator[Product]:
        """Records in ascending ordinal order, re-read from offset 0 per call."""
        ...


@runtime_checkable
class RecordStore(RecordSource, Protocol):
    """Public API for the fixed-record file store."""

    def append(self, product: Product) -> Index:
        """Append a record; durable on return.

        Returns:
            Ordinal position assigned to the record
        """
        ...

    def read_at(self, index: Index) -> Product:
        """Return the record at index; raise IndexOutOfRange if invalid."""
        ...

    def delete_at(self, index: Index) -> None:
        """Remove the record at index, shifting later records down by one.

        Invariants:
            - On copy failure the original file is untouched
            - Exactly one handle is live on return
        """
        ...

    def close(self) -> None:
        """Close the store and release its file handle."""
        ...
