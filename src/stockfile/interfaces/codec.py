"""Protocol definition for record codecs."""

from __future__ import annotations

from typing import Protocol

from ..core.types import Product


class RecordCodec(Protocol):
    """Fixed-width serializer for products."""

    record_size: int

    def encode(self, product: Product) -> bytes:
        """Return exactly record_size bytes for product."""
        ...

    def decode(self, block: bytes) -> Product:
        """Inverse of encode; raise CorruptRecordError on a wrong-sized block."""
        ...
