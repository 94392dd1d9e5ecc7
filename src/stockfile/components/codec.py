"""Fixed-width binary codec for product records.

Every record encodes to exactly RECORD_SIZE bytes.
"""

from __future__ import annotations

import struct

from ..core.errors import CorruptRecordError
from ..core.types import Product

# Record format (little-endian, no alignment):
# [name (50B, NUL padded)] [pad (2B)] [code int32 (4B)] [price float32 (4B)]
RECORD_FORMAT = "<50s2xif"
RECORD_SIZE = struct.calcsize(RECORD_FORMAT)  # 60
NAME_FIELD_SIZE = 50
NAME_CAPACITY = NAME_FIELD_SIZE - 1  # one slot reserved for the terminator
NAME_ENCODING = "utf-8"

_RECORD = struct.Struct(RECORD_FORMAT)


def bounded_name(text: str, capacity: int = NAME_CAPACITY) -> str:
    """Truncate text so its encoded form fits in capacity bytes.

    Multi-byte characters are never split.
    """
    raw = text.encode(NAME_ENCODING)
    if len(raw) <= capacity:
        return text
    return raw[:capacity].decode(NAME_ENCODING, errors="ignore")


class FixedRecordCodec:
    """Encode and decode products to fixed-size blocks.

    Invariants:
        - encode() always returns exactly record_size bytes
        - decode() rejects blocks of any other length
        - Names longer than NAME_CAPACITY bytes are truncated silently
    """

    record_size = RECORD_SIZE

    def encode(self, product: Product) -> bytes:
        """Serialize a product into a fixed-size block."""
        name = bounded_name(product.name).encode(NAME_ENCODING)
        try:
            return _RECORD.pack(name, product.code, product.price)
        except (struct.error, OverflowError) as e:
            raise ValueError(f"Cannot encode {product!r}: {e}") from e

    def decode(self, block: bytes) -> Product:
        """Deserialize a fixed-size block into a product."""
        if len(block) != RECORD_SIZE:
            raise CorruptRecordError(
                f"Record block is {len(block)} bytes, expected {RECORD_SIZE}"
            )
        raw_name, code, price = _RECORD.unpack(block)
        name = raw_name.split(b"\x00", 1)[0].decode(NAME_ENCODING, errors="replace")
        return Product(name=name, code=code, price=price)
