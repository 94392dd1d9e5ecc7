"""Record and state types for the product store.

Product prices are held at the single precision they are stored with.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import Enum

Index = int

_FLOAT32 = struct.Struct("<f")


def to_float32(value: float) -> float:
    """Round value to the nearest IEEE-754 single precision number."""
    try:
        return _FLOAT32.unpack(_FLOAT32.pack(value))[0]
    except (struct.error, OverflowError) as e:
        raise ValueError(f"Price {value!r} does not fit single precision: {e}") from e


@dataclass(frozen=True)
class Product:
    """One inventory entry as stored in the data file.

    price is rounded to single precision on construction, so a product
    compares equal to itself after a trip through the file.
    """
    name: str
    code: int
    price: float

    def __post_init__(self):
        object.__setattr__(self, "price", to_float32(self.price))


class StoreState(Enum):
    """Lifecycle of the backing file during a delete.

    STABLE -> REBUILDING -> STABLE on success. A failed reopen after the
    swap leaves the store UNAVAILABLE.
    """
    STABLE = "stable"
    REBUILDING = "rebuilding"
    UNAVAILABLE = "unavailable"
