"""Errors raised by the product record store.

One base class, with a subclass per way a store operation can fail.
"""

from __future__ import annotations


class StockFileError(Exception):
    """Base exception for all stockfile errors."""
    pass


class StoreIOError(StockFileError, OSError):
    """Raised when an underlying file operation fails."""
    pass


class StoreUnavailable(StoreIOError):
    """Raised when the store has no live file handle."""

    def __init__(self, message: str = "store unavailable"):
        super().__init__(message)


class IndexOutOfRange(StockFileError, IndexError):
    """Raised when a record index is outside [0, count)."""

    def __init__(self, index: int, count: int):
        self.index = index
        self.count = count
        if count:
            detail = f"valid range is 0 .. {count - 1}"
        else:
            detail = "store is empty"
        super().__init__(f"Index {index} out of range ({detail})")


class CorruptRecordError(StockFileError):
    """Raised when record bytes are malformed or truncated."""
    pass


class ConfigError(StockFileError):
    """Raised when configuration is missing or invalid."""
    pass
