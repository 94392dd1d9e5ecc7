"""stockfile core package."""

from .store import FixedRecordStore

__all__ = ["FixedRecordStore"]
