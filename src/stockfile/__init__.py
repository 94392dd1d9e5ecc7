"""stockfile - fixed-record binary inventory store in Python."""

from .core.config import StoreConfig, load_config
from .core.errors import (
    StockFileError,
    StoreIOError,
    StoreUnavailable,
    IndexOutOfRange,
    CorruptRecordError,
    ConfigError,
)
from .core.store import FixedRecordStore
from .core.types import Index, Product, StoreState
from .components.codec import FixedRecordCodec, RECORD_SIZE, NAME_CAPACITY
from .components.report import ReportGenerator

__all__ = [
    "StoreConfig",
    "load_config",
    "StockFileError",
    "StoreIOError",
    "StoreUnavailable",
    "IndexOutOfRange",
    "CorruptRecordError",
    "ConfigError",
    "FixedRecordStore",
    "Index",
    "Product",
    "StoreState",
    "FixedRecordCodec",
    "RECORD_SIZE",
    "NAME_CAPACITY",
    "ReportGenerator",
]
