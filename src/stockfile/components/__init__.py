"""Building blocks of the record store."""

from .codec import FixedRecordCodec
from .rebuild import RecordRebuilder
from .report import ReportGenerator

__all__ = ["FixedRecordCodec", "RecordRebuilder", "ReportGenerator"]
