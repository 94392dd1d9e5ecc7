"""Protocol definitions for stockfile components."""

from .codec import RecordCodec
from .store import RecordSource, RecordStore

__all__ = ["RecordCodec", "RecordSource", "RecordStore"]
