"""Rebuild-and-swap support for deleting records.

Copies all but one record into a side-by-side temporary file and installs
it in place of the original.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import BinaryIO

from ..core.errors import CorruptRecordError, StoreIOError

logger = logging.getLogger(__name__)


class RecordRebuilder:
    """Writes a rebuilt copy of a record file to temp_path.

    Args:
        temp_path: Side-by-side file receiving the rebuilt records
        record_size: Fixed size of one record in bytes
        fsync: Whether to fsync the temporary file before closing it

    Invariants:
        - The source file is only read, never written
        - On failure the temporary file is removed before the error propagates
        - Records keep their original relative order
    """

    def __init__(self, temp_path: str | Path, record_size: int, fsync: bool = True):
        self.temp_path = Path(temp_path)
        self.record_size = record_size
        self.fsync = fsync

    def copy_without(self, source: BinaryIO, total: int, skip: int) -> int:
        """Copy records 0..total-1 from source, leaving out ordinal skip.

        Returns:
            Number of records written to the temporary file
        """
        copied = 0
        try:
            with open(self.temp_path, "w+b") as tmp:
                for i in range(total):
                    source.seek(i * self.record_size)
                    block = source.read(self.record_size)
                    if len(block) != self.record_size:
                        raise CorruptRecordError(
                            f"Short read at record {i}: {len(block)} of {self.record_size} bytes"
                        )
                    if i == skip:
                        continue
                    self._write_block(tmp, block)
                    copied += 1
                tmp.flush()
                if self.fsync:
                    os.fsync(tmp.fileno())
        except CorruptRecordError as e:
            self.discard()
            raise StoreIOError(f"Rebuild of {self.temp_path} aborted: {e}") from e
        except OSError as e:
            self.discard()
            raise StoreIOError(f"Rebuild of {self.temp_path} failed: {e}") from e

        logger.debug(f"Copied {copied} of {total} records to {self.temp_path}")
        return copied

    def _write_block(self, tmp: BinaryIO, block: bytes) -> None:
        written = tmp.write(block)
        if written != len(block):
            raise OSError(f"Partial write to {self.temp_path}: {written} of {len(block)} bytes")

    def install(self, target: str | Path) -> None:
        """Move the rebuilt file over target.

        os.replace is atomic on POSIX and Windows; target keeps its name.
        """
        os.replace(self.temp_path, target)
        logger.debug(f"Installed {self.temp_path} as {target}")

    def discard(self) -> None:
        """Remove the temporary file if present (best effort)."""
        try:
            self.temp_path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Failed to remove temporary file {self.temp_path}: {e}")
