"""Positional product store over a single binary file.

Owns the backing file handle; delete goes through the rebuilder.
"""

from __future__ import annotations
import os
import logging
from pathlib import Path
from typing import BinaryIO, Iterator
from .types import Index, Product, StoreState
from .config import StoreConfig, default_temp_path
from .errors import ConfigError, CorruptRecordError, IndexOutOfRange, StoreIOError, StoreUnavailable
from ..components.codec import FixedRecordCodec
from ..components.rebuild import RecordRebuilder
from ..interfaces.codec import RecordCodec

logger = logging.getLogger(__name__)


class FixedRecordStore:
    """Dense file of fixed-size product records addressed by position.

    Args:
        path: Backing binary file
        temp_path: Side-by-side file used while deleting
            (defaults to path with a .tmp suffix; must differ from path)
        codec: Record codec (defaults to FixedRecordCodec)
        fsync_every_write: Whether to fsync after each append and rebuild

    Public API:
        - open_or_create(path): Open existing file or create an empty one
        - count(): Number of whole records
        - append(product): Add a record at the end
        - read_at(index): Point lookup by ordinal position
        - read_all(): Lazy scan in ordinal order
        - delete_at(index): Rebuild-and-swap removal

    Invariants:
        - Record i occupies bytes [i * record_size, (i + 1) * record_size)
        - File length is a multiple of record_size after every mutation
        - At most one file handle is live outside delete_at
    """

    def __init__(
        self,
        path: str | Path,
        temp_path: str | Path | None = None,
        codec: RecordCodec | None = None,
        fsync_every_write: bool = True,
    ):
        self.path = Path(path)
        self.temp_path = Path(temp_path) if temp_path is not None else default_temp_path(self.path)
        if self.temp_path.resolve() == self.path.resolve():
            raise ConfigError(f"temp_path must differ from data file {self.path}")
        self.codec = codec if codec is not None else FixedRecordCodec()
        self.record_size = self.codec.record_size
        self.fsync_every_write = fsync_every_write
        self._fd: BinaryIO | None = None
        self._state = StoreState.STABLE
        self._reported_length: int | None = None
        self._rebuilder = RecordRebuilder(self.temp_path, self.record_size, fsync=fsync_every_write)

    @classmethod
    def open_or_create(cls, path: str | Path, **kwargs) -> FixedRecordStore:
        """Open path for read+write without truncating, creating it if missing."""
        store = cls(path, **kwargs)
        store._open()
        return store

    @classmethod
    def from_config(cls, config: StoreConfig) -> FixedRecordStore:
        """Open the store described by config."""
        return cls.open_or_create(
            config.data_path,
            temp_path=config.temp_path,
            fsync_every_write=config.fsync_every_write,
        )

    def _open(self) -> None:
        """Open the backing file, creating it if it does not exist."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            try:
                self._fd = open(self.path, "r+b")
                logger.info(f"Opened record store {self.path}")
            except FileNotFoundError:
                self._fd = open(self.path, "w+b")
                logger.info(f"Created record store {self.path}")
        except OSError as e:
            raise StoreIOError(f"Cannot open or create {self.path}: {e}") from e
        self._state = StoreState.STABLE

    @property
    def state(self) -> StoreState:
        return self._state

    @property
    def is_open(self) -> bool:
        return self._fd is not None

    def _handle(self) -> BinaryIO:
        """Return the live handle or raise StoreUnavailable."""
        if self._fd is None:
            raise StoreUnavailable()
        return self._fd

    def _file_length(self) -> int:
        fd = self._handle()
        try:
            return fd.seek(0, os.SEEK_END)
        except OSError as e:
            raise StoreIOError(f"Seek failed on {self.path}: {e}") from e

    def _check_index(self, index: Index) -> int:
        total = self.count()
        if not 0 <= index < total:
            raise IndexOutOfRange(index, total)
        return total

    def count(self) -> int:
        """Return the number of whole records in the file.

        A trailing partial record is ignored and logged.
        """
        if self._state is StoreState.UNAVAILABLE:
            raise StoreUnavailable()
        if self._fd is None:
            return 0
        length = self._file_length()
        total, tail = divmod(length, self.record_size)
        if tail and length != self._reported_length:
            logger.warning(
                f"{self.path} has {tail} trailing bytes beyond {total} whole records"
            )
            self._reported_length = length
        return total

    def append(self, product: Product) -> Index:
        """Append product at the end of the file and flush it.

        Writes at the last whole-record boundary, so a torn tail left by an
        earlier crash is overwritten.

        Returns:
            Ordinal position of the new record
        """
        block = self.codec.encode(product)
        fd = self._handle()
        index = self.count()
        good_length = index * self.record_size

        try:
            fd.seek(good_length)
            written = fd.write(block)
            if written != self.record_size:
                raise OSError(f"Partial write: {written} of {self.record_size} bytes")
            fd.flush()
            if self.fsync_every_write:
                os.fsync(fd.fileno())
        except OSError as e:
            self._rollback_append(fd, good_length, e)

        logger.debug(f"Appended record {index} at offset {good_length}")
        return index

    def _rollback_append(self, fd: BinaryIO, good_length: int, error: OSError) -> None:
        """Cut the file back to good_length after a failed append, then raise."""
        try:
            fd.truncate(good_length)
            fd.flush()
        except OSError as rollback_error:
            raise StoreIOError(
                f"Append to {self.path} failed: {error}; "
                f"truncating back to {good_length} bytes also failed: {rollback_error}"
            ) from error
        raise StoreIOError(f"Append to {self.path} failed: {error}") from error

    def read_at(self, index: Index) -> Product:
        """Return the record at ordinal position index."""
        self._handle()
        self._check_index(index)
        return self._read_block(index)

    def _read_block(self, index: Index) -> Product:
        fd = self._handle()
        offset = index * self.record_size
        try:
            fd.seek(offset)
            block = fd.read(self.record_size)
        except OSError as e:
            raise StoreIOError(f"Read of record {index} failed: {e}") from e
        if len(block) != self.record_size:
            raise CorruptRecordError(
                f"Short read at record {index}: {len(block)} of {self.record_size} bytes"
            )
        logger.debug(f"Read record {index} at offset {offset}")
        return self.codec.decode(block)

    def read_all(self) -> Iterator[Product]:
        """Yield every record in ascending ordinal order.

        Each call starts again from offset 0. A torn tail raises
        CorruptRecordError after all whole records have been yielded.
        """
        self._handle()
        total = self.count()
        for index in range(total):
            yield self._read_block(index)
        tail = self._file_length() % self.record_size
        if tail:
            raise CorruptRecordError(
                f"{self.path} ends with a partial record of {tail} bytes"
            )

    def delete_at(self, index: Index) -> None:
        """Remove the record at index by rebuilding the file without it.

        Protocol:
            1. Validate index (the only check before any file is touched)
            2. Copy every other record to temp_path
            3. On copy failure remove temp_path; the original stays open and intact
            4. Close the original, move temp_path over it, reopen path

        If the swap fails the store still tries to reopen path. When that
        reopen fails too the store becomes UNAVAILABLE.
        """
        fd = self._handle()
        try:
            position = fd.tell()
        except OSError as e:
            raise StoreIOError(f"Tell failed on {self.path}: {e}") from e
        total = self._check_index(index)
        if self._file_length() > total * self.record_size:
            logger.warning(f"Discarding partial trailing record of {self.path} during rebuild")

        self._state = StoreState.REBUILDING
        try:
            self._rebuilder.copy_without(fd, total, index)
        except Exception:
            self._state = StoreState.STABLE
            self._restore_position(fd, position)
            raise

        swap_error: OSError | None = None
        try:
            fd.close()
            self._rebuilder.install(self.path)
        except OSError as e:
            swap_error = e
            logger.error(
                f"Swapping {self.temp_path} into {self.path} failed, rebuilt copy kept: {e}"
            )
        finally:
            self._fd = None
            self._reopen()

        if swap_error is not None:
            raise StoreIOError(f"Replacing {self.path} failed: {swap_error}") from swap_error
        logger.info(f"Deleted record {index} from {self.path} ({total - 1} remaining)")

    def _restore_position(self, fd: BinaryIO, position: int) -> None:
        try:
            fd.seek(position)
        except OSError as e:
            logger.warning(f"Could not restore position of {self.path}: {e}")

    def _reopen(self) -> None:
        """Adopt a fresh handle on path, or mark the store unavailable."""
        try:
            self._fd = open(self.path, "r+b")
        except OSError as e:
            self._state = StoreState.UNAVAILABLE
            logger.error(f"Reopening {self.path} failed, store unavailable: {e}")
            raise StoreUnavailable(f"store unavailable: cannot reopen {self.path}: {e}") from e
        self._state = StoreState.STABLE

    def close(self) -> None:
        """Close the store and release the file handle."""
        if self._fd is not None:
            try:
                self._fd.flush()
                self._fd.close()
            except OSError as e:
                raise StoreIOError(f"Closing {self.path} failed: {e}") from e
            finally:
                self._fd = None
            logger.info(f"Closed record store {self.path}")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
