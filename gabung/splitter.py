from __future__ import annotations

import os
from dataclasses import dataclass
from typing import BinaryIO, List, Optional

from .constants import COUNT_SIZE, DEFAULT_COPY_CHUNK, RECORD_SIZE
from .errors import (
    DestinationWriteError,
    GabungError,
    InvalidArgument,
    InvalidContainer,
    SourceNotFound,
    SourceUnreadable,
)
from .ioutil import copy_exact, read_exact
from .pathutil import is_plain_filename
from .records import FileRecord, decode_count


@dataclass
class Entry:
    offset: int
    size: int
    name: bytes
    extension: bytes

    @property
    def filename(self) -> str:
        return os.fsdecode(self.name + self.extension)


class Splitter:
    def __init__(self, path: str, *, chunk_size: int = DEFAULT_COPY_CHUNK):
        self.path = os.fspath(path)
        if chunk_size <= 0:
            raise InvalidArgument("chunk_size must be positive")
        self.chunk_size = chunk_size
        self.f: Optional[BinaryIO] = None
        self.entries: List[Entry] = []
        self.records_offset: int = 0
        self.count_offset: int = 0

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def open(self):
        if self.f is not None:
            return
        try:
            self.f = open(self.path, "rb")
        except FileNotFoundError as exc:
            raise SourceNotFound(f"Failed to open: {self.path}") from exc
        except ValueError as exc:
            raise InvalidArgument(f"Invalid path: {self.path!r}: {exc}") from exc
        except OSError as exc:
            raise SourceUnreadable(f"Failed to open: {self.path}: {exc}") from exc
        try:
            self._load_footer()
        except OSError as exc:
            self.close()
            raise SourceUnreadable(f"Failed to read: {self.path}: {exc}") from exc
        except GabungError:
            # Ensure file handle is closed on failure to avoid leaks
            self.close()
            raise

    def close(self):
        if self.f is not None:
            self.f.close()
            self.f = None

    def list(self) -> List[Entry]:
        return self.entries

    def split(self, target_dir: str) -> List[str]:
        """Recreate every packed file inside ``target_dir``.

        The directory (and its parents) is created when missing. Existing
        files with the same names are overwritten. Returns the written paths
        in container order. A failure part way leaves earlier files in place.
        An output path that resolves to the container itself is refused
        before anything is created.
        """
        if self.f is None:
            raise RuntimeError("Container not open")
        target_dir = os.fspath(target_dir)
        out_paths = [os.path.join(target_dir, e.filename) for e in self.entries]
        for out_path in out_paths:
            self._check_not_container(out_path)
        try:
            os.makedirs(target_dir, exist_ok=True)
        except ValueError as exc:
            raise InvalidArgument(f"Invalid path: {target_dir!r}: {exc}") from exc
        except OSError as exc:
            raise DestinationWriteError(f"Failed to create path: {target_dir}: {exc}") from exc

        written: List[str] = []
        for e, out_path in zip(self.entries, out_paths):
            self.extract(e, out_path)
            written.append(out_path)
        return written

    def extract(self, entry: Entry, out_path: str) -> None:
        if self.f is None:
            raise RuntimeError("Container not open")
        self._check_not_container(out_path)
        try:
            wf = open(out_path, "wb")
        except OSError as exc:
            raise DestinationWriteError(f"Failed to create file: {out_path}: {exc}") from exc
        with wf:
            try:
                self.f.seek(entry.offset)
                copy_exact(self.f, wf, entry.size, self.chunk_size)
            except EOFError as exc:
                raise InvalidContainer(f"Payload of {entry.filename} is truncated") from exc
            except OSError as exc:
                raise SourceUnreadable(f"Failed to read: {self.path}: {exc}") from exc
            try:
                wf.flush()
            except OSError as exc:
                raise DestinationWriteError(f"Failed to write file: {out_path}: {exc}") from exc

    # internals
    def _check_not_container(self, out_path: str) -> None:
        assert self.f is not None
        try:
            ost = os.stat(out_path)
        except (OSError, ValueError):
            return
        if os.path.samestat(ost, os.fstat(self.f.fileno())):
            raise DestinationWriteError(f"Output would overwrite the container: {out_path}")

    def _load_footer(self):
        """
        Reads and validates the footer at the end of the container.

        1.  The last 8 bytes hold the big-endian record count; it must be
            non-zero.
        2.  The records sit directly before the count and must fit in the
            bytes that precede it.
        3.  Each record must decode, and its name must be a plain file name.
        4.  The payload sizes must add up to no more than the bytes before
            the record section.

        Nothing is written anywhere until all of this passes.
        """
        assert self.f is not None
        size = os.fstat(self.f.fileno()).st_size
        if size < COUNT_SIZE:
            raise InvalidContainer(f"Container too small to hold a footer: {size} bytes")
        count_offset = size - COUNT_SIZE
        self.f.seek(count_offset)
        try:
            count = decode_count(read_exact(self.f, COUNT_SIZE))
        except EOFError as exc:
            raise InvalidContainer("Failed to read record counter") from exc
        if count == 0:
            raise InvalidContainer("Record counter is zero")

        records_len = count * RECORD_SIZE
        if records_len > count_offset:
            raise InvalidContainer(
                f"Container too small for {count} records ({records_len} > {count_offset} bytes)"
            )
        records_offset = count_offset - records_len

        self.f.seek(records_offset)
        try:
            raw = read_exact(self.f, records_len)
        except EOFError as exc:
            raise InvalidContainer("Failed to read file properties") from exc

        entries: List[Entry] = []
        offset = 0
        for i in range(count):
            rec = FileRecord.unpack(raw[i * RECORD_SIZE : (i + 1) * RECORD_SIZE])
            if not is_plain_filename(rec.filename):
                raise InvalidContainer(f"Record {i} has an unusable file name: {rec.filename!r}")
            entries.append(Entry(offset=offset, size=rec.size, name=rec.name, extension=rec.extension))
            offset += rec.size
        if offset > records_offset:
            raise InvalidContainer(
                f"Payload sizes exceed available data ({offset} > {records_offset} bytes)"
            )

        self.entries = entries
        self.records_offset = records_offset
        self.count_offset = count_offset


def split(container: str, target_dir: str, *, chunk_size: int = DEFAULT_COPY_CHUNK) -> List[str]:
    with Splitter(container, chunk_size=chunk_size) as s:
        return s.split(target_dir)
