from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from .constants import (
    RECORD_SIZE,
    RECORD_STRUCT,
    COUNT_STRUCT,
    COUNT_SIZE,
    NAME_CAPACITY,
    EXT_CAPACITY,
    MAX_SIZE,
    SENTINEL,
)
from .errors import InvalidArgument, InvalidContainer


@dataclass
class FileRecord:
    """Metadata for one packed file.

    ``size`` is the payload length; offsets are not stored and are rebuilt by
    summing the sizes of the preceding records.
    """

    size: int
    name: bytes
    extension: bytes

    @property
    def filename(self) -> bytes:
        return self.name + self.extension

    def pack(self) -> bytes:
        return encode_record(self.size, self.name, self.extension)

    @classmethod
    def unpack(cls, buf: bytes) -> "FileRecord":
        size, name, extension = decode_record(buf)
        return cls(size=size, name=name, extension=extension)


def _fill_field(value: bytes, capacity: int, what: str) -> bytes:
    if SENTINEL in value:
        raise InvalidArgument(f"{what} contains a NUL byte: {value!r}")
    # Over-long values are cut silently; the sentinel always fits.
    return value[:capacity] + SENTINEL


def _scan_field(field: bytes, what: str) -> bytes:
    end = field.find(SENTINEL)
    if end < 0:
        raise InvalidContainer(f"Record {what} is not NUL-terminated")
    return field[:end]


def encode_record(size: int, name: bytes, extension: bytes) -> bytes:
    """Encode one 264-byte record.

    Layout: u64 big-endian size, 248-byte name field, 8-byte extension field.
    Unused bytes after each sentinel are zero.
    """
    if size < 0 or size > MAX_SIZE:
        raise InvalidArgument(f"File size out of range: {size}")
    return RECORD_STRUCT.pack(
        size,
        _fill_field(bytes(name), NAME_CAPACITY, "name"),
        _fill_field(bytes(extension), EXT_CAPACITY, "extension"),
    )


def decode_record(buf: bytes) -> Tuple[int, bytes, bytes]:
    """
    Returns: (size, name, extension)
    """
    if len(buf) != RECORD_SIZE:
        raise InvalidContainer(f"Record must be {RECORD_SIZE} bytes, got {len(buf)}")
    size, name_field, ext_field = RECORD_STRUCT.unpack(buf)
    return size, _scan_field(name_field, "name"), _scan_field(ext_field, "extension")


def encode_count(count: int) -> bytes:
    if count < 0 or count > MAX_SIZE:
        raise InvalidArgument(f"Record count out of range: {count}")
    return COUNT_STRUCT.pack(count)


def decode_count(buf: bytes) -> int:
    if len(buf) != COUNT_SIZE:
        raise InvalidContainer("Record counter too short")
    (count,) = COUNT_STRUCT.unpack(buf)
    return count
