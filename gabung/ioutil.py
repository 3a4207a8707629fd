from __future__ import annotations

from typing import BinaryIO

from .constants import DEFAULT_COPY_CHUNK
from .errors import DestinationWriteError, SourceUnreadable


def read_exact(f: BinaryIO, n: int) -> bytes:
    b = f.read(n)
    if len(b) != n:
        raise EOFError("Unexpected EOF")
    return b


def copy_exact(src: BinaryIO, dst: BinaryIO, length: int, chunk_size: int = DEFAULT_COPY_CHUNK) -> int:
    """Copy exactly ``length`` bytes from the current position of ``src``.

    Raises EOFError if ``src`` runs out early. Read failures surface as
    SourceUnreadable and write failures as DestinationWriteError.
    """
    remaining = length
    while remaining:
        try:
            buf = src.read(min(chunk_size, remaining))
        except OSError as exc:
            raise SourceUnreadable(f"Failed to read {getattr(src, 'name', '<stream>')}: {exc}") from exc
        if not buf:
            raise EOFError(f"Unexpected EOF with {remaining} bytes left")
        try:
            dst.write(buf)
        except OSError as exc:
            raise DestinationWriteError(f"Failed to write {getattr(dst, 'name', '<stream>')}: {exc}") from exc
        remaining -= len(buf)
    return length
