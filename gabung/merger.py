from __future__ import annotations

import os
import stat
from contextlib import ExitStack
from dataclasses import dataclass
from typing import BinaryIO, List, Optional, Sequence

from .constants import DEFAULT_COPY_CHUNK
from .errors import (
    DestinationWriteError,
    InvalidArgument,
    SourceNotFound,
    SourceUnreadable,
)
from .ioutil import copy_exact
from .pathutil import open_with_parent_retry, split_name
from .records import FileRecord, encode_count


@dataclass
class _Source:
    path: str
    fh: BinaryIO
    st: os.stat_result
    record: Optional[FileRecord] = None


def _check_regular(path: str, st: os.stat_result) -> None:
    if stat.S_ISDIR(st.st_mode):
        raise InvalidArgument(f"Cannot accept directory: {path}")
    # FIFOs and devices report st_size 0; their bytes would be lost.
    if not stat.S_ISREG(st.st_mode):
        raise InvalidArgument(f"Not a regular file: {path}")


def _open_source(stack: ExitStack, path: str) -> _Source:
    # stat before open: opening a FIFO blocks until a writer shows up
    try:
        _check_regular(path, os.stat(path))
        fh = open(path, "rb")
    except FileNotFoundError as exc:
        raise SourceNotFound(f"Failed to open: {path}") from exc
    except ValueError as exc:
        raise InvalidArgument(f"Invalid path: {path!r}: {exc}") from exc
    except OSError as exc:
        raise SourceUnreadable(f"Failed to open: {path}: {exc}") from exc
    stack.enter_context(fh)
    try:
        st = os.fstat(fh.fileno())
    except OSError as exc:
        raise SourceUnreadable(f"Failed to stat: {path}: {exc}") from exc
    _check_regular(path, st)
    return _Source(path=path, fh=fh, st=st)


class Merger:
    """Pack an ordered list of files into one container.

    Container layout:

        payload(0) | ... | payload(N-1) | record(0) | ... | record(N-1) | count

    Records hold each payload's size, base name and extension. With
    ``no_footer`` the payloads are concatenated and nothing else is written.
    """

    def __init__(
        self,
        sources: Sequence[str],
        target: str,
        *,
        no_footer: bool = False,
        chunk_size: int = DEFAULT_COPY_CHUNK,
    ):
        if isinstance(sources, (str, bytes)):
            raise InvalidArgument("sources must be a sequence of paths, not a single path")
        self.sources = [os.fspath(p) for p in sources]
        self.target = os.fspath(target)
        self.no_footer = no_footer
        if chunk_size <= 0:
            raise InvalidArgument("chunk_size must be positive")
        self.chunk_size = chunk_size

    def merge(self) -> int:
        """Write the container and return its size in bytes."""
        if not self.sources:
            raise InvalidArgument("At least one source file is required")

        with ExitStack() as stack:
            opened = self._load_all(stack)
            self._check_target(opened)

            try:
                out = open_with_parent_retry(self.target, "wb")
            except ValueError as exc:
                raise InvalidArgument(f"Invalid path: {self.target!r}: {exc}") from exc
            except OSError as exc:
                raise DestinationWriteError(f"Failed to create file: {self.target}: {exc}") from exc
            stack.enter_context(out)

            for src in opened:
                try:
                    copy_exact(src.fh, out, src.st.st_size, self.chunk_size)
                except EOFError as exc:
                    raise SourceUnreadable(f"File shrank while merging: {src.path}") from exc

            if not self.no_footer:
                footer = b"".join(src.record.pack() for src in opened) + encode_count(len(opened))
                try:
                    out.write(footer)
                except OSError as exc:
                    raise DestinationWriteError(f"Failed to write file properties: {self.target}: {exc}") from exc

            try:
                out.flush()
                return out.tell()
            except OSError as exc:
                raise DestinationWriteError(f"Failed to write file: {self.target}: {exc}") from exc

    # internals
    def _load_all(self, stack: ExitStack) -> List[_Source]:
        opened: List[_Source] = []
        for path in self.sources:
            src = _open_source(stack, path)
            if not self.no_footer:
                name, ext = split_name(path)
                src.record = FileRecord(size=src.st.st_size, name=name, extension=ext)
                # Fail early on names the codec refuses (embedded NUL).
                src.record.pack()
            opened.append(src)
        return opened

    def _check_target(self, opened: List[_Source]) -> None:
        try:
            tst = os.stat(self.target)
        except (OSError, ValueError):
            return
        for src in opened:
            if os.path.samestat(src.st, tst):
                raise InvalidArgument(f"Output would overwrite an input: {self.target}")


def merge(
    sources: Sequence[str],
    target: str,
    *,
    no_footer: bool = False,
    chunk_size: int = DEFAULT_COPY_CHUNK,
) -> int:
    return Merger(sources, target, no_footer=no_footer, chunk_size=chunk_size).merge()
