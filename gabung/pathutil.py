from __future__ import annotations

import os
from typing import IO, Tuple

_SEPARATORS = tuple(os.fsencode(s) for s in (os.sep, os.altsep) if s)


def split_name(path) -> Tuple[bytes, bytes]:
    """Split a filesystem path into (base name, extension) as bytes.

    Rules:
    - Only the last path component is considered
    - The extension starts at the last '.' and keeps it (b".txt")
    - Leading dots do not start an extension (b".bashrc" has none)
    """
    base = os.path.basename(os.fsencode(path))
    return os.path.splitext(base)


def is_plain_filename(name: bytes) -> bool:
    """True when ``name`` can be created directly inside a directory."""
    if name in (b"", b".", b".."):
        return False
    return not any(sep in name for sep in _SEPARATORS)


def open_with_parent_retry(path: str, mode: str = "wb") -> IO[bytes]:
    """Open ``path`` for writing, creating its missing parent once.

    A FileNotFoundError on the first attempt triggers a single makedirs of
    the parent followed by exactly one retry. Other errors propagate.
    """
    try:
        return open(path, mode)
    except FileNotFoundError:
        parent = os.path.dirname(path)
        if not parent:
            raise
        os.makedirs(parent, exist_ok=True)
    return open(path, mode)
