"""
Gabung: pack an ordered list of files into one container and split it back.

A container is the raw bytes of every file, back to back, followed by one
fixed 264-byte record per file (size, name, extension) and a big-endian
record count:

    payload(0) | ... | payload(N-1) | record(0) | ... | record(N-1) | count

Nothing is compressed, encrypted or checksummed. Splitting validates the
footer against the container size before anything is written.
"""

__version__ = "0.1"

__all__ = [
    "constants",
    "records",
    "merger",
    "splitter",
    "errors",
]

# Importable programmatic API is available via gabung.merger.merge and
# gabung.splitter.split, and the CLI functions in gabung.cli (cmd_merge/cmd_split).
