import struct


# Record geometry (big endian, no host alignment)
#  - size      u64   bytes 0..7
#  - name      248s  bytes 8..255   (247 usable + NUL)
#  - extension 8s    bytes 256..263 (7 usable + NUL)
RECORD_SIZE = 264

SIZE_OFFSET = 0
NAME_OFFSET = 8
EXT_OFFSET = 256

NAME_FIELD_LEN = EXT_OFFSET - NAME_OFFSET  # 248
EXT_FIELD_LEN = RECORD_SIZE - EXT_OFFSET   # 8

NAME_CAPACITY = NAME_FIELD_LEN - 1  # 247
EXT_CAPACITY = EXT_FIELD_LEN - 1    # 7

SENTINEL = b"\x00"

# Trailing record counter
COUNT_SIZE = 8

MAX_SIZE = (1 << 64) - 1

RECORD_STRUCT = struct.Struct(f">Q{NAME_FIELD_LEN}s{EXT_FIELD_LEN}s")
COUNT_STRUCT = struct.Struct(">Q")

assert RECORD_STRUCT.size == RECORD_SIZE
assert COUNT_STRUCT.size == COUNT_SIZE


DEFAULT_COPY_CHUNK = 1_048_576  # 1 MiB
