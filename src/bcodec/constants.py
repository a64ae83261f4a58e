"""
Token bytes, integer limits and default settings for the bencode codec.
"""
import sys

# Type markers
INT_START = b"i"
LIST_START = b"l"
DICT_START = b"d"
END = b"e"
SEPARATOR = b":"
MINUS = b"-"

# Bencoded integers are limited to a signed 64-bit range
INT_MIN = -(2 ** 63)
INT_MAX = 2 ** 63 - 1
INT_DIGITS_MAX = len(str(INT_MAX))

# Must stay well below the interpreter's recursion limit
DEFAULT_MAX_DEPTH = 256


def max_depth_ceiling() -> int:
    """Deepest nesting the codec can walk without hitting RecursionError."""
    # each container level costs two Python frames
    return sys.getrecursionlimit() // 3


def validate_max_depth(max_depth: int) -> int:
    ceiling = max_depth_ceiling()
    if not 1 <= max_depth <= ceiling:
        raise ValueError(f"max_depth must be between 1 and {ceiling}, got {max_depth}")
    return max_depth
