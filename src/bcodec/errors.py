"""
Error kinds and exception types raised by the bencode codec.
"""
from enum import IntEnum
from typing import Optional


class ErrorKind(IntEnum):
    """Reasons a decode or encode call can fail."""
    EMPTY_INPUT = 1
    MISSING_TERMINATOR = 2
    MISSING_SEPARATOR = 3
    INVALID_LENGTH_CHARACTER = 4
    STRING_LENGTH_EXCEEDS_DATA = 5
    MALFORMED_INTEGER = 6
    INTEGER_OUT_OF_RANGE = 7
    EXCESSIVE_NESTING = 8
    NON_STRING_KEY = 9
    DUPLICATE_KEY = 10
    TRAILING_DATA = 11
    UNSUPPORTED_TYPE = 12


class BencodeError(Exception):
    """Base class for all codec errors. Check `kind`, not the message."""
    def __init__(self, kind: ErrorKind, message: str):
        super().__init__(message)
        self.kind = kind


class BencodeDecodeError(BencodeError, ValueError):
    """Raised when input bytes violate the bencode grammar."""
    def __init__(self, kind: ErrorKind, message: str, position: Optional[int] = None):
        if position is not None:
            message = f"{message} (at byte {position})"
        super().__init__(kind, message)
        self.position = position


class BencodeEncodeError(BencodeError, ValueError):
    """Raised when a value cannot be represented in bencode."""


class UnsupportedTypeError(BencodeEncodeError, TypeError):
    def __init__(self, obj):
        super().__init__(
            ErrorKind.UNSUPPORTED_TYPE,
            f"Cannot bencode object of type {type(obj)}",
        )
