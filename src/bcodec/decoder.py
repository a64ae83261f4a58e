"""
Bencode decoder for BitTorrent metainfo and tracker responses.

The decoder walks the input once with an explicit cursor. Every parse step
leaves the cursor just past the bytes it consumed, so nested items never
need to be re-encoded to find where they end.
"""
import logging
from typing import Iterator, Tuple, Union

from .constants import (
    DEFAULT_MAX_DEPTH,
    DICT_START,
    END,
    INT_DIGITS_MAX,
    INT_MAX,
    INT_MIN,
    INT_START,
    LIST_START,
    MINUS,
    SEPARATOR,
    validate_max_depth,
)
from .errors import BencodeDecodeError, ErrorKind
from .structure import BencodeDict, BencodeInt, BencodeList, BencodeString, BencodeType

logger = logging.getLogger(__name__)

Buffer = Union[bytes, bytearray, memoryview, str]


def _to_bytes(data: Buffer) -> bytes:
    if isinstance(data, str):
        return data.encode()
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)
    raise TypeError(f"Cannot decode object of type {type(data)}")


class BencodeDecoder:
    """
    Decodes Bencoded byte strings into Bencode types.

    A decoder can be used once through `decode()`, which requires the
    input to hold exactly one item, or repeatedly through `decode_next()`
    to walk a buffer of concatenated items.
    """
    def __init__(self, data: Buffer, max_depth: int = DEFAULT_MAX_DEPTH):
        self.data = _to_bytes(data)
        self.max_depth = validate_max_depth(max_depth)
        self.i = 0  # cursor index

    @property
    def position(self) -> int:
        """Number of bytes consumed so far."""
        return self.i

    @property
    def at_end(self) -> bool:
        return self.i >= len(self.data)

    def decode(self) -> BencodeType:
        """Main decode entry point. Decodes the entire Bencoded data."""
        result = self.decode_next()
        if not self.at_end:
            raise BencodeDecodeError(
                ErrorKind.TRAILING_DATA,
                f"{len(self.data) - self.i} unexpected bytes after the first item",
                self.i,
            )
        return result

    def decode_next(self) -> BencodeType:
        """Decodes one item starting at the cursor and moves past it."""
        if self.at_end:
            raise BencodeDecodeError(ErrorKind.EMPTY_INPUT, "No data to decode", self.i)
        return self._parse_value(0)

    # --------------------------
    # Low-level utilities
    # --------------------------

    def _peek(self) -> bytes:
        """Returns the byte under the cursor, or b'' at end of input."""
        return self.data[self.i:self.i+1]

    def _consume(self, n=1) -> bytes:
        """Moves cursor forward by n bytes and returns the consumed chunk."""
        chunk = self.data[self.i:self.i+n]
        self.i += n
        return chunk

    def _fail(self, kind: ErrorKind, message: str, position=None):
        raise BencodeDecodeError(kind, message, self.i if position is None else position)

    # --------------------------
    # Parsing functions
    # --------------------------

    def _parse_value(self, depth: int) -> BencodeType:
        ch = self._peek()

        if ch == INT_START:
            return self._parse_int()

        if ch == LIST_START:
            return self._parse_list(depth + 1)

        if ch == DICT_START:
            return self._parse_dict(depth + 1)

        # Anything else must be a length-prefixed string
        return self._parse_string()

    def _enter(self, depth: int):
        if depth > self.max_depth:
            self._fail(
                ErrorKind.EXCESSIVE_NESTING,
                f"Nesting deeper than {self.max_depth} levels",
            )

    def _parse_int(self) -> BencodeInt:
        """Parses an integer from the Bencoded data."""
        start = self.i
        self._consume(1)  # skip 'i'

        end_pos = self.data.find(END, self.i)
        if end_pos == -1:
            self._fail(ErrorKind.MISSING_TERMINATOR, "Integer missing closing 'e'", start)

        number_bytes = self.data[self.i:end_pos]
        digits = number_bytes[1:] if number_bytes.startswith(MINUS) else number_bytes

        if not digits.isdigit():
            self._fail(ErrorKind.MALFORMED_INTEGER, f"Invalid integer {number_bytes!r}", start)
        if digits == b"0" and digits != number_bytes:
            self._fail(ErrorKind.MALFORMED_INTEGER, "Negative zero is not allowed", start)
        if digits.startswith(b"0") and len(digits) > 1:
            self._fail(ErrorKind.MALFORMED_INTEGER, "Integer has leading zeros", start)
        if len(digits) > INT_DIGITS_MAX:
            self._fail(ErrorKind.INTEGER_OUT_OF_RANGE, "Integer does not fit in 64 bits", start)

        num = int(number_bytes)
        if not INT_MIN <= num <= INT_MAX:
            self._fail(
                ErrorKind.INTEGER_OUT_OF_RANGE,
                "Integer does not fit in 64 bits",
                start,
            )

        self.i = end_pos + 1  # skip 'e'
        return BencodeInt(num)

    def _parse_string(self) -> BencodeString:
        """Parses a byte string from the Bencoded data."""
        start = self.i

        # read length until ':'
        colon = self.data.find(SEPARATOR, self.i)
        if colon == -1:
            self._fail(ErrorKind.MISSING_SEPARATOR, "String missing ':' separator", start)

        length_bytes = self.data[self.i:colon]
        if not length_bytes.isdigit():
            self._fail(
                ErrorKind.INVALID_LENGTH_CHARACTER,
                f"Invalid string length {length_bytes!r}",
                start,
            )
        if length_bytes.startswith(b"0") and len(length_bytes) > 1:
            self._fail(
                ErrorKind.INVALID_LENGTH_CHARACTER,
                "String length has leading zeros",
                start,
            )

        available = len(self.data) - (colon + 1)
        if len(length_bytes) > len(str(available)):
            self._fail(
                ErrorKind.STRING_LENGTH_EXCEEDS_DATA,
                f"String length of {len(length_bytes)} digits exceeds the {available} bytes left",
                start,
            )

        length = int(length_bytes)
        if length > available:
            self._fail(
                ErrorKind.STRING_LENGTH_EXCEEDS_DATA,
                f"String length {length} exceeds the {available} bytes left",
                start,
            )

        self.i = colon + 1
        return BencodeString(self._consume(length))

    def _parse_list(self, depth: int) -> BencodeList:
        """Parses a list from the Bencoded data."""
        self._enter(depth)
        start = self.i
        self._consume(1)  # skip 'l'
        items = []

        while True:
            ch = self._peek()
            if ch == END:
                break
            if not ch:
                self._fail(ErrorKind.MISSING_TERMINATOR, "List missing closing 'e'", start)
            items.append(self._parse_value(depth))

        self._consume(1)  # skip 'e'
        return BencodeList(items)

    def _parse_dict(self, depth: int) -> BencodeDict:
        """Parses a dictionary from the Bencoded data."""
        self._enter(depth)
        start = self.i
        self._consume(1)  # skip 'd'
        obj = {}

        while True:
            ch = self._peek()
            if ch == END:
                break
            if not ch:
                self._fail(ErrorKind.MISSING_TERMINATOR, "Dictionary missing closing 'e'", start)

            # keys MUST be strings
            if ch in (INT_START, LIST_START, DICT_START):
                self._fail(ErrorKind.NON_STRING_KEY, "Dictionary key must be a string")
            key_pos = self.i
            key = self._parse_string().value
            if key in obj:
                self._fail(ErrorKind.DUPLICATE_KEY, f"Duplicate dictionary key {key!r}", key_pos)
            if self.at_end:
                self._fail(ErrorKind.MISSING_TERMINATOR, f"Dictionary key {key!r} has no value", key_pos)

            obj[key] = self._parse_value(depth)

        self._consume(1)  # skip 'e'
        return BencodeDict(obj)


def decode(data: Buffer, *, max_depth: int = DEFAULT_MAX_DEPTH) -> BencodeType:
    """
    Decodes exactly one Bencoded item. Trailing bytes are an error.
    """
    decoder = BencodeDecoder(data, max_depth)
    try:
        result = decoder.decode()
    except BencodeDecodeError as exc:
        logger.debug("Decode failed: %s [%s]", exc, exc.kind.name)
        raise
    logger.debug("Decoded %s from %d bytes", type(result).__name__, decoder.position)
    return result


def decode_prefix(data: Buffer, *, max_depth: int = DEFAULT_MAX_DEPTH) -> Tuple[BencodeType, int]:
    """
    Decodes the first item of `data` and returns it with the number of
    bytes it occupied. Whatever follows is left untouched.
    """
    decoder = BencodeDecoder(data, max_depth)
    result = decoder.decode_next()
    return result, decoder.position


def iter_decode(data: Buffer, *, max_depth: int = DEFAULT_MAX_DEPTH) -> Iterator[BencodeType]:
    """Yields every item of a buffer holding back-to-back Bencoded items."""
    decoder = BencodeDecoder(data, max_depth)
    count = 0
    while not decoder.at_end:
        yield decoder.decode_next()
        count += 1
    logger.debug("Decoded %d concatenated items", count)
