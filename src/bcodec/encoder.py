"""
Bencode encoder for BitTorrent metainfo and tracker responses.

Accepts both the Bencode types from `structure` and the plain Python
objects they wrap (int, bytes, str, list, tuple, dict).
"""
import logging

from .constants import DEFAULT_MAX_DEPTH, INT_MAX, INT_MIN, validate_max_depth
from .errors import BencodeEncodeError, ErrorKind, UnsupportedTypeError
from .structure import BencodeDict, BencodeInt, BencodeList, BencodeString

logger = logging.getLogger(__name__)


def encode(obj, *, sort_keys: bool = True, max_depth: int = DEFAULT_MAX_DEPTH) -> bytes:
    """Encodes a Python object or BencodeType into bencoded bytes."""
    validate_max_depth(max_depth)
    out = bytearray()
    try:
        _encode_into(out, obj, sort_keys, max_depth, 0)
    except BencodeEncodeError as exc:
        logger.debug("Encode failed: %s [%s]", exc, exc.kind.name)
        raise
    logger.debug("Encoded %s into %d bytes", type(obj).__name__, len(out))
    return bytes(out)


def _encode_into(out: bytearray, obj, sort_keys: bool, max_depth: int, depth: int):
    # bool is an int subclass but has no bencode form
    if isinstance(obj, bool):
        raise UnsupportedTypeError(obj)

    if isinstance(obj, (int, BencodeInt)):
        value = obj if isinstance(obj, int) else obj.value
        out += encode_int(value)
        return

    if isinstance(obj, BencodeString):
        out += encode_bytes(obj.value)
        return

    if isinstance(obj, (bytes, bytearray, memoryview)):
        out += encode_bytes(bytes(obj))
        return

    if isinstance(obj, str):
        out += encode_str(obj)
        return

    if isinstance(obj, (list, tuple, BencodeList)):
        _write_list(out, obj, sort_keys, max_depth, depth + 1)
        return

    if isinstance(obj, (dict, BencodeDict)):
        _write_dict(out, obj, sort_keys, max_depth, depth + 1)
        return

    raise UnsupportedTypeError(obj)


def _write_list(out: bytearray, lst, sort_keys: bool, max_depth: int, depth: int):
    _check_depth(depth, max_depth)
    items = lst.value if isinstance(lst, BencodeList) else lst
    out += b"l"
    for item in items:
        _encode_into(out, item, sort_keys, max_depth, depth)
    out += b"e"


def _write_dict(out: bytearray, d, sort_keys: bool, max_depth: int, depth: int):
    _check_depth(depth, max_depth)
    value = d.value if isinstance(d, BencodeDict) else d
    out += b"d"
    for key_bytes, item in _dict_entries(value, sort_keys):
        out += encode_bytes(key_bytes)
        _encode_into(out, item, sort_keys, max_depth, depth)
    out += b"e"


def _check_depth(depth: int, max_depth: int):
    if depth > max_depth:
        raise BencodeEncodeError(
            ErrorKind.EXCESSIVE_NESTING,
            f"Nesting deeper than {max_depth} levels (is the value self-referencing?)",
        )


def _key_to_bytes(k) -> bytes:
    if isinstance(k, str):
        return k.encode()
    if isinstance(k, (bytes, bytearray)):
        return bytes(k)
    if isinstance(k, BencodeString):
        return k.value
    raise BencodeEncodeError(
        ErrorKind.NON_STRING_KEY,
        f"Dictionary keys must be bytes or str, not {type(k)}",
    )


def _dict_entries(d: dict, sort_keys: bool) -> list:
    """Returns (key bytes, value) pairs in the order they are written."""
    entries = {}
    for key, value in d.items():
        key_bytes = _key_to_bytes(key)
        if key_bytes in entries:
            raise BencodeEncodeError(
                ErrorKind.DUPLICATE_KEY,
                f"Dictionary key {key_bytes!r} appears more than once",
            )
        entries[key_bytes] = value

    if sort_keys:
        return sorted(entries.items())
    return list(entries.items())


# ------------------------------------------------------------
#   Encoding primitives
# ------------------------------------------------------------

def encode_int(n: int) -> bytes:
    """Encodes an integer to bencoded bytes (e.g., i123e)."""
    if not INT_MIN <= n <= INT_MAX:
        raise BencodeEncodeError(
            ErrorKind.INTEGER_OUT_OF_RANGE,
            f"Integer {n} does not fit in 64 bits",
        )
    return f"i{n}e".encode()


def encode_bytes(b: bytes) -> bytes:
    """Encodes bytes to bencoded bytes (e.g., 4:spam)."""
    return str(len(b)).encode() + b":" + b


def encode_str(s: str) -> bytes:
    """Encodes a string to bencoded bytes (e.g., 4:spam)."""
    b = s.encode()
    return encode_bytes(b)


def encode_list(lst, *, sort_keys: bool = True, max_depth: int = DEFAULT_MAX_DEPTH) -> bytes:
    """Encodes a list to bencoded bytes (e.g., l4:spame)."""
    validate_max_depth(max_depth)
    out = bytearray()
    _write_list(out, lst, sort_keys, max_depth, 1)
    return bytes(out)


def encode_dict(d, *, sort_keys: bool = True, max_depth: int = DEFAULT_MAX_DEPTH) -> bytes:
    """Encodes a dictionary to bencoded bytes (e.g., d3:cow3:moo4:spam4:eggse)."""
    validate_max_depth(max_depth)
    out = bytearray()
    _write_dict(out, d, sort_keys, max_depth, 1)
    return bytes(out)
