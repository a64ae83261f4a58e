"""
Data structures for representing Bencoded types.
"""
from .constants import INT_MAX, INT_MIN

__all__ = [
    "BencodeType",
    "BencodeInt",
    "BencodeString",
    "BencodeList",
    "BencodeDict",
]


class BencodeType:
    """Base class for all Bencode data types."""
    __slots__ = ("value",)

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self.value == other.value

    def __repr__(self):
        return f"{type(self).__name__}({self.value!r})"

    def to_python(self):
        """Recursively unwraps into plain int / bytes / list / dict."""
        raise NotImplementedError


class BencodeInt(BencodeType):
    """Represents a Bencoded integer."""
    __slots__ = ()

    def __init__(self, value: int):
        if not isinstance(value, int) or isinstance(value, bool):
            raise TypeError("BencodeInt requires an integer.")
        if not INT_MIN <= value <= INT_MAX:
            raise ValueError("BencodeInt must fit in a signed 64-bit integer.")
        self.value = value

    def __hash__(self):
        return hash((BencodeInt, self.value))

    def to_python(self) -> int:
        return self.value


class BencodeString(BencodeType):
    """Represents a Bencoded byte string."""
    __slots__ = ()

    def __init__(self, value: bytes):
        if not isinstance(value, (bytes, bytearray, memoryview)):
            raise TypeError("BencodeString requires bytes.")
        self.value = bytes(value)

    def __hash__(self):
        return hash((BencodeString, self.value))

    def __len__(self):
        return len(self.value)

    def to_python(self) -> bytes:
        return self.value


class BencodeList(BencodeType):
    """Represents a Bencoded list."""
    __slots__ = ()

    def __init__(self, value: list):
        if not isinstance(value, list):
            raise TypeError("BencodeList requires a list.")
        for item in value:
            if not isinstance(item, BencodeType):
                raise TypeError("BencodeList items must be Bencode types.")
        self.value = value

    __hash__ = None

    def __len__(self):
        return len(self.value)

    def __iter__(self):
        return iter(self.value)

    def __getitem__(self, index):
        return self.value[index]

    def to_python(self) -> list:
        return [item.to_python() for item in self.value]


class BencodeDict(BencodeType):
    """Represents a Bencoded dictionary."""
    __slots__ = ()

    def __init__(self, value: dict):
        if not isinstance(value, dict):
            raise TypeError("BencodeDict requires a dict.")
        # keys must be bytes (bencode requirement)
        for k, v in value.items():
            if not isinstance(k, bytes):
                raise TypeError("BencodeDict keys must be bytes.")
            if not isinstance(v, BencodeType):
                raise TypeError("BencodeDict values must be Bencode types.")
        self.value = value

    __hash__ = None

    def __len__(self):
        return len(self.value)

    def __iter__(self):
        return iter(self.value)

    def __contains__(self, key):
        return key in self.value

    def __getitem__(self, key: bytes):
        return self.value[key]

    def get(self, key: bytes, default=None):
        return self.value.get(key, default)

    def keys(self):
        return self.value.keys()

    def items(self):
        return self.value.items()

    def to_python(self) -> dict:
        return {k: v.to_python() for k, v in self.value.items()}
