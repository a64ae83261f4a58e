import pytest

from bcodec.constants import max_depth_ceiling
from bcodec.decoder import decode
from bcodec.encoder import encode, encode_dict, encode_int, encode_list
from bcodec.errors import BencodeEncodeError, ErrorKind, UnsupportedTypeError
from bcodec.structure import BencodeDict, BencodeInt, BencodeList, BencodeString


def test_int():
    assert encode(BencodeInt(42)) == b"i42e"
    assert encode(-42) == b"i-42e"
    assert encode(BencodeInt(0)) == b"i0e"
    assert encode_int(-0) == b"i0e"


def test_string():
    assert encode(BencodeString(b"spam")) == b"4:spam"
    assert encode(b"") == b"0:"
    assert encode("spam") == b"4:spam"
    assert encode(bytearray(b"ab")) == b"2:ab"


def test_utf8_length_counts_bytes():
    assert encode("é") == b"2:\xc3\xa9"


def test_list():
    assert encode([b"spam", 42]) == b"l4:spami42ee"
    assert encode((1, 2)) == b"li1ei2ee"
    assert encode(BencodeList([])) == b"le"
    assert encode_list([b"a"]) == b"l1:ae"


def test_dict_keys_are_sorted():
    data = {b"foo": 42, b"bar": b"spam"}
    assert encode(data) == b"d3:bar4:spam3:fooi42ee"
    assert encode_dict(data) == b"d3:bar4:spam3:fooi42ee"


def test_dict_sorts_by_raw_bytes():
    data = {b"b": 1, b"B": 2, b"\xff": 3, b"a": 4}
    assert encode(data) == b"d1:Bi2e1:ai4e1:bi1e1:\xffi3ee"


def test_dict_insertion_order():
    data = {"foo": 1, "bar": 2}
    assert encode(data, sort_keys=False) == b"d3:fooi1e3:bari2ee"


def test_tagged_dict():
    obj = BencodeDict({b"cow": BencodeString(b"moo")})
    assert encode(obj) == b"d3:cow3:mooe"


@pytest.mark.parametrize("value", [1.5, print, {1, 2}, None, True, object()])
def test_unsupported_types(value):
    with pytest.raises(UnsupportedTypeError) as excinfo:
        encode(value)
    assert excinfo.value.kind == ErrorKind.UNSUPPORTED_TYPE


def test_unsupported_type_is_type_error():
    with pytest.raises(TypeError):
        encode([1, 2.0])


def test_non_string_key():
    with pytest.raises(BencodeEncodeError) as excinfo:
        encode({1: b"a"})
    assert excinfo.value.kind == ErrorKind.NON_STRING_KEY


def test_colliding_keys():
    with pytest.raises(BencodeEncodeError) as excinfo:
        encode({"a": 1, b"a": 2})
    assert excinfo.value.kind == ErrorKind.DUPLICATE_KEY


def test_integer_out_of_range():
    with pytest.raises(BencodeEncodeError) as excinfo:
        encode(2 ** 63)
    assert excinfo.value.kind == ErrorKind.INTEGER_OUT_OF_RANGE


def test_self_referencing_list():
    loop = []
    loop.append(loop)
    with pytest.raises(BencodeEncodeError) as excinfo:
        encode(loop)
    assert excinfo.value.kind == ErrorKind.EXCESSIVE_NESTING


SAMPLES = [
    BencodeInt(0),
    BencodeInt(-(2 ** 63)),
    BencodeString(bytes(range(256))),
    BencodeList([BencodeInt(1), BencodeList([BencodeString(b"x")]), BencodeDict({})]),
    BencodeDict({
        b"bar": BencodeString(b"spam"),
        b"foo": BencodeDict({b"bar": BencodeString(b"spam"), b"foo": BencodeInt(42)}),
    }),
]


@pytest.mark.parametrize("value", SAMPLES)
def test_roundtrip(value):
    assert decode(encode(value)) == value


@pytest.mark.parametrize("raw", [
    b"i-42e",
    b"4:spam",
    b"l4:spami42ee",
    b"d3:bar4:spam3:food3:bar4:spam3:fooi42eee",
])
def test_canonical_idempotence(raw):
    assert encode(decode(raw)) == raw


def test_encode_dict_accepts_tagged_dict():
    obj = BencodeDict({b"b": BencodeInt(1), b"a": BencodeString(b"x")})
    assert encode_dict(obj) == b"d1:a1:x1:bi1ee"
    assert encode_dict(obj, sort_keys=False) == b"d1:bi1e1:a1:xe"


def test_encode_list_accepts_tagged_list():
    obj = BencodeList([BencodeInt(1), BencodeString(b"x")])
    assert encode_list(obj) == b"li1e1:xe"


def test_max_depth_must_fit_recursion_limit():
    with pytest.raises(ValueError):
        encode([], max_depth=max_depth_ceiling() + 1)
    with pytest.raises(ValueError):
        encode_list([], max_depth=0)


def test_encode_nesting_limit():
    with pytest.raises(BencodeEncodeError) as excinfo:
        encode([[[]]], max_depth=2)
    assert excinfo.value.kind == ErrorKind.EXCESSIVE_NESTING
    assert encode_dict({"a": {}}, max_depth=2) == b"d1:adee"
