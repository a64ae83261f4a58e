"""
Bencode package for encoding and decoding BitTorrent data.
"""
from .constants import DEFAULT_MAX_DEPTH
from .decoder import BencodeDecoder, decode, decode_prefix, iter_decode
from .encoder import encode
from .errors import BencodeDecodeError, BencodeEncodeError, BencodeError, ErrorKind, UnsupportedTypeError
from .files import dump, load
from .structure import BencodeDict, BencodeInt, BencodeList, BencodeString, BencodeType

__all__ = [
    'decode', 'decode_prefix', 'iter_decode', 'encode', 'load', 'dump',
    'BencodeDecoder', 'DEFAULT_MAX_DEPTH',
    'BencodeType', 'BencodeInt', 'BencodeString', 'BencodeList', 'BencodeDict',
    'ErrorKind', 'BencodeError', 'BencodeDecodeError', 'BencodeEncodeError', 'UnsupportedTypeError',
]
