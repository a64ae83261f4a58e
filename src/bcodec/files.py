"""
Helpers for reading and writing bencoded files such as .torrent metainfo.
"""
import logging
from pathlib import Path

from .constants import DEFAULT_MAX_DEPTH
from .decoder import decode
from .encoder import encode
from .structure import BencodeType

logger = logging.getLogger(__name__)


def load(path, *, max_depth: int = DEFAULT_MAX_DEPTH) -> BencodeType:
    """Reads a whole file and decodes the single item it holds."""
    path = Path(path)
    raw = path.read_bytes()
    logger.debug("Loaded %d bytes from %s", len(raw), path)
    return decode(raw, max_depth=max_depth)


def dump(value, path, *, sort_keys: bool = True) -> int:
    """Encodes `value` and writes it to `path`. Returns the bytes written."""
    path = Path(path)
    data = encode(value, sort_keys=sort_keys)
    path.write_bytes(data)
    logger.debug("Wrote %d bytes to %s", len(data), path)
    return len(data)
