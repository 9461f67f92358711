"""
Load Image Serialization
========================

Converts between encoded words and the byte stream written by ``lmasm``
and read by ``lmvm``. Each word is a signed 16-bit integer stored as a
little-endian pair (low byte first).

Example:
    >>> to_bytes([901, 0])
    b'\\x85\\x03\\x00\\x00'
    >>> from_bytes(b'\\x85\\x03\\x00\\x00')
    [901, 0]
"""

import logging
import struct
from pathlib import Path
from typing import Iterable, Union

from littleman.errors import ImageError
from littleman.isa import WORD_MAX, WORD_MIN


logger = logging.getLogger(__name__)

WORD_SIZE = 2
_WORD = struct.Struct("<h")


def to_bytes(words: Iterable[int]) -> bytes:
    """
    Serialize words as little-endian signed 16-bit pairs.

    Raises:
        ImageError: If a word does not fit in 16 bits
    """
    data = bytearray()
    for index, word in enumerate(words):
        if not WORD_MIN <= word <= WORD_MAX:
            raise ImageError(f"word {word} at index {index} does not fit in 16 bits")
        data += _WORD.pack(word)
    return bytes(data)


def from_bytes(data: bytes) -> list[int]:
    """
    Decode little-endian signed 16-bit pairs into words.

    A trailing odd byte cannot form a word and is dropped.
    """
    if len(data) % WORD_SIZE:
        logger.warning(f"Image has odd length {len(data)}, dropping trailing byte")
        data = data[:-1]
    return [value for (value,) in _WORD.iter_unpack(data)]


def write_image(path: Union[str, Path], words: Iterable[int]) -> int:
    """
    Write words to a file. Returns the number of bytes written.
    """
    data = to_bytes(words)
    Path(path).write_bytes(data)
    logger.debug(f"Wrote {len(data)} bytes to {path}")
    return len(data)


def read_image(path: Union[str, Path]) -> list[int]:
    """
    Read words from a file.

    Raises:
        FileNotFoundError: If the file does not exist
    """
    data = Path(path).read_bytes()
    words = from_bytes(data)
    logger.debug(f"Read {len(words)} words from {path}")
    return words
