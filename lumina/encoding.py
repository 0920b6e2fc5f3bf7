# Hex codec
"""
Hex encoding helpers for wallet key material.

Keys are stored and displayed as lowercase hexadecimal. Decoding is
forgiving about presentation (surrounding whitespace, upper case, a single
``0x`` prefix) and strict about content: the normalized text must have an
even number of characters, all of them in ``[0-9a-f]``.

The round-trip laws hold for every input::

    decode_hex(encode_hex(b)) == b
    encode_hex(decode_hex(s)) == normalize_hex(s)
"""

import re
from typing import Iterable, List

from .errors import InvalidEncoding

_HEX_RE = re.compile(r"[0-9a-f]*")


def normalize_hex(text: str) -> str:
    """Trim, lowercase and drop one leading ``0x`` from ``text``."""
    h = text.strip().lower()
    if h.startswith("0x"):
        h = h[2:]
    return h


def encode_hex(data: bytes) -> str:
    return bytes(data).hex()


def decode_hex(text: str) -> bytes:
    """Decode a hex string into bytes.

    Parameters
    ----------
    text : str
        Hex text, optionally ``0x``-prefixed and in any letter case.

    Returns
    -------
    bytes
        The decoded bytes. An empty string (after normalization) decodes to
        ``b""``.

    Raises
    ------
    InvalidEncoding
        If the normalized text has odd length or contains a character that
        is not a hex digit.
    """
    h = normalize_hex(text)
    if not h:
        return b""
    if len(h) % 2 != 0:
        raise InvalidEncoding("odd length")
    # bytes.fromhex skips embedded whitespace, so check the alphabet first
    if not _HEX_RE.fullmatch(h):
        raise InvalidEncoding("invalid character")
    return bytes.fromhex(h)


def to_int_list(data: bytes) -> List[int]:
    """Bytes as a list of ints, the form key bytes take inside JSON payloads."""
    return list(bytes(data))


def from_int_list(values: Iterable[int]) -> bytes:
    # values outside 0..255 wrap the same way a Uint8Array assignment does
    return bytes(int(v) & 0xFF for v in values)
