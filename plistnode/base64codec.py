"""Base64 encoding and lenient decoding."""

from __future__ import annotations

import base64
from typing import Union

_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"
_PAD = -2
_TABLE = {ch: value for value, ch in enumerate(_ALPHABET)}
_TABLE["="] = _PAD
_WHITESPACE = " \t\n\r"


def encode(data: bytes) -> str:
    """Encode ``data`` as padded standard base64 text."""
    return base64.b64encode(bytes(data)).decode("ascii")


def decode(text: Union[str, bytes]) -> bytes:
    """Decode base64 text, skipping whitespace and characters outside the alphabet.

    Decoding stops at the first NUL character; an incomplete trailing group of
    fewer than four symbols is ignored.
    """
    if isinstance(text, (bytes, bytearray)):
        text = bytes(text).decode("latin-1")
    out = bytearray()
    group: list[int] = []
    for ch in text:
        if ch in _WHITESPACE:
            continue
        if ch == "\0":
            break
        value = _TABLE.get(ch)
        if value is None:
            continue
        group.append(value)
        if len(group) < 4:
            continue
        w1, w2, w3, w4 = group
        group.clear()
        if w1 >= 0 and w2 >= 0:
            out.append(((w1 << 2) + (w2 >> 4)) & 0xFF)
        if w2 >= 0 and w3 >= 0:
            out.append(((w2 << 4) + (w3 >> 2)) & 0xFF)
        if w3 >= 0 and w4 >= 0:
            out.append(((w3 << 6) + w4) & 0xFF)
    return bytes(out)