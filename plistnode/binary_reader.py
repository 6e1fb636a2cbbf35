"""Reading of binary property lists (``bplist00``) into node trees."""

from __future__ import annotations

import struct
from typing import Union

from .containers import Array, Dictionary
from .values import (
    Boolean,
    Data,
    Date,
    Integer,
    Node,
    Null,
    PlistType,
    Real,
    String,
    Uid,
)

_MAGIC = b"bplist"
_VERSION = b"00"
_HEADER_SIZE = len(_MAGIC) + len(_VERSION)
_TRAILER = struct.Struct(">6xBBQQQ")

_NULL = 0x00
_FALSE = 0x08
_TRUE = 0x09
_FILL = 0x0F
_INT = 0x10
_REAL = 0x20
_DATE = 0x30
_DATA = 0x40
_STRING = 0x50
_UNICODE = 0x60
_UID = 0x80
_ARRAY = 0xA0
_SET = 0xC0
_DICT = 0xD0
_MASK = 0xF0

_SIZED_KINDS = frozenset({_DATA, _STRING, _UNICODE, _ARRAY, _SET, _DICT})
_UINT32_MAX = 0xFFFFFFFF


class PlistParseError(ValueError):
    """Raised when data is not a well-formed binary property list."""


def _decode_utf16be(raw: bytes) -> str:
    """Decode UTF-16BE, dropping unpaired surrogates instead of failing."""
    chars: list[str] = []
    pending_lead = False
    code = 0
    for (unit,) in struct.iter_unpack(">H", raw):
        if 0xD800 <= unit <= 0xDBFF:
            if not pending_lead:
                pending_lead = True
                code = 0x10000 + ((unit & 0x3FF) << 10)
            else:
                pending_lead = False
        elif 0xDC00 <= unit <= 0xDFFF:
            if pending_lead:
                pending_lead = False
                chars.append(chr(code | (unit & 0x3FF)))
        else:
            chars.append(chr(unit))
    return "".join(chars)


class _Reader:
    def __init__(
        self,
        buf: bytes,
        num_objects: int,
        ref_size: int,
        offset_size: int,
        offset_table: int,
    ) -> None:
        self.buf = buf
        self.num_objects = num_objects
        self.ref_size = ref_size
        self.offset_size = offset_size
        self.offset_table = offset_table
        self._path: list[int] = []

    def _uint(self, pos: int, width: int) -> int:
        if width > 8:
            pos += width - 8
            width = 8
        return int.from_bytes(self.buf[pos:pos + width], "big")

    def parse_index(self, index: int) -> Node:
        if index >= self.num_objects:
            raise PlistParseError(
                f"node index {index} must be smaller than the number of objects "
                f"({self.num_objects})"
            )
        offset_pos = self.offset_table + index * self.offset_size
        pos = self._uint(offset_pos, self.offset_size)
        if pos < _HEADER_SIZE or pos >= self.offset_table:
            raise PlistParseError(f"offset for node index {index} is out of range")
        if index in self._path:
            raise PlistParseError("recursion detected in binary plist")
        self._path.append(index)
        try:
            return self._parse_node(pos)
        finally:
            self._path.pop()

    def _ref(self, pos: int, what: str) -> int:
        if pos + self.ref_size > self.offset_table:
            raise PlistParseError(f"{what} is outside of valid range")
        index = self._uint(pos, self.ref_size)
        if index >= self.num_objects:
            raise PlistParseError(
                f"{what}: object index {index} must be smaller than the number "
                f"of objects ({self.num_objects})"
            )
        return index

    def _parse_node(self, pos: int) -> Node:
        buf = self.buf
        end = self.offset_table
        marker = buf[pos]
        kind = marker & _MASK
        size = marker & _FILL
        pos += 1

        if size == _FILL and kind in _SIZED_KINDS:
            size_marker = buf[pos]
            if size_marker & _MASK != _INT:
                raise PlistParseError(
                    f"invalid size node type 0x{size_marker & _MASK:02x} "
                    f"for node type 0x{kind:02x}"
                )
            pos += 1
            width = 1 << (size_marker & _FILL)
            if pos + width > end:
                raise PlistParseError(
                    f"size bytes for node type 0x{kind:02x} are out of range"
                )
            size = self._uint(pos, width)
            pos += width

        if kind == _NULL:
            if size == _TRUE:
                return Boolean(True)
            if size == _FALSE:
                return Boolean(False)
            if size == _NULL:
                return Null()
            raise PlistParseError(f"invalid simple value 0x{size:02x}")

        if kind == _INT:
            width = 1 << size
            if pos + width > end:
                raise PlistParseError("integer bytes are out of range")
            if width in (1, 2, 4):
                return Integer(self._uint(pos, width))
            if width == 8:
                return Integer(int.from_bytes(buf[pos:pos + 8], "big", signed=True))
            if width == 16:
                return Integer(self._uint(pos, 16))
            raise PlistParseError("invalid byte size for integer node")

        if kind == _REAL:
            width = 1 << size
            if pos + width > end:
                raise PlistParseError("real bytes are out of range")
            if width == 4:
                return Real(struct.unpack_from(">f", buf, pos)[0])
            if width == 8:
                return Real(struct.unpack_from(">d", buf, pos)[0])
            raise PlistParseError("invalid byte size for real node")

        if kind == _DATE:
            if size != 3:
                raise PlistParseError("invalid data size for date node")
            if pos + 8 > end:
                raise PlistParseError("date bytes are out of range")
            return Date(struct.unpack_from(">d", buf, pos)[0])

        if kind == _DATA:
            if pos + size > end:
                raise PlistParseError("data bytes are out of range")
            return Data(buf[pos:pos + size])

        if kind == _STRING:
            if pos + size > end:
                raise PlistParseError("string bytes are out of range")
            raw = buf[pos:pos + size].split(b"\0", 1)[0]
            return String(raw.decode("utf-8", "replace"))

        if kind == _UNICODE:
            if pos + 2 * size > end:
                raise PlistParseError("unicode string bytes are out of range")
            if size == 0:
                raise PlistParseError("empty unicode string node")
            return String(_decode_utf16be(buf[pos:pos + 2 * size]))

        if kind in (_ARRAY, _SET):
            if pos + size > end:
                raise PlistParseError("array bytes are out of range")
            items = [
                self.parse_index(self._ref(pos + j * self.ref_size, f"array item {j}"))
                for j in range(size)
            ]
            return Array(items)

        if kind == _UID:
            width = size + 1
            if pos + width > end:
                raise PlistParseError("uid bytes are out of range")
            value = self._uint(pos, width)
            if value > _UINT32_MAX:
                raise PlistParseError(f"value {value} too large for uid node")
            return Uid(value)

        if kind == _DICT:
            if pos + size > end:
                raise PlistParseError("dict bytes are out of range")
            pairs: list[tuple[str, Node]] = []
            for j in range(size):
                key_pos = pos + j * self.ref_size
                value_pos = pos + (j + size) * self.ref_size
                if (
                    key_pos + self.ref_size > end
                    or value_pos + self.ref_size > end
                ):
                    raise PlistParseError(f"dict entry {j} is outside of valid range")
                key_index = self._ref(key_pos, f"dict entry {j} key")
                value_index = self._ref(value_pos, f"dict entry {j} value")
                key = self.parse_index(key_index)
                if key.type is not PlistType.STRING:
                    raise PlistParseError(f"dict entry {j}: invalid node type for key")
                value = self.parse_index(value_index)
                pairs.append((key.value, value))
            return Dictionary(pairs)

        raise PlistParseError(f"unexpected node type 0x{kind:02x}")


def from_bin(data: Union[bytes, bytearray, memoryview]) -> Node:
    """Parse a binary property list and return its root node."""
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise TypeError("binary plist data must be bytes-like")
    buf = bytes(data)
    if not buf:
        raise ValueError("no binary plist data given")
    if len(buf) < _HEADER_SIZE + _TRAILER.size:
        raise PlistParseError("data is too small to hold a binary plist")
    if buf[:len(_MAGIC)] != _MAGIC:
        raise PlistParseError("bplist magic mismatch")
    if buf[len(_MAGIC):_HEADER_SIZE] != _VERSION:
        raise PlistParseError(
            f"unsupported binary plist version {buf[len(_MAGIC):_HEADER_SIZE]!r}"
        )

    end_data = len(buf) - _TRAILER.size
    offset_size, ref_size, num_objects, root_object, offset_table = _TRAILER.unpack_from(
        buf, end_data
    )

    if num_objects == 0:
        raise PlistParseError("number of objects must be larger than 0")
    if offset_size == 0:
        raise PlistParseError("offset size in trailer must be larger than 0")
    if ref_size == 0:
        raise PlistParseError("object reference size in trailer must be larger than 0")
    if root_object >= num_objects:
        raise PlistParseError(
            f"root object index ({root_object}) must be smaller than number of "
            f"objects ({num_objects})"
        )
    if offset_table < _HEADER_SIZE or offset_table >= end_data:
        raise PlistParseError("offset table offset points outside of valid range")
    if num_objects * offset_size > end_data - offset_table:
        raise PlistParseError("offset table points outside of valid range")

    reader = _Reader(buf, num_objects, ref_size, offset_size, offset_table)
    try:
        return reader.parse_index(root_object)
    except RecursionError:
        raise PlistParseError("binary plist is nested too deeply") from None