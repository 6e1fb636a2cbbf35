"""Writing of node trees as binary property lists (``bplist00``)."""

from __future__ import annotations

import struct
from typing import Any, Hashable, Optional

from .containers import Array, Dictionary
from .values import (
    Boolean,
    Data,
    Date,
    Integer,
    Key,
    Node,
    Null,
    Real,
    String,
    Uid,
)

_MAGIC = b"bplist"
_VERSION = b"00"
_TRAILER = struct.Struct(">6xBBQQQ")

_FALSE = 0x08
_TRUE = 0x09
_INT = 0x10
_REAL = 0x20
_DATE = 0x30
_DATA = 0x40
_STRING = 0x50
_UNICODE = 0x60
_UID = 0x80
_ARRAY = 0xA0
_DICT = 0xD0

_INT64_MAX = (1 << 63) - 1
_UINT64_MASK = (1 << 64) - 1
_LOG2 = {1: 0, 2: 1, 4: 2, 8: 3}


def _needed_bytes(value: int) -> int:
    """Smallest width of 1, 2, 3, 4 or 8 bytes that holds ``value``."""
    for width in (1, 2, 3, 4):
        if value < 1 << (8 * width):
            return width
    return 8


def _int_bytes(value: int) -> bytes:
    value &= _UINT64_MASK
    width = _needed_bytes(value)
    if width == 3:
        width = 4
    return bytes([_INT | _LOG2[width]]) + value.to_bytes(width, "big")


def _length_header(mark: int, size: int) -> bytes:
    if size < 15:
        return bytes([mark | size])
    return bytes([mark | 0x0F]) + _int_bytes(size)


def _fits_float32(value: float) -> bool:
    try:
        packed = struct.pack(">f", value)
    except OverflowError:
        return False
    return struct.unpack(">f", packed)[0] == value


def _real_bytes(value: float) -> bytes:
    if _fits_float32(value):
        return bytes([_REAL | 2]) + struct.pack(">f", value)
    return bytes([_REAL | 3]) + struct.pack(">d", value)


def _string_bytes(text: str) -> bytes:
    if text.isascii():
        raw = text.encode("ascii")
        return _length_header(_STRING, len(raw)) + raw
    raw = text.encode("utf-16-be", "surrogatepass")
    return _length_header(_UNICODE, len(raw) // 2) + raw


def _uid_bytes(value: int) -> bytes:
    value &= 0xFFFFFFFF
    width = _needed_bytes(value)
    if width == 3:
        width = 4
    return bytes([_UID | (width - 1)]) + value.to_bytes(width, "big")


def _identity(node: Node) -> Hashable:
    """Key under which equal scalar nodes share one object in the output."""
    if isinstance(node, Boolean):
        return ("bool", node.value)
    if isinstance(node, Null):
        return ("null",)
    if isinstance(node, Integer):
        return ("int", node.value)
    if isinstance(node, Real):
        return ("real", struct.pack(">d", node.value))
    if isinstance(node, Date):
        return ("date", struct.pack(">d", node.value))
    if isinstance(node, Uid):
        return ("uid", node.value)
    if isinstance(node, Key):
        return ("key", node.value)
    if isinstance(node, String):
        return ("string", node.value)
    return ("ref", id(node))


class _Serializer:
    def __init__(self) -> None:
        self.objects: list[tuple[Node, Optional[list[int]]]] = []
        self._table: dict[Hashable, int] = {}
        # Temporary key nodes are kept alive so their ids stay unique.
        self._keep: list[Any] = []

    def add(self, node: Node) -> int:
        if not isinstance(node, Node):
            raise TypeError(f"expected a plist Node, got {type(node).__name__}")
        identity = _identity(node)
        found = self._table.get(identity)
        if found is not None:
            return found
        index = len(self.objects)
        self._table[identity] = index
        self.objects.append((node, None))
        refs: Optional[list[int]] = None
        if isinstance(node, Array):
            refs = [self.add(child) for child in node]
        elif isinstance(node, Dictionary):
            key_refs: list[int] = []
            value_refs: list[int] = []
            for key, child in node.items():
                key_node = Key(key)
                self._keep.append(key_node)
                key_refs.append(self.add(key_node))
                value_refs.append(self.add(child))
            refs = key_refs + value_refs
        self.objects[index] = (node, refs)
        return index


def _object_bytes(node: Node, refs: Optional[list[int]], ref_size: int) -> bytes:
    if isinstance(node, Array):
        assert refs is not None
        body = b"".join(ref.to_bytes(ref_size, "big") for ref in refs)
        return _length_header(_ARRAY, len(refs)) + body
    if isinstance(node, Dictionary):
        assert refs is not None
        body = b"".join(ref.to_bytes(ref_size, "big") for ref in refs)
        return _length_header(_DICT, len(refs) // 2) + body
    if isinstance(node, Null):
        return b"\x00"
    if isinstance(node, Boolean):
        return bytes([_TRUE if node.value else _FALSE])
    if isinstance(node, Integer):
        if node.value > _INT64_MAX:
            return bytes([_INT | 4]) + bytes(8) + node.value.to_bytes(8, "big")
        return _int_bytes(node.value)
    if isinstance(node, Real):
        return _real_bytes(node.value)
    if isinstance(node, Date):
        return bytes([_DATE | 3]) + struct.pack(">d", node.value)
    if isinstance(node, String):
        return _string_bytes(node.value)
    if isinstance(node, Data):
        return _length_header(_DATA, len(node.value)) + node.value
    if isinstance(node, Uid):
        return _uid_bytes(node.value)
    raise TypeError(f"cannot write a node of type {type(node).__name__}")


def to_bin(node: Node) -> bytes:
    """Serialize the tree rooted at ``node`` as a binary property list."""
    serializer = _Serializer()
    serializer.add(node)
    objects = serializer.objects
    num_objects = len(objects)
    ref_size = _needed_bytes(num_objects)

    out = bytearray(_MAGIC + _VERSION)
    offsets: list[int] = []
    for obj, refs in objects:
        offsets.append(len(out))
        out += _object_bytes(obj, refs, ref_size)

    offset_table = len(out)
    offset_size = _needed_bytes(offset_table)
    for offset in offsets:
        out += offset.to_bytes(offset_size, "big")
    out += _TRAILER.pack(offset_size, ref_size, num_objects, 0, offset_table)
    return bytes(out)