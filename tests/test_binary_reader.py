import struct

import pytest

from plistnode.binary_reader import PlistParseError, from_bin
from plistnode.values import PlistType


def build(objects, root=0, ref_size=1, offset_size=1, num_objects=None, table=None):
    body = bytearray(b"bplist00")
    offsets = []
    for obj in objects:
        offsets.append(len(body))
        body += obj
    table_offset = len(body) if table is None else table
    for offset in offsets:
        body += offset.to_bytes(offset_size, "big")
    count = len(objects) if num_objects is None else num_objects
    trailer = bytes(6) + bytes([offset_size, ref_size]) + struct.pack(
        ">QQQ", count, root, table_offset
    )
    return bytes(body) + trailer


@pytest.mark.parametrize(
    "marker, expected",
    [(b"\x09", True), (b"\x08", False)],
)
def test_booleans(marker, expected):
    node = from_bin(build([marker]))
    assert node.type is PlistType.BOOLEAN
    assert node.value is expected


def test_null():
    node = from_bin(build([b"\x00"]))
    assert node.type is PlistType.NULL
    assert node.value is None


def test_invalid_simple_value():
    with pytest.raises(PlistParseError):
        from_bin(build([b"\x05"]))


def test_small_integers():
    assert from_bin(build([b"\x10\x2a"])).value == 0x2A
    assert from_bin(build([b"\x11\x01\x00"])).value == 0x0100
    assert from_bin(build([b"\x12" + (70000).to_bytes(4, "big")])).value == 70000


def test_eight_byte_integer_is_signed():
    node = from_bin(build([b"\x13" + (-1).to_bytes(8, "big", signed=True)]))
    assert node.type is PlistType.INT
    assert node.value == -1
    assert node.is_negative()


def test_sixteen_byte_integer_is_unsigned():
    big = 2**64 - 1
    node = from_bin(build([b"\x14" + bytes(8) + big.to_bytes(8, "big")]))
    assert node.value == big
    assert not node.is_negative()


def test_invalid_integer_width():
    with pytest.raises(PlistParseError):
        from_bin(build([b"\x15" + bytes(32)]))


def test_integer_bytes_out_of_range():
    with pytest.raises(PlistParseError):
        from_bin(build([b"\x13\x00\x01"]))


def test_reals():
    assert from_bin(build([b"\x23" + struct.pack(">d", 1.5)])).value == 1.5
    node = from_bin(build([b"\x22" + struct.pack(">f", 0.25)]))
    assert node.type is PlistType.REAL
    assert node.value == 0.25


def test_invalid_real_width():
    with pytest.raises(PlistParseError):
        from_bin(build([b"\x21\x00\x00"]))


def test_date():
    node = from_bin(build([b"\x33" + struct.pack(">d", 100.0)]))
    assert node.type is PlistType.DATE
    assert node.value == 100.0


def test_date_with_wrong_size():
    with pytest.raises(PlistParseError):
        from_bin(build([b"\x32" + struct.pack(">f", 1.0)]))


def test_data():
    node = from_bin(build([b"\x43abc"]))
    assert node.type is PlistType.DATA
    assert node.value == b"abc"


def test_ascii_string():
    node = from_bin(build([b"\x55hello"]))
    assert node.type is PlistType.STRING
    assert node.value == "hello"


def test_string_stops_at_nul():
    assert from_bin(build([b"\x53a\x00b"])).value == "a"


def test_long_string_uses_size_int():
    text = b"x" * 20
    node = from_bin(build([b"\x5f\x10" + bytes([len(text)]) + text]))
    assert node.value == text.decode()


def test_size_marker_must_be_int():
    with pytest.raises(PlistParseError):
        from_bin(build([b"\x5f\x20" + bytes(8)]))


def test_string_longer_than_data():
    with pytest.raises(PlistParseError):
        from_bin(build([b"\x55ab"]))


def test_unicode_string():
    text = "h\u00e9\u4e2d"
    raw = text.encode("utf-16-be")
    node = from_bin(build([bytes([0x60 | len(text)]) + raw]))
    assert node.value == text


def test_unicode_surrogate_pair():
    text = "\U0001F600"
    raw = text.encode("utf-16-be")
    node = from_bin(build([bytes([0x60 | (len(raw) // 2)]) + raw]))
    assert node.value == text


def test_unicode_lone_trail_surrogate_is_skipped():
    node = from_bin(build([b"\x62\xdc\x00\x00A"]))
    assert node.value == "A"


def test_empty_unicode_string_is_rejected():
    with pytest.raises(PlistParseError):
        from_bin(build([b"\x60"]))


def test_uid():
    node = from_bin(build([b"\x80\x05"]))
    assert node.type is PlistType.UID
    assert node.value == 5


def test_uid_too_large():
    with pytest.raises(PlistParseError):
        from_bin(build([b"\x87" + (2**32).to_bytes(8, "big")]))


def test_array():
    node = from_bin(build([b"\xa2\x01\x02", b"\x10\x01", b"\x09"]))
    assert node.type is PlistType.ARRAY
    assert len(node) == 2
    assert node.value == [1, True]
    assert node[0].parent is node


def test_shared_object_referenced_twice():
    node = from_bin(build([b"\xa2\x01\x01", b"\x10\x03"]))
    assert node.value == [3, 3]
    assert node[0] is not node[1]


def test_array_reference_out_of_range():
    with pytest.raises(PlistParseError):
        from_bin(build([b"\xa1\x05"]))


def test_array_containing_itself_is_rejected():
    with pytest.raises(PlistParseError):
        from_bin(build([b"\xa1\x00"]))


def test_indirect_recursion_is_rejected():
    with pytest.raises(PlistParseError):
        from_bin(build([b"\xa1\x01", b"\xa1\x00"]))


def test_dictionary():
    node = from_bin(build([b"\xd1\x01\x02", b"\x51k", b"\x10\x07"]))
    assert node.type is PlistType.DICT
    assert node.value == {"k": 7}
    assert "k" in node


def test_nested_dictionary_and_array():
    objects = [
        b"\xd2\x01\x02\x03\x04",
        b"\x51a",
        b"\x51b",
        b"\xa1\x05",
        b"\x43xyz",
        b"\x55inner",
    ]
    node = from_bin(build(objects))
    assert node.value == {"a": ["inner"], "b": b"xyz"}


def test_dictionary_key_must_be_string():
    with pytest.raises(PlistParseError):
        from_bin(build([b"\xd1\x01\x02", b"\x10\x01", b"\x10\x02"]))


def test_wider_offsets_and_references():
    objects = [b"\xa1\x00\x01", b"\x55hello"]
    node = from_bin(build(objects, ref_size=2, offset_size=2))
    assert node.value == ["hello"]


def test_unknown_type():
    with pytest.raises(PlistParseError):
        from_bin(build([b"\x70"]))


def test_empty_input():
    with pytest.raises(ValueError):
        from_bin(b"")


def test_non_bytes_input():
    with pytest.raises(TypeError):
        from_bin("bplist00")


def test_too_short():
    with pytest.raises(PlistParseError):
        from_bin(b"bplist00" + bytes(10))


def test_bad_magic():
    data = bytearray(build([b"\x09"]))
    data[0:6] = b"xplist"
    with pytest.raises(PlistParseError):
        from_bin(bytes(data))


def test_bad_version():
    data = bytearray(build([b"\x09"]))
    data[6:8] = b"01"
    with pytest.raises(PlistParseError):
        from_bin(bytes(data))


def test_zero_objects():
    with pytest.raises(PlistParseError):
        from_bin(build([b"\x09"], num_objects=0))


def test_zero_ref_size():
    with pytest.raises(PlistParseError):
        from_bin(build([b"\x09"], ref_size=0))


def test_root_index_too_large():
    with pytest.raises(PlistParseError):
        from_bin(build([b"\x09"], root=1))


def test_offset_table_outside_data():
    with pytest.raises(PlistParseError):
        from_bin(build([b"\x09"], table=4))


def test_offset_table_too_small_for_objects():
    with pytest.raises(PlistParseError):
        from_bin(build([b"\x09"], num_objects=50))


def test_parse_error_is_value_error():
    with pytest.raises(ValueError):
        from_bin(build([b"\x70"]))