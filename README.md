# plistnode

A small, dependency-free library for working with property lists as a tree
of typed nodes, with a reader and a writer for the binary plist format
(`bplist00`).

## Installation

```
pip install plistnode
```

For running the test suite:

```
pip install "plistnode[test]"
pytest
```

## What is inside

| Module | Contents |
| --- | --- |
| `plistnode.tree` | `TreeNode`, a generic ordered tree with parent links and sibling navigation, and `main` for the demo command |
| `plistnode.base64codec` | `encode` and `decode`, a lenient Base64 codec |
| `plistnode.values` | `PlistType`, the base `Node` and the scalar nodes `Null`, `Boolean`, `Integer`, `Real`, `String`, `Key`, `Uid`, `Data`, `Date` |
| `plistnode.containers` | `Structure` and the container nodes `Array` and `Dictionary` |
| `plistnode.binary_reader` | `from_bin` and `PlistParseError` |
| `plistnode.binary_writer` | `to_bin` |

## Reading and writing binary plists

```python
from plistnode.binary_reader import PlistParseError, from_bin
from plistnode.binary_writer import to_bin
from plistnode.containers import Dictionary

with open("Info.plist", "rb") as fh:
    raw = fh.read()

try:
    root = from_bin(raw)
except PlistParseError as exc:
    print(f"not a valid binary plist: {exc}")
else:
    if isinstance(root, Dictionary):
        for key, node in root.items():
            print(key, node.value)

    with open("copy.plist", "wb") as fh:
        fh.write(to_bin(root))
```

`from_bin` takes bytes-like data and returns the root node. It checks the
header, the trailer, every offset and every object reference, and refuses
documents whose objects refer back to themselves. Any of these problems
raises `PlistParseError`, a subclass of `ValueError`; empty input raises
`ValueError` and input that is not bytes-like raises `TypeError`.

`to_bin` returns the encoded document as `bytes`. Equal scalar values are
written once and shared between the places that use them. Strings that are
pure ASCII are stored as single-byte strings, others as UTF-16; reals that
fit a 32-bit float without loss are stored in 4 bytes.

## Nodes

Every node has a `value` attribute, a `type` (a `PlistType` member) and a
`parent`. Assigning to `value` checks and converts it: `Integer` accepts
numbers from -2**63 to 2**64-1 (`unsigned_value` reads it as unsigned,
`is_negative()` tells its sign), `Uid` accepts unsigned 64-bit numbers,
`Data` takes bytes, `String` and `Key` take `str`, and `Date` holds seconds
since 2001-01-01 00:00:00 UTC. `Date.to_datetime()` returns a naive UTC
`datetime`, and `Date.from_datetime()` builds a date from a `datetime`,
treating a naive one as UTC. Any node can be copied with `clone()`.

## Working with containers

`Array` behaves like a sequence: index it, iterate over it, and use
`append`, `insert`, `remove` (by node or by position) and `index`.
`Dictionary` behaves like a mapping kept in insertion order: `d[key]`,
`d[key] = node`, `del d[key]`, `key in d`, iteration over keys, `get`,
`items`, plus `remove` (by key or by node) and `key_of` to find the key
under which a node is stored. `len()` gives the number of entries in
either, and `value` gives the contents as a plain `list` or `dict`.

Nodes put into a container are cloned, so the original stays independent
of the container; `append`, `insert` return the copy actually held.

## Base64

```python
from plistnode.base64codec import decode, encode

text = encode(b"hello")
assert decode(text) == b"hello"
```

`decode` accepts `str` or `bytes`, skips whitespace and any character
outside the Base64 alphabet, stops at a NUL character and drops an
incomplete trailing group.

## The tree demo

The `plistnode-tree` command builds a small tree of `TreeNode` objects and
prints its shape, marking the root, inner nodes and leaves:

```
plistnode-tree
```

## What this package does not do

Only the binary format is read and written. There is no reader or writer
for XML, JSON or text (OpenStep) property lists, no detection of the format
of a document, and no command-line tool for converting between formats;
the Base64 codec is provided on its own and is not wired into any parser.