"""Container nodes: arrays and dictionaries of property-list nodes."""

from __future__ import annotations

from typing import Any, Iterable, Iterator, Mapping, Optional, Union

from .values import Node, PlistType


def _check_node(node: Any) -> Node:
    if not isinstance(node, Node):
        raise TypeError(f"expected a plist Node, got {type(node).__name__}")
    return node


class Structure(Node):
    """Base of the container nodes; holds child nodes that it owns."""

    _items: Any

    def __len__(self) -> int:
        return len(self._items)

    def _adopt(self, node: Node) -> Node:
        """Return a parentless copy of ``node`` now owned by this structure."""
        copy = _check_node(node).clone()
        copy.parent = self
        return copy

    @staticmethod
    def _release(node: Node) -> None:
        node.parent = None


class Array(Structure):
    """An ordered list of nodes."""

    type = PlistType.ARRAY

    def __init__(
        self, items: Optional[Iterable[Node]] = None, parent: Optional[Node] = None
    ) -> None:
        self.parent = parent
        self._items: list[Node] = []
        for node in items or ():
            self.append(node)

    @property
    def value(self) -> list[Any]:
        """The contents as a plain Python list of values."""
        return [node.value for node in self._items]

    def __getitem__(self, index: int) -> Node:
        return self._items[index]

    def __iter__(self) -> Iterator[Node]:
        return iter(tuple(self._items))

    def __repr__(self) -> str:
        return f"Array({self._items!r})"

    def append(self, node: Node) -> Node:
        """Append a copy of ``node`` and return the copy now held."""
        copy = self._adopt(node)
        self._items.append(copy)
        return copy

    def insert(self, pos: int, node: Node) -> Node:
        """Insert a copy of ``node`` before position ``pos`` and return it."""
        if not 0 <= pos <= len(self._items):
            raise IndexError(f"position {pos} is out of range")
        copy = self._adopt(node)
        self._items.insert(pos, copy)
        return copy

    def remove(self, item: Union[int, Node]) -> None:
        """Remove a node, given either itself or its position.

        A node that is not held here is ignored; a position out of range raises
        IndexError.
        """
        if isinstance(item, Node):
            for position, candidate in enumerate(self._items):
                if candidate is item:
                    del self._items[position]
                    self._release(item)
                    return
            return
        if isinstance(item, bool) or not isinstance(item, int):
            raise TypeError("remove takes a Node or an int position")
        if not 0 <= item < len(self._items):
            raise IndexError(f"position {item} is out of range")
        self._release(self._items.pop(item))

    def index(self, node: Node) -> int:
        """Return the position of ``node``, compared by identity."""
        for position, candidate in enumerate(self._items):
            if candidate is node:
                return position
        raise ValueError("node is not in this array")


class Dictionary(Structure):
    """A mapping from string keys to nodes, kept in insertion order."""

    type = PlistType.DICT

    def __init__(
        self,
        items: Optional[Union[Mapping[str, Node], Iterable[tuple[str, Node]]]] = None,
        parent: Optional[Node] = None,
    ) -> None:
        self.parent = parent
        self._items: dict[str, Node] = {}
        if items is None:
            return
        pairs = items.items() if isinstance(items, Mapping) else items
        for key, node in pairs:
            self[key] = node

    @property
    def value(self) -> dict[str, Any]:
        """The contents as a plain Python dict of values."""
        return {key: node.value for key, node in self._items.items()}

    def __getitem__(self, key: str) -> Node:
        return self._items[key]

    def __setitem__(self, key: str, node: Node) -> None:
        if not isinstance(key, str):
            raise TypeError("dictionary keys must be str")
        copy = self._adopt(node)
        old = self._items.get(key)
        if old is not None:
            self._release(old)
        self._items[key] = copy

    def __delitem__(self, key: str) -> None:
        self._release(self._items.pop(key))

    def __contains__(self, key: object) -> bool:
        return key in self._items

    def __iter__(self) -> Iterator[str]:
        return iter(tuple(self._items))

    def __repr__(self) -> str:
        return f"Dictionary({self._items!r})"

    def get(self, key: str) -> Optional[Node]:
        """Return the node under ``key``, or None."""
        return self._items.get(key)

    def items(self) -> Iterator[tuple[str, Node]]:
        """Yield ``(key, node)`` pairs in order."""
        return iter(tuple(self._items.items()))

    def remove(self, item: Union[str, Node]) -> None:
        """Remove an entry given its key or its node; a missing one is ignored."""
        if isinstance(item, Node):
            for key, candidate in self._items.items():
                if candidate is item:
                    del self[key]
                    return
            return
        if not isinstance(item, str):
            raise TypeError("remove takes a Node or a str key")
        if item in self._items:
            del self[item]

    def key_of(self, node: Node) -> str:
        """Return the key under which ``node`` is held, compared by identity."""
        for key, candidate in self._items.items():
            if candidate is node:
                return key
        raise ValueError("node is not in this dictionary")