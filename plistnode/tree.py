"""Ordered n-ary tree of nodes that carry arbitrary data."""

from __future__ import annotations

from typing import Any, Callable, Iterator, Optional, Sequence


class TreeNode:
    """A node with an optional payload, a parent and an ordered list of children."""

    def __init__(self, data: Any = None, parent: Optional[TreeNode] = None) -> None:
        self.data = data
        self.parent: Optional[TreeNode] = None
        self._children: list[TreeNode] = []
        if parent is not None:
            parent.attach(self)

    def __len__(self) -> int:
        return len(self._children)

    def __iter__(self) -> Iterator[TreeNode]:
        return iter(tuple(self._children))

    def __repr__(self) -> str:
        return f"TreeNode(data={self.data!r}, children={len(self._children)})"

    def _index_of(self, child: TreeNode) -> int:
        for position, candidate in enumerate(self._children):
            if candidate is child:
                return position
        raise ValueError("node is not a child of this node")

    def _adopt(self, child: TreeNode) -> None:
        if not isinstance(child, TreeNode):
            raise TypeError("child must be a TreeNode")
        ancestor: Optional[TreeNode] = self
        while ancestor is not None:
            if ancestor is child:
                raise ValueError("cannot attach a node to itself or its descendant")
            ancestor = ancestor.parent
        if child.parent is not None:
            child.parent.detach(child)
        child.parent = self

    def attach(self, child: TreeNode) -> None:
        """Append ``child`` as the last child of this node."""
        self._adopt(child)
        self._children.append(child)

    def detach(self, child: TreeNode) -> int:
        """Remove ``child`` and return the position it had."""
        position = self._index_of(child)
        del self._children[position]
        child.parent = None
        return position

    def insert(self, index: int, child: TreeNode) -> None:
        """Insert ``child`` before position ``index``; past the end it is appended."""
        if index < 0:
            raise ValueError("index must not be negative")
        self._adopt(child)
        self._children.insert(min(index, len(self._children)), child)

    def nth_child(self, n: int) -> Optional[TreeNode]:
        """Return the child at position ``n``, or None if there is none."""
        if 0 <= n < len(self._children):
            return self._children[n]
        return None

    def first_child(self) -> Optional[TreeNode]:
        return self._children[0] if self._children else None

    def _siblings(self) -> tuple[Sequence[TreeNode], int]:
        assert self.parent is not None
        siblings = self.parent._children
        return siblings, self.parent._index_of(self)

    def next_sibling(self) -> Optional[TreeNode]:
        if self.parent is None:
            return None
        siblings, position = self._siblings()
        return siblings[position + 1] if position + 1 < len(siblings) else None

    def prev_sibling(self) -> Optional[TreeNode]:
        if self.parent is None:
            return None
        siblings, position = self._siblings()
        return siblings[position - 1] if position > 0 else None

    def child_position(self, child: TreeNode) -> int:
        """Return the position of ``child`` among this node's children."""
        return self._index_of(child)

    def copy_deep(self, copy_func: Optional[Callable[[Any], Any]] = None) -> TreeNode:
        """Copy this subtree; payloads go through ``copy_func`` or become None."""
        data = copy_func(self.data) if copy_func is not None else None
        copy = TreeNode(data)
        for child in self._children:
            copy.attach(child.copy_deep(copy_func))
        return copy

    def _debug_lines(self, depth: int) -> Iterator[str]:
        indent = "\t" * depth
        if self.parent is None:
            yield indent + "ROOT"
        if not self._children and self.parent is not None:
            yield indent + "LEAF"
        else:
            if self.parent is not None:
                yield indent + "NODE"
            for child in self._children:
                yield from child._debug_lines(depth + 1)

    def debug(self) -> None:
        """Print the shape of this subtree, one line per node."""
        for line in self._debug_lines(0):
            print(line)

    def _destroy(self) -> None:
        for child in tuple(self._children):
            self.detach(child)
            child._destroy()


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Build a small tree, print its shape and tear it down."""
    print("Creating root node")
    root = TreeNode()
    print("Creating child 1 node")
    one = TreeNode(parent=root)
    print("Creating child 2 node")
    TreeNode(parent=root)
    print("Creating child 3 node")
    TreeNode(parent=one)
    print("Debugging root node")
    root.debug()
    print("Destroying root node")
    root._destroy()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())