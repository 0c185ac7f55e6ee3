"""
In-place BST with parent links.

The handle is a Tree object that insert/remove mutate and hand back. The
successor query climbs parent links the textbook way and returns a plain
dict record ({"value": ...}).
"""

from __future__ import annotations

from typing import Dict, List, Optional

from bstcheck.candidate import OrderedSetCandidate

CANDIDATE_NAME = "mutable_bst"


class _Node:
    __slots__ = ("value", "left", "right", "parent")

    def __init__(self, value: int, parent: Optional["_Node"] = None):
        self.value = value
        self.left: Optional[_Node] = None
        self.right: Optional[_Node] = None
        self.parent = parent


class Tree:
    __slots__ = ("root",)

    def __init__(self) -> None:
        self.root: Optional[_Node] = None

    def locate(self, value: int) -> Optional[_Node]:
        node = self.root
        while node is not None and node.value != value:
            node = node.left if value < node.value else node.right
        return node


def _leftmost(node: _Node) -> _Node:
    while node.left is not None:
        node = node.left
    return node


class MutableBST(OrderedSetCandidate):
    def insert(self, handle: Optional[Tree], value: int) -> Tree:
        tree = handle if handle is not None else Tree()
        if tree.root is None:
            tree.root = _Node(value)
            return tree
        node = tree.root
        while True:
            if value == node.value:
                return tree
            side = "left" if value < node.value else "right"
            child = getattr(node, side)
            if child is None:
                setattr(node, side, _Node(value, node))
                return tree
            node = child

    def find(self, handle: Optional[Tree], value: int) -> bool:
        return handle is not None and handle.locate(value) is not None

    def successor(self, handle: Optional[Tree], value: int) -> Optional[Dict[str, int]]:
        if handle is None:
            return None
        node = handle.locate(value)
        if node is None:
            return None
        if node.right is not None:
            return {"value": _leftmost(node.right).value}
        parent = node.parent
        while parent is not None and node is parent.right:
            node, parent = parent, parent.parent
        return None if parent is None else {"value": parent.value}

    def _transplant(self, tree: Tree, old: _Node, new: Optional[_Node]) -> None:
        if old.parent is None:
            tree.root = new
        elif old is old.parent.left:
            old.parent.left = new
        else:
            old.parent.right = new
        if new is not None:
            new.parent = old.parent

    def remove(self, handle: Optional[Tree], value: int) -> Optional[Tree]:
        if handle is None:
            return None
        node = handle.locate(value)
        if node is None:
            return handle
        if node.left is None:
            self._transplant(handle, node, node.right)
        elif node.right is None:
            self._transplant(handle, node, node.left)
        else:
            heir = _leftmost(node.right)
            if heir.parent is not node:
                self._transplant(handle, heir, heir.right)
                heir.right = node.right
                heir.right.parent = heir
            self._transplant(handle, node, heir)
            heir.left = node.left
            heir.left.parent = heir
        return handle

    def sorted(self, handle: Optional[Tree]) -> List[int]:
        if handle is None or handle.root is None:
            return []
        out: List[int] = []
        node: Optional[_Node] = _leftmost(handle.root)
        while node is not None:
            out.append(node.value)
            if node.right is not None:
                node = _leftmost(node.right)
                continue
            while node.parent is not None and node is node.parent.right:
                node = node.parent
            node = node.parent
        return out


def make_candidate() -> MutableBST:
    return MutableBST()
