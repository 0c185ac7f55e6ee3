"""
Persistent (path-copying) unbalanced BST.

Handles are immutable Node trees; every insert/remove returns a new root and
leaves the old tree untouched. successor() returns the Node itself, which
carries the `value` field the harness compares.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from bstcheck.candidate import OrderedSetCandidate

CANDIDATE_NAME = "persistent_bst"


@dataclass(frozen=True)
class Node:
    value: int
    left: Optional["Node"] = None
    right: Optional["Node"] = None


def _insert(node: Optional[Node], value: int) -> Node:
    if node is None:
        return Node(value)
    if value < node.value:
        return Node(node.value, _insert(node.left, value), node.right)
    if value > node.value:
        return Node(node.value, node.left, _insert(node.right, value))
    return node


def _min_node(node: Node) -> Node:
    while node.left is not None:
        node = node.left
    return node


def _remove(node: Optional[Node], value: int) -> Optional[Node]:
    if node is None:
        return None
    if value < node.value:
        return Node(node.value, _remove(node.left, value), node.right)
    if value > node.value:
        return Node(node.value, node.left, _remove(node.right, value))
    if node.left is None:
        return node.right
    if node.right is None:
        return node.left
    heir = _min_node(node.right)
    return Node(heir.value, node.left, _remove(node.right, heir.value))


class PersistentBST(OrderedSetCandidate):
    def insert(self, handle: Optional[Node], value: int) -> Node:
        return _insert(handle, value)

    def find(self, handle: Optional[Node], value: int) -> bool:
        node = handle
        while node is not None:
            if value == node.value:
                return True
            node = node.left if value < node.value else node.right
        return False

    def successor(self, handle: Optional[Node], value: int) -> Optional[Node]:
        # Walk down remembering the last node where we turned left.
        node, best, found = handle, None, False
        while node is not None:
            if value < node.value:
                best = node
                node = node.left
            elif value > node.value:
                node = node.right
            else:
                found = True
                if node.right is not None:
                    best = _min_node(node.right)
                break
        return best if found else None

    def remove(self, handle: Optional[Node], value: int) -> Optional[Node]:
        return _remove(handle, value)

    def sorted(self, handle: Optional[Node]) -> List[int]:
        out: List[int] = []
        stack: List[Node] = []
        node = handle
        while stack or node is not None:
            while node is not None:
                stack.append(node)
                node = node.left
            node = stack.pop()
            out.append(node.value)
            node = node.right
        return out


def make_candidate() -> PersistentBST:
    return PersistentBST()
