"""Binary search trees, plain or AVL-balanced, and a small command interpreter."""

from __future__ import annotations

import re
import sys
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, Iterator, List, Optional, Sequence

_INT_RE = re.compile(r"\s*([+-]?\d+)")


class TreeKind(Enum):
    """Balancing policy of a :class:`SearchTree`."""

    AVL = 0
    BST = 1


@dataclass(eq=False)
class Node:
    """A tree node; ``height`` is 0 for a leaf."""

    data: int
    height: int = 0
    left: Optional["Node"] = None
    right: Optional["Node"] = None


def _height(node: Optional[Node]) -> int:
    return node.height if node is not None else -1


def _update_height(node: Node) -> None:
    node.height = 1 + max(_height(node.left), _height(node.right))


def _balance(node: Optional[Node]) -> int:
    if node is None:
        return 0
    return _height(node.left) - _height(node.right)


def _rotate_left(node: Node) -> Node:
    pivot = node.right
    if pivot is None:
        return node
    node.right = pivot.left
    pivot.left = node
    _update_height(node)
    _update_height(pivot)
    return pivot


def _rotate_right(node: Node) -> Node:
    pivot = node.left
    if pivot is None:
        return node
    node.left = pivot.right
    pivot.right = node
    _update_height(node)
    _update_height(pivot)
    return pivot


def _rebalance_after_insert(node: Node, value: int) -> Node:
    balance = _balance(node)
    if balance > 1 and value < node.left.data:
        return _rotate_right(node)
    if balance < -1 and value > node.right.data:
        return _rotate_left(node)
    if balance > 1 and value > node.left.data:
        node.left = _rotate_left(node.left)
        return _rotate_right(node)
    if balance < -1 and value < node.right.data:
        node.right = _rotate_right(node.right)
        return _rotate_left(node)
    return node


def _rebalance_after_delete(node: Node) -> Node:
    balance = _balance(node)
    if balance > 1:
        if _balance(node.left) < 0:
            node.left = _rotate_left(node.left)
        return _rotate_right(node)
    if balance < -1:
        if _balance(node.right) > 0:
            node.right = _rotate_right(node.right)
        return _rotate_left(node)
    return node


class SearchTree:
    """A binary search tree of positive integers.

    Non-positive values are ignored by every operation. With
    :attr:`TreeKind.AVL` the tree rebalances itself after each change.
    """

    def __init__(self, kind: TreeKind = TreeKind.BST) -> None:
        self.kind = kind
        self.root: Optional[Node] = None

    def clear(self) -> None:
        """Remove every node."""
        self.root = None

    def _relink(self, parent: Optional[Node], old: Node, new: Optional[Node]) -> None:
        if parent is None:
            self.root = new
        elif parent.left is old:
            parent.left = new
        else:
            parent.right = new

    def _retrace(self, path: List[Node], rebalance: Callable[[Node], Node]) -> None:
        for depth in range(len(path) - 1, -1, -1):
            node = path[depth]
            _update_height(node)
            if self.kind is TreeKind.AVL:
                replacement = rebalance(node)
                if replacement is not node:
                    self._relink(path[depth - 1] if depth else None, node, replacement)

    def insert(self, value: int) -> None:
        """Add ``value``; duplicates and non-positive values are ignored."""
        if value <= 0:
            return
        if self.root is None:
            self.root = Node(value)
            return
        path: List[Node] = []
        node: Optional[Node] = self.root
        while node is not None:
            if value == node.data:
                return
            path.append(node)
            node = node.left if value < node.data else node.right
        parent = path[-1]
        if value < parent.data:
            parent.left = Node(value)
        else:
            parent.right = Node(value)
        self._retrace(path, lambda n: _rebalance_after_insert(n, value))

    def delete(self, value: int) -> None:
        """Remove ``value`` if present.

        A node with two children takes the largest value of its left subtree.
        """
        if value <= 0:
            return
        path: List[Node] = []
        node = self.root
        while node is not None and node.data != value:
            path.append(node)
            node = node.left if value < node.data else node.right
        if node is None:
            return
        if node.left is not None and node.right is not None:
            path.append(node)
            pred = node.left
            while pred.right is not None:
                path.append(pred)
                pred = pred.right
            node.data = pred.data
            self._relink(path[-1], pred, pred.left)
        else:
            child = node.left if node.left is not None else node.right
            self._relink(path[-1] if path else None, node, child)
        self._retrace(path, _rebalance_after_delete)

    def __contains__(self, value: object) -> bool:
        if not isinstance(value, int) or value <= 0:
            return False
        node = self.root
        while node is not None:
            if node.data == value:
                return True
            node = node.left if value < node.data else node.right
        return False

    def _nodes(self) -> Iterator[Node]:
        stack = [self.root] if self.root is not None else []
        while stack:
            node = stack.pop()
            yield node
            if node.right is not None:
                stack.append(node.right)
            if node.left is not None:
                stack.append(node.left)

    def preorder(self) -> List[int]:
        """Values in root, left, right order."""
        return [node.data for node in self._nodes()]

    def inorder(self) -> List[int]:
        """Values in ascending order."""
        result: List[int] = []
        stack: List[Node] = []
        node = self.root
        while stack or node is not None:
            while node is not None:
                stack.append(node)
                node = node.left
            node = stack.pop()
            result.append(node.data)
            node = node.right
        return result

    def postorder(self) -> List[int]:
        """Values in left, right, root order."""
        result: List[int] = []
        stack = [self.root] if self.root is not None else []
        while stack:
            node = stack.pop()
            result.append(node.data)
            if node.left is not None:
                stack.append(node.left)
            if node.right is not None:
                stack.append(node.right)
        result.reverse()
        return result

    def _levels(self) -> Iterator[List[Node]]:
        level = [self.root] if self.root is not None else []
        while level:
            yield level
            level = [
                child
                for node in level
                for child in (node.left, node.right)
                if child is not None
            ]

    def level_order(self) -> List[int]:
        """Values level by level, left to right."""
        result: List[int] = []
        queue = deque([self.root] if self.root is not None else [])
        while queue:
            node = queue.popleft()
            result.append(node.data)
            if node.left is not None:
                queue.append(node.left)
            if node.right is not None:
                queue.append(node.right)
        return result

    def count_nodes(self) -> int:
        """Number of nodes."""
        return sum(1 for _ in self._nodes())

    def count_leaves(self) -> int:
        """Number of nodes without children."""
        return sum(
            1 for node in self._nodes() if node.left is None and node.right is None
        )

    def height(self) -> int:
        """Height of the root (-1 when empty)."""
        return _height(self.root)

    def width(self) -> int:
        """Largest number of nodes on one level (0 when empty)."""
        return max((len(level) for level in self._levels()), default=0)

    def diameter(self) -> int:
        """Number of nodes on the longest path between two nodes (0 when empty)."""
        return max(
            (_height(node.left) + _height(node.right) + 3 for node in self._nodes()),
            default=0,
        )


def _atoi(text: str) -> int:
    match = _INT_RE.match(text)
    return int(match.group(1)) if match else 0


def _joined(values: Sequence[int]) -> str:
    return " ".join(str(value) for value in values)


def run_commands(lines: Iterable[str]) -> Iterator[str]:
    """Run tree commands, one per line, yielding each line of output.

    Each line is an operation letter followed by integer arguments.
    """
    tree = SearchTree()
    for line in lines:
        tokens = line.split()
        if not tokens:
            continue
        op = tokens[0][0]
        args = [_atoi(token) for token in tokens[1:]]
        if op == "T":
            tree.clear()
            tree.kind = TreeKind.BST
            for value in args:
                if value > 0:
                    tree.insert(value)
                elif value < 0:
                    tree.delete(-value)
        elif op == "H":
            tree.clear()
            tree.kind = TreeKind.AVL
            for value in args:
                if value:
                    tree.insert(abs(value))
        elif op == "A":
            for value in args:
                if value > 0:
                    tree.insert(value)
        elif op == "U":
            for value in args:
                if value > 0:
                    tree.delete(value)
        elif op == "F":
            target = args[0] if args else -1
            yield "Yes" if target in tree else "No"
        elif op == "Q":
            yield str(tree.count_leaves())
        elif op == "N":
            yield str(tree.count_nodes())
        elif op == "P":
            yield _joined(tree.preorder())
        elif op == "I":
            yield _joined(tree.inorder())
        elif op == "S":
            yield _joined(tree.postorder())
        elif op == "L":
            yield _joined(tree.level_order())
        elif op == "D":
            yield str(tree.height())
        elif op == "W":
            yield str(tree.width())
        elif op == "X":
            yield str(tree.diameter())


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Read a command count and that many commands from standard input."""
    del argv
    first = sys.stdin.readline()
    while first and not first.strip():
        first = sys.stdin.readline()
    count = _atoi(first)

    def commands() -> Iterator[str]:
        for _ in range(count):
            line = sys.stdin.readline()
            if not line:
                return
            yield line

    for output in run_commands(commands()):
        print(output)
    return 0