"""Breadth-first and depth-first walks over a search tree."""

from __future__ import annotations

from collections import deque
from typing import Any, Hashable, Iterable, Iterator, Optional, Protocol, Sequence, Tuple


class _ChildSource(Protocol):
    def get_children(self, node_id: Any) -> Sequence[Tuple[Any, Any]]:
        ...


class BfsWalker:
    """Breadth-first walk over node ids; the tree is passed to each step.

    Nodes listed in ``skip`` are never entered, and every node is yielded at
    most once even if several parents link to it.
    """

    def __init__(self, start: Hashable, skip: Iterable[Hashable] = ()) -> None:
        self._queue = deque([start])
        self._skip = set(skip)
        self._visited = {start}

    def step(self, tree: _ChildSource) -> Optional[Hashable]:
        """Return the next node id, or ``None`` when the walk is done."""
        if not self._queue:
            return None
        node_id = self._queue.popleft()
        for child_id, _ in tree.get_children(node_id):
            if child_id not in self._skip and child_id not in self._visited:
                self._visited.add(child_id)
                self._queue.append(child_id)
        return node_id

    def iterate(self, tree: _ChildSource) -> Iterator[Hashable]:
        """Yield the remaining node ids of the walk."""
        while (node_id := self.step(tree)) is not None:
            yield node_id


class DfsWalker:
    """Depth-first walk over node ids, children in their stored order.

    Nodes listed in ``skip`` are never entered, and each child is pushed at
    most once even if several parents link to it.
    """

    def __init__(self, start: Hashable, skip: Iterable[Hashable] = ()) -> None:
        self._stack = [start]
        self._skip = set(skip)
        self._visited: set = set()

    def step(self, tree: _ChildSource) -> Optional[Hashable]:
        """Return the next node id, or ``None`` when the walk is done."""
        if not self._stack:
            return None
        node_id = self._stack.pop()
        for child_id, _ in reversed(tree.get_children(node_id)):
            if child_id not in self._skip and child_id not in self._visited:
                self._visited.add(child_id)
                self._stack.append(child_id)
        return node_id

    def is_empty(self) -> bool:
        """Whether no node is left to visit."""
        return not self._stack

    def iterate(self, tree: _ChildSource) -> Iterator[Hashable]:
        """Yield the remaining node ids of the walk."""
        while (node_id := self.step(tree)) is not None:
            yield node_id