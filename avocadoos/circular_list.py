"""Doubly linked circular list with a movable head."""

from __future__ import annotations

from contextlib import suppress
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, Sequence


@dataclass(eq=False)
class Node:
    """A list node; a detached node links to itself."""

    value: Any
    next: Node = field(init=False, repr=False)
    prev: Node = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.next = self
        self.prev = self


class CircularList:
    """Circular doubly linked list; iteration starts at the head."""

    def __init__(self, values: Iterable[Any] = ()) -> None:
        self.head: Node | None = None
        self._size = 0
        for value in values:
            self.push_back(value)

    def _link_before(self, anchor: Node, node: Node) -> None:
        node.next = anchor
        node.prev = anchor.prev
        anchor.prev.next = node
        anchor.prev = node
        self._size += 1

    def _link_after(self, anchor: Node, node: Node) -> None:
        self._link_before(anchor.next, node)

    def _unlink(self, node: Node) -> None:
        node.prev.next = node.next
        node.next.prev = node.prev
        node.next = node
        node.prev = node
        self._size -= 1

    def _nodes(self) -> Iterator[Node]:
        if self.head is None:
            return
        node = self.head
        while True:
            yield node
            node = node.next
            if node is self.head:
                return

    def push_back(self, value: Any) -> Node:
        """Insert before the head, i.e. at the end."""
        node = Node(value)
        if self.head is None:
            self.head = node
            self._size = 1
        else:
            self._link_before(self.head, node)
        return node

    def push_front(self, value: Any) -> Node:
        node = self.push_back(value)
        self.head = node
        return node

    def extract_head(self) -> Any:
        """Remove the head; the next node becomes the head."""
        node = self.head
        if node is None:
            raise IndexError("extract from empty list")
        if node.next is node:
            self.head = None
            self._size = 0
        else:
            self.head = node.next
            self._unlink(node)
        return node.value

    def pop_back(self) -> Any:
        if self.head is None:
            raise IndexError("pop from empty list")
        node = self.head.prev
        if node is self.head:
            return self.extract_head()
        self._unlink(node)
        return node.value

    def pop_front(self) -> Any:
        return self.extract_head()

    def find_index(self, index: int) -> Node:
        if index >= 0:
            for position, node in enumerate(self._nodes()):
                if position == index:
                    return node
        raise IndexError(f"index {index} out of range")

    def pop_index(self, index: int) -> Any:
        node = self.find_index(index)
        if node is self.head:
            return self.extract_head()
        self._unlink(node)
        return node.value

    def push_index(self, index: int, value: Any) -> Node:
        """Insert so the new value sits at ``index``; ``len(self)`` appends."""
        if index < 0 or index > self._size:
            raise IndexError(f"index {index} out of range")
        if index == 0:
            return self.push_front(value)
        if index == self._size:
            return self.push_back(value)
        node = Node(value)
        self._link_before(self.find_index(index), node)
        return node

    def swap(self, first: Node, second: Node) -> Node:
        """Exchange the positions of two nodes; the head stays at its position.

        Returns the node now standing where ``first`` was.
        """
        if first is second:
            return first
        if first.next is second:
            self._unlink(first)
            self._link_after(second, first)
        elif second.next is first:
            self._unlink(second)
            self._link_after(first, second)
        else:
            first_prev, second_prev = first.prev, second.prev
            self._unlink(first)
            self._link_after(second_prev, first)
            self._unlink(second)
            self._link_after(first_prev, second)

        if self.head is first:
            self.head = second
        elif self.head is second:
            self.head = first
        return second

    def clear(self) -> None:
        self.head = None
        self._size = 0

    def __iter__(self) -> Iterator[Any]:
        return (node.value for node in self._nodes())

    def __reversed__(self) -> Iterator[Any]:
        if self.head is None:
            return
        last = self.head.prev
        node = last
        while True:
            yield node.value
            node = node.prev
            if node is last:
                return

    def __len__(self) -> int:
        return self._size


def _show(items: CircularList) -> None:
    print("List:", *items)


def main(argv: Sequence[str] | None = None) -> int:
    items = CircularList()
    _show(items)
    for i in range(5):
        items.push_back(i)
    _show(items)

    for _ in range(2):
        items.extract_head()
        _show(items)
    for _ in range(4):
        with suppress(IndexError):
            items.pop_back()
        _show(items)

    for i in range(5):
        items.push_back(i)
    for _ in range(5):
        _show(items)
        items.pop_front()

    for i in range(5):
        items.push_back(i)
    _show(items)
    for index in (100, 0, 1, 2, 1, 0):
        with suppress(IndexError):
            items.pop_index(index)
        _show(items)

    for index, value in enumerate((1000, 2000, 3000, 4000)):
        items.push_index(index, value)
    _show(items)

    first, second = items.find_index(0), items.find_index(1)
    items.swap(first, first)
    _show(items)
    items.swap(first, second)
    _show(items)
    items.swap(second, first)
    _show(items)
    items.swap(items.find_index(0), items.find_index(1))
    _show(items)

    items.clear()
    for i in range(128):
        items.push_back(i)
    _show(items)
    items.clear()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())