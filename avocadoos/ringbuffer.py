"""Fixed-capacity circular FIFO buffer."""

from __future__ import annotations

from typing import Any, Sequence

BUFFER_SIZE = 3


class CircularBuffer:
    """FIFO of fixed capacity; slots keep their last value after a pop."""

    def __init__(self, capacity: int = BUFFER_SIZE) -> None:
        if capacity < 1:
            raise ValueError("capacity must be positive")
        self._slots: list[Any] = [None] * capacity
        self._head = 0
        self._end = 0
        self._count = 0

    def full(self) -> bool:
        return self._count == len(self._slots)

    def empty(self) -> bool:
        return self._count == 0

    def push_back(self, value: Any) -> bool:
        """Append a value; returns False when the buffer is full."""
        if self.full():
            return False
        self._slots[self._head] = value
        self._head = (self._head + 1) % len(self._slots)
        self._count += 1
        return True

    def pop_front(self) -> Any | None:
        """Take the oldest value, or None when the buffer is empty."""
        if self.empty():
            return None
        value = self._slots[self._end]
        self._end = (self._end + 1) % len(self._slots)
        self._count -= 1
        return value

    def slots(self) -> tuple[Any, ...]:
        """Raw slot contents, including values already popped."""
        return tuple(self._slots)

    def render(self) -> str:
        return "".join(f"{-1 if v is None else v}, " for v in self._slots)

    def __len__(self) -> int:
        return self._count


def _report_pop(value: Any | None) -> None:
    print(f"pop?: {int(value is not None)}; {-1 if value is None else value}")


def main(argv: Sequence[str] | None = None) -> int:
    buffer = CircularBuffer()
    values = [100, 200, 300, 400, 500, 600, 700, 800, 900, 1000]

    _report_pop(buffer.pop_front())
    for value in values:
        print(f"pushed?: {int(buffer.push_back(value))}")

    _report_pop(buffer.pop_front())
    taken = buffer.pop_front()
    print(f"pushed?: {int(buffer.push_back(values[7]))}")
    _report_pop(taken)
    for _ in range(3):
        _report_pop(buffer.pop_front())

    print(buffer.render())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())