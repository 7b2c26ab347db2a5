"""Table mapping file numbers to open file handles."""

from __future__ import annotations

from typing import Generic, Protocol, TypeVar

from .errors import BadFileDescriptor, TooManyOpenFiles

MAX_OPEN_FILES = 100


class _Numbered(Protocol):
    fileno: int


H = TypeVar("H", bound=_Numbered)


class FileTable(Generic[H]):
    """Fixed-size table of open files; each handle learns its slot as ``fileno``."""

    def __init__(self, capacity: int = MAX_OPEN_FILES) -> None:
        if capacity < 1:
            raise ValueError("file table capacity must be positive")
        self._slots: list[H | None] = [None] * capacity

    def __len__(self) -> int:
        return sum(1 for slot in self._slots if slot is not None)

    def open_file(self, handle: H) -> int:
        """Put ``handle`` in the lowest free slot and return its number."""
        for index, slot in enumerate(self._slots):
            if slot is None:
                handle.fileno = index
                self._slots[index] = handle
                return index
        raise TooManyOpenFiles()

    def close_file(self, handle: H) -> None:
        """Free the slot of ``handle`` and mark the handle as closed."""
        if not 0 <= handle.fileno < len(self._slots):
            raise BadFileDescriptor(f"bad file number {handle.fileno}")
        self._slots[handle.fileno] = None
        handle.fileno = -1

    def get(self, fd: int) -> H | None:
        """The handle open under ``fd``, or None."""
        if not 0 <= fd < len(self._slots):
            return None
        return self._slots[fd]