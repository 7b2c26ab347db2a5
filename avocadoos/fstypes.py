"""Types shared by the virtual file system and the file system drivers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class OpenMode(IntEnum):
    INVALID = 0
    READ = 1
    WRITE = 2
    RW = 3
    APPEND = 4


class Whence(IntEnum):
    SET = 0
    CUR = 1
    END = 2


@dataclass(frozen=True)
class Stat:
    """What ``fstat`` reports about an open file."""

    st_dev: int
    st_size: int


_MODES = {
    "w": OpenMode.WRITE,
    "r": OpenMode.READ,
    "a": OpenMode.APPEND,
}


def mode_from_string(text: str) -> OpenMode:
    """Open mode named by the first character of ``text``.

    Only that character counts, so ``"rw"`` opens for reading; anything
    unknown gives :attr:`OpenMode.INVALID`.
    """
    return _MODES.get(text[:1], OpenMode.INVALID)