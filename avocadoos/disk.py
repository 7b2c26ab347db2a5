"""Sector-addressed disks backed by an image, and byte streams over them."""

from __future__ import annotations

import os
from typing import Any, Sequence

from .errors import InvalidArgument, IOFailure, NoMedium

DISK_SECTOR_SIZE = 512
DISK_TYPE_PHYSICAL = 0


class Disk:
    """A disk whose sectors come from an in-memory image."""

    def __init__(self, image: bytes, disk_id: int = 0, sector_size: int = DISK_SECTOR_SIZE) -> None:
        if sector_size <= 0:
            raise InvalidArgument("sector size must be positive")
        self.image = bytes(image)
        self.disk_id = disk_id
        self.sector_size = sector_size
        self.type = DISK_TYPE_PHYSICAL
        self.fs_operations: Any = None
        self.fs_private: Any = None

    @classmethod
    def from_path(cls, path: str | os.PathLike[str]) -> Disk:
        with open(path, "rb") as handle:
            return cls(handle.read())

    def read_sectors(self, lba: int, count: int) -> bytes:
        """Read ``count`` whole sectors starting at ``lba``."""
        if lba < 0 or count < 0:
            raise InvalidArgument("sector address and count must not be negative")
        start = lba * self.sector_size
        end = start + count * self.sector_size
        if end > len(self.image):
            raise IOFailure(f"sectors {lba}..{lba + count - 1} lie beyond the disk")
        return self.image[start:end]


class DiskRegistry:
    """The disks known to the kernel, looked up by index."""

    def __init__(self, disks: Sequence[Disk]) -> None:
        self._disks = list(disks)

    def get(self, index: int) -> Disk:
        if not 0 <= index < len(self._disks):
            raise NoMedium(f"no disk {index}")
        return self._disks[index]


class DiskStream:
    """Byte-granular reader over a disk's sectors."""

    def __init__(self, disk: Disk) -> None:
        self.disk = disk
        self.pos = 0
        self.closed = False

    def seek(self, pos: int) -> int:
        if pos < 0:
            raise InvalidArgument("stream position must not be negative")
        self.pos = pos
        return pos

    def read(self, length: int) -> bytes:
        """Read ``length`` bytes at the current position and advance past them."""
        if self.closed:
            raise ValueError("I/O on closed disk stream")
        if length < 0:
            raise InvalidArgument("read length must not be negative")
        size = self.disk.sector_size
        sector, offset = divmod(self.pos, size)
        chunks: list[bytes] = []
        remaining = length
        while remaining > 0:
            data = self.disk.read_sectors(sector, 1)
            chunk = data[offset : offset + remaining]
            chunks.append(chunk)
            remaining -= len(chunk)
            offset = 0
            sector += 1
        result = b"".join(chunks)
        self.pos += len(result)
        return result

    def close(self) -> None:
        self.closed = True

    def __enter__(self) -> DiskStream:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()