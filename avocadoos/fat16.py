"""Read-only FAT16 file system driver."""

from __future__ import annotations

import struct
from dataclasses import astuple, dataclass, field, replace
from enum import IntEnum
from typing import ClassVar, Iterator, Sequence

from .disk import Disk, DiskStream
from .errors import InvalidArgument, IOFailure, WrongMediumType
from .fstypes import OpenMode, Stat, Whence

FAT16_SIGNATURE = 0x29
FAT16_SYSTEM_ID = b"FAT16   "

ATTR_READ_ONLY = 0x01
ATTR_HIDDEN = 0x02
ATTR_SYSTEM = 0x04
ATTR_VOLUME_LABEL = 0x08
ATTR_SUBDIRECTORY = 0x10
ATTR_ARCHIVED = 0x20
ATTR_DEVICE = 0x40
ATTR_RESERVED = 0x80
ATTR_LFN = 0x0F

CLUSTER_RESERVED = 0xFFF6
CLUSTER_BAD_OR_RESERVED = 0xFFF7
CLUSTER_CHAIN_END_BEGIN = 0xFFF8
CLUSTER_CHAIN_END_END = 0xFFFF


class ItemType(IntEnum):
    DIRECTORY = 0
    FILE = 1
    ROOT_DIRECTORY = 255


def split_entry_name(name: str) -> tuple[str, str]:
    """Split ``NAME.EXT`` into the space-padded 8.3 fields of a directory entry."""
    text = name.split("\0", 1)[0][:12]
    stem, dot, extension = text.partition(".")
    if not dot:
        extension = ""
    return stem[:8].ljust(8), extension[:3].ljust(3)


@dataclass(frozen=True)
class FatHeader:
    """BIOS parameter block and extended boot record of a FAT16 volume."""

    jump_nop: bytes = b"\0\0\0"
    oem_identifier: bytes = b"\0" * 8
    bytes_per_sector: int = 512
    sectors_per_cluster: int = 1
    reserved_sectors: int = 1
    fat_copies: int = 2
    root_dir_entries: int = 512
    total_sectors: int = 0
    media_type: int = 0xF8
    sectors_per_fat: int = 0
    sectors_per_track: int = 0
    number_of_heads: int = 0
    hidden_sectors: int = 0
    sectors_big: int = 0
    drive_number: int = 0
    win_nt_bit: int = 0
    signature: int = FAT16_SIGNATURE
    volume_id: int = 0
    volume_id_string: bytes = b" " * 11
    system_id_string: bytes = FAT16_SYSTEM_ID

    FORMAT: ClassVar[str] = "<3s8sHBHBHHBHHHIIBBBI11s8s"
    SIZE: ClassVar[int] = struct.calcsize("<3s8sHBHBHHBHHHIIBBBI11s8s")

    @classmethod
    def unpack(cls, data: bytes) -> FatHeader:
        if len(data) < cls.SIZE:
            raise InvalidArgument("boot sector too short for a FAT header")
        return cls(*struct.unpack_from(cls.FORMAT, data))

    def pack(self) -> bytes:
        return struct.pack(self.FORMAT, *astuple(self))


@dataclass(frozen=True)
class DirectoryEntry:
    """A 32-byte short-name directory entry."""

    filename: str = "\0" * 8
    extension: str = "\0" * 3
    attributes: int = 0
    reserved_win_nt: int = 0
    creation_time_tenths_of_sec: int = 0
    creation_time: int = 0
    creation_date: int = 0
    last_access: int = 0
    high16_bits_first_cluster: int = 0
    last_mod_time: int = 0
    last_mod_date: int = 0
    low16_bits_first_cluster: int = 0
    size_bytes: int = 0

    FORMAT: ClassVar[str] = "<8s3sBBBHHHHHHHI"
    SIZE: ClassVar[int] = struct.calcsize("<8s3sBBBHHHHHHHI")

    @classmethod
    def unpack(cls, data: bytes) -> DirectoryEntry:
        if len(data) < cls.SIZE:
            raise InvalidArgument("directory entry too short")
        raw_name, raw_ext, *rest = struct.unpack_from(cls.FORMAT, data)
        return cls(raw_name.decode("latin-1"), raw_ext.decode("latin-1"), *rest)

    def pack(self) -> bytes:
        name, ext, *rest = astuple(self)
        return struct.pack(self.FORMAT, name.encode("latin-1"), ext.encode("latin-1"), *rest)


@dataclass(frozen=True)
class FatItem:
    """A file or directory found on the volume."""

    type: ItemType
    entry: DirectoryEntry = field(default_factory=DirectoryEntry)
    first_sector: int = 0
    parent_dir_first_sector: int = 0
    parent_dir_position: int = 0


class Fat16Volume:
    """A FAT16 volume found on a disk."""

    def __init__(self, disk: Disk, header: FatHeader) -> None:
        bps = header.bytes_per_sector
        if bps == 0 or header.sectors_per_cluster == 0:
            raise WrongMediumType("FAT header has zero sector or cluster size")
        self.disk = disk
        self.header = header
        root_first = header.reserved_sectors + header.fat_copies * header.sectors_per_fat
        self.root_directory = FatItem(ItemType.ROOT_DIRECTORY, DirectoryEntry(), root_first)
        root_sectors = (header.root_dir_entries * DirectoryEntry.SIZE + bps - 1) // bps
        self.root_dir_bytes = root_sectors * bps
        self.data_sector = root_first + root_sectors
        self.bytes_per_cluster = bps * header.sectors_per_cluster
        self.dev = DiskStream(disk)

    @classmethod
    def probe(cls, disk: Disk) -> Fat16Volume:
        """Recognise a FAT16 volume on ``disk`` and attach it as the disk's file system."""
        with DiskStream(disk) as stream:
            data = stream.read(FatHeader.SIZE)
        header = FatHeader.unpack(data)
        if header.signature != FAT16_SIGNATURE:
            raise WrongMediumType("missing FAT16 signature")
        if header.system_id_string[: len(FAT16_SYSTEM_ID)] != FAT16_SYSTEM_ID:
            raise WrongMediumType("system id is not FAT16")
        volume = cls(disk, header)
        disk.fs_private = volume
        return volume

    def cluster_to_sector(self, cluster: int) -> int:
        """First sector of a data cluster; clusters below 2 map to sector 0."""
        if cluster < 2:
            return 0
        return self.data_sector + (cluster - 2) * self.header.sectors_per_cluster

    def sector_to_cluster(self, sector: int) -> int:
        return (2 + (sector - self.data_sector) // self.header.sectors_per_cluster) & 0xFFFF

    def _read_at(self, address: int, length: int) -> bytes:
        self.dev.seek(address)
        return self.dev.read(length)

    def read_fat(self, cluster: int) -> int:
        """The FAT entry of ``cluster``: the next cluster in its chain."""
        if cluster >= CLUSTER_CHAIN_END_BEGIN:
            return CLUSTER_CHAIN_END_BEGIN
        address = self.header.reserved_sectors * self.header.bytes_per_sector + cluster * 2
        return int.from_bytes(self._read_at(address, 2), "little")

    def follow_chain(self, cluster: int, steps: int) -> int:
        """Cluster ``steps`` links down the chain, or the marker that stopped the walk."""
        current = cluster
        for _ in range(steps):
            if current >= CLUSTER_CHAIN_END_BEGIN:
                break
            current = self.read_fat(current)
            if current in (0, CLUSTER_RESERVED, CLUSTER_BAD_OR_RESERVED):
                break
        return current

    def is_root_dir(self, item: FatItem) -> bool:
        return (
            item.type == ItemType.ROOT_DIRECTORY
            and item.first_sector == self.root_directory.first_sector
        )

    def open_item(self, item: FatItem) -> FatDescriptor:
        if self.is_root_dir(item):
            kind = ItemType.ROOT_DIRECTORY
        elif item.entry.attributes & ATTR_SUBDIRECTORY:
            kind = ItemType.DIRECTORY
        else:
            kind = ItemType.FILE
        return FatDescriptor(self, replace(item, type=kind))

    def _entries(self, descriptor: FatDescriptor) -> Iterator[tuple[int, DirectoryEntry]]:
        """Used entries of a directory with their 1-based slot positions."""
        descriptor._reset()
        position = 0
        while not descriptor.eof:
            raw = descriptor._read_raw(DirectoryEntry.SIZE)
            if len(raw) < DirectoryEntry.SIZE:
                return
            position += 1
            entry = DirectoryEntry.unpack(raw)
            if entry.attributes == ATTR_LFN or entry.attributes & ATTR_VOLUME_LABEL:
                continue
            if entry.filename[:1] == "\0":
                descriptor.eof = True
                return
            yield position, entry

    def find_entry(self, descriptor: FatDescriptor, filename: str, extension: str) -> FatItem | None:
        """Look up ``filename``/``extension`` in an open directory; None if absent."""
        if descriptor.item.type not in (ItemType.DIRECTORY, ItemType.ROOT_DIRECTORY):
            return None
        name = filename.split("\0", 1)[0][:8].ljust(8)
        ext = extension.split("\0", 1)[0][:3].ljust(3)
        try:
            for position, entry in self._entries(descriptor):
                if entry.filename != name or entry.extension != ext:
                    continue
                kind = ItemType.DIRECTORY if entry.attributes & ATTR_SUBDIRECTORY else ItemType.FILE
                return FatItem(
                    type=kind,
                    entry=entry,
                    first_sector=self.cluster_to_sector(entry.low16_bits_first_cluster),
                    parent_dir_first_sector=descriptor.item.first_sector,
                    parent_dir_position=position,
                )
            return None
        finally:
            descriptor._reset()

    def count_items(self, descriptor: FatDescriptor) -> int:
        """Number of used entries in an open directory."""
        try:
            return sum(1 for _ in self._entries(descriptor))
        finally:
            descriptor._reset()

    def traverse(self, parts: Sequence[str]) -> FatItem | None:
        """Walk the path components from the root; None if any is missing."""
        item: FatItem | None = replace(self.root_directory)
        for part in parts:
            assert item is not None
            folder = self.open_item(item)
            filename, extension = split_entry_name(part)
            item = self.find_entry(folder, filename, extension)
            if item is None:
                return None
        return item

    def open(self, parts: Sequence[str], mode: OpenMode = OpenMode.READ) -> FatDescriptor:
        """Open the item at ``parts``; the driver only reads, whatever the mode."""
        item = self.traverse(parts)
        if item is None:
            raise IOFailure(f"no such file: {'/'.join(parts)}")
        return self.open_item(item)


class FatDescriptor:
    """Read cursor over a file or directory of a FAT16 volume."""

    def __init__(self, volume: Fat16Volume, item: FatItem) -> None:
        self.volume = volume
        self.item = item
        self.error = 0
        self.closed = False
        self.pos = 0
        self.relative_pos = 0
        self.current_cluster_first_sector = item.first_sector
        self.eof = False

    def _reset(self) -> None:
        self.pos = 0
        self.relative_pos = 0
        self.current_cluster_first_sector = self.item.first_sector
        self.eof = False

    def _fail(self, message: str) -> None:
        self.error = -IOFailure.errno
        raise IOFailure(message)

    def _adjust(self, offset: int) -> None:
        volume = self.volume
        self.pos += offset
        if volume.is_root_dir(self.item):
            self.relative_pos = self.pos
            if self.pos >= volume.root_dir_bytes:
                self.eof = True
                if self.pos > volume.root_dir_bytes:
                    self._fail("read past the root directory")
            return

        first_cluster = self.item.entry.low16_bits_first_cluster
        if not first_cluster:
            self.eof = True
            return
        bpc = volume.bytes_per_cluster
        current = volume.follow_chain(first_cluster, self.pos // bpc)
        self.relative_pos = self.pos % bpc
        if current in (0, CLUSTER_RESERVED, CLUSTER_BAD_OR_RESERVED):
            self._fail(f"broken cluster chain at cluster {current:#x}")
        if current < CLUSTER_CHAIN_END_BEGIN:
            self.current_cluster_first_sector = volume.cluster_to_sector(current)
        else:
            self.eof = True

    def _read_raw(self, length: int) -> bytes:
        """Read up to ``length`` bytes of the item's clusters, ignoring its size."""
        volume = self.volume
        chunks: list[bytes] = []
        read = 0
        while read < length and not self.eof:
            address = self.current_cluster_first_sector * volume.header.bytes_per_sector + self.relative_pos
            if volume.is_root_dir(self.item):
                limit = volume.root_dir_bytes - self.relative_pos
            else:
                limit = volume.bytes_per_cluster - self.relative_pos
            try:
                data = volume._read_at(address, min(length - read, limit))
            except IOFailure:
                self.error = -IOFailure.errno
                raise
            if not data:
                self._fail("short read from disk")
            self._adjust(len(data))
            chunks.append(data)
            read += len(data)
        return b"".join(chunks)

    def _check_open(self) -> None:
        if self.closed:
            raise ValueError("I/O on closed FAT descriptor")

    def read(self, size: int) -> bytes:
        """Read up to ``size`` bytes of the file from the current position."""
        self._check_open()
        if size < 0:
            raise InvalidArgument("read size must not be negative")
        self._adjust(0)
        if self.eof:
            return b""
        file_size = self.item.entry.size_bytes
        if self.pos >= file_size:
            self.eof = True
            return b""
        data = self._read_raw(min(size, file_size - self.pos))
        if self.pos >= file_size:
            self.eof = True
        return data

    def seek(self, offset: int, whence: int = Whence.SET) -> int:
        """Move the cursor; ``Whence.END`` goes to the end and ignores ``offset``."""
        self._check_open()
        try:
            mode = Whence(whence)
        except ValueError:
            raise InvalidArgument(f"unknown whence {whence}") from None
        if mode is Whence.SET:
            target = offset
        elif mode is Whence.CUR:
            target = self.pos + offset
        else:
            target = self.item.entry.size_bytes
        if target < 0:
            raise InvalidArgument("file position must not be negative")
        self.pos = target
        self.eof = False
        return target

    def stat(self) -> Stat:
        return Stat(st_dev=self.volume.disk.disk_id, st_size=self.item.entry.size_bytes)

    def close(self) -> None:
        self.closed = True

    def __enter__(self) -> FatDescriptor:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()