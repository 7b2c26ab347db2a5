"""Virtual file system: opens paths on registered file systems through a file table."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .disk import Disk, DiskRegistry
from .errors import BadFileDescriptor, InvalidArgument, IOFailure, KernelError, NoMedium
from .file_table import FileTable
from .fstypes import OpenMode, Stat, Whence, mode_from_string
from .path_parser import ParsedPath, parse_path

MAX_FILESYSTEMS = 5


@dataclass(eq=False)
class OpenFile:
    """An open file: the disk it lives on, its path and the driver's descriptor."""

    disk: Disk
    path: ParsedPath
    private: Any
    fileno: int = -1
    err: int = field(default=0)


class FileSystem:
    """Registered file system types and the files opened through them."""

    def __init__(self, disks: DiskRegistry, table: FileTable[OpenFile] | None = None) -> None:
        self.disks = disks
        self.table: FileTable[OpenFile] = table if table is not None else FileTable()
        self._types: list[Any] = []

    def register(self, fs_type: Any) -> None:
        """Add a file system type; it must offer ``probe(disk)``."""
        if len(self._types) >= MAX_FILESYSTEMS:
            raise IOFailure("no room for another file system type")
        self._types.append(fs_type)

    def probe(self, disk: Disk) -> Any | None:
        """Attach the first registered file system that recognises ``disk``."""
        for fs_type in self._types:
            try:
                volume = fs_type.probe(disk)
            except KernelError:
                continue
            disk.fs_operations = volume
            return volume
        disk.fs_operations = None
        return None

    def fopen(self, path: str, mode: str) -> OpenFile:
        """Open ``path`` in the mode named by the first character of ``mode``."""
        open_mode = mode_from_string(mode)
        if open_mode is OpenMode.INVALID:
            raise InvalidArgument(f"invalid open mode {mode!r}")
        parsed = parse_path(path)
        if not parsed.parts:
            raise InvalidArgument(f"path names no file: {path!r}")
        try:
            disk = self.disks.get(parsed.drive_number)
        except NoMedium as exc:
            raise IOFailure(str(exc)) from exc
        volume = disk.fs_operations
        if volume is None:
            raise IOFailure(f"no file system on drive {parsed.drive_number}")
        private = volume.open(list(parsed.parts), open_mode)
        handle = OpenFile(disk=disk, path=parsed, private=private)
        try:
            self.table.open_file(handle)
        except KernelError:
            private.close()
            raise
        return handle

    def _lookup(self, handle: OpenFile) -> OpenFile | None:
        return self.table.get(handle.fileno)

    def fclose(self, handle: OpenFile) -> None:
        descriptor = self._lookup(handle)
        if descriptor is None:
            raise BadFileDescriptor()
        self.table.close_file(descriptor)
        descriptor.private.close()

    def fread(self, handle: OpenFile, size: int, nmemb: int) -> bytes:
        """Read up to ``size * nmemb`` bytes; a closed handle reads nothing."""
        descriptor = self._lookup(handle)
        if descriptor is None:
            return b""
        return descriptor.private.read(size * nmemb)

    def fseek(self, handle: OpenFile, offset: int, whence: int = Whence.SET) -> int:
        descriptor = self._lookup(handle)
        if descriptor is None:
            raise BadFileDescriptor()
        return descriptor.private.seek(offset, whence)

    def fstat(self, fd: int) -> Stat:
        descriptor = self.table.get(fd)
        if descriptor is None:
            raise BadFileDescriptor()
        return descriptor.private.stat()