"""Two-level x86 page directory with 4 KiB pages, simulated in memory."""

from __future__ import annotations

from enum import IntFlag

from .errors import InvalidArgument
from .terminal import KernelPanic

PAGING_PAGE_SIZE = 4096
PAGING_ENTRIES_PER_TABLE = 1024
ADDR_MASK = 0xFFFFF000
RECURSIVE_SLOT = PAGING_ENTRIES_PER_TABLE - 1


class PageFlag(IntFlag):
    PRESENT = 0x01
    WRITABLE = 0x02
    USER = 0x04
    WRITE_THROUGH = 0x08
    CACHE_DISABLE = 0x10
    LARGE_PAGE = 0x80


def is_page_aligned(addr: int) -> bool:
    return addr & (PAGING_PAGE_SIZE - 1) == 0


def align_address(addr: int) -> int:
    """Round ``addr`` up to the next page boundary."""
    return PAGING_PAGE_SIZE * ((addr + PAGING_PAGE_SIZE - 1) // PAGING_PAGE_SIZE)


def directory_index(addr: int) -> int:
    return addr >> 22


def table_index(addr: int) -> int:
    return (addr >> 12) & 0x3FF


def frame_offset(addr: int) -> int:
    return addr & 0xFFF


def _entry_addr(entry: int) -> int:
    return entry & ADDR_MASK


def _entry_flags(entry: int) -> int:
    return entry & ~ADDR_MASK & 0xFFFFFFFF


class PageDirectory:
    """A page directory and the page tables it owns.

    ``directory`` holds the flags of each directory entry (or a whole entry
    for a 4 MiB page); ``tables`` holds the page tables by directory index.
    The last directory slot is the recursive self-mapping and cannot hold
    user mappings.
    """

    def __init__(self) -> None:
        self.directory: list[int] = [0] * PAGING_ENTRIES_PER_TABLE
        self.directory[RECURSIVE_SLOT] = PageFlag.WRITABLE | PageFlag.PRESENT
        self.tables: dict[int, list[int]] = {}
        self.pse_enabled = False

    def map_page(self, virt: int, phys: int, flags: int) -> None:
        """Map the page at ``virt`` onto the frame at ``phys``.

        A new page table takes its directory flags from the first mapping
        made through it.
        """
        if not is_page_aligned(virt) or not is_page_aligned(phys):
            raise InvalidArgument("page addresses must be page aligned")
        flags = int(flags) & 0xFFFF
        dir_index = directory_index(virt)
        if dir_index == RECURSIVE_SLOT:
            raise InvalidArgument("the last directory slot maps the directory itself")
        table = self.tables.get(dir_index)
        if table is None:
            table = [0] * PAGING_ENTRIES_PER_TABLE
            self.tables[dir_index] = table
            self.directory[dir_index] = flags
        table[table_index(virt)] = phys | flags

    def map_range(self, virt: int, phys: int, count: int, flags: int) -> None:
        """Map ``count`` consecutive pages."""
        if not is_page_aligned(virt) or not is_page_aligned(phys):
            raise InvalidArgument("page addresses must be page aligned")
        for page in range(count):
            offset = page * PAGING_PAGE_SIZE
            self.map_page(virt + offset, phys + offset, flags)

    def map_from_to(self, virt: int, phys_begin: int, phys_end: int, flags: int) -> None:
        """Map the physical range ``[phys_begin, phys_end)`` starting at ``virt``."""
        if not is_page_aligned(virt) or not is_page_aligned(phys_begin):
            raise InvalidArgument("page addresses must be page aligned")
        if not is_page_aligned(phys_end):
            raise InvalidArgument("range end must be page aligned")
        if phys_end < phys_begin:
            raise InvalidArgument("range end lies below its start")
        total_pages = (phys_end - phys_begin) // PAGING_PAGE_SIZE
        self.map_range(virt, phys_begin, total_pages, flags)

    def translate(self, virt: int) -> int:
        """Physical address that ``virt`` maps to."""
        dir_index = directory_index(virt)
        entry = self.directory[dir_index]
        if entry & PageFlag.LARGE_PAGE:
            if not self.pse_enabled:
                raise KernelPanic("PSE directory entry found, but PSE is OFF")
            return _entry_addr(entry) + (virt & 0x3FFFFF)
        table = self.tables.get(dir_index)
        if table is None:
            raise InvalidArgument(f"address {virt:#x} has no page table")
        page = table[table_index(virt)]
        if not page:
            raise InvalidArgument(f"address {virt:#x} is not mapped")
        return _entry_addr(page) + frame_offset(virt)

    def clone(self, kernel: PageDirectory) -> PageDirectory:
        """Copy this directory, sharing the page tables it has in common with ``kernel``."""
        copy = PageDirectory()
        copy.pse_enabled = self.pse_enabled
        for index in range(RECURSIVE_SLOT):
            entry = self.directory[index]
            if not entry:
                continue
            table = self.tables.get(index)
            if table is None:
                copy.directory[index] = entry
                continue
            if kernel.tables.get(index) is table and kernel.directory[index] == entry:
                copy.tables[index] = table
                copy.directory[index] = entry
                continue
            copy.tables[index] = list(table)
            copy.directory[index] = _entry_flags(entry)
        return copy