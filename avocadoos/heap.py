"""Block heap with a one-byte-per-block allocation table, plus an allocation checker."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntFlag

from .errors import InvalidArgument, KernelError, OutOfMemory
from .strings import itoa

PAGING_PAGE_SIZE = 4096
KERNEL_HEAP_SIZE = 0x1000000
KERNEL_HEAP_BLOCK_SIZE = 4096
KERNEL_VIRTUAL_BASE = 0xC0000000

_MEMCHECK_NAME_LEN = 50
_POISON = 0xFF


class _Block(IntFlag):
    TAKEN = 0x01
    IS_FIRST = 0x40
    HAS_NEXT = 0x80


def size_to_nblocks(size: int, block_size: int = KERNEL_HEAP_BLOCK_SIZE) -> int:
    """Number of blocks needed to hold ``size`` bytes."""
    return size // block_size + (1 if size % block_size else 0)


def _align_up(addr: int, alignment: int = PAGING_PAGE_SIZE) -> int:
    return addr if addr % alignment == 0 else addr - addr % alignment + alignment


def kernel_heap_layout(kernel_end: int) -> tuple[int, int, int]:
    """Where the kernel heap goes after the kernel image.

    Returns ``(table_start, heap_start, heap_end)``: the allocation table
    starts at the first page boundary after ``kernel_end`` and the heap at
    the first page boundary after the table.
    """
    table_start = _align_up(kernel_end)
    blocks = KERNEL_HEAP_SIZE // KERNEL_HEAP_BLOCK_SIZE
    heap_start = _align_up(table_start + blocks)
    return table_start, heap_start, heap_start + KERNEL_HEAP_SIZE


class Heap:
    """Next-fit block allocator over a simulated memory region."""

    def __init__(
        self,
        base_addr: int,
        end_addr: int,
        block_size: int = KERNEL_HEAP_BLOCK_SIZE,
    ) -> None:
        if block_size <= 0:
            raise InvalidArgument("block size must be positive")
        if base_addr % block_size or end_addr % block_size:
            raise InvalidArgument("heap bounds must be block aligned")
        if end_addr <= base_addr:
            raise InvalidArgument("heap end must lie above its base")
        self.base_addr = base_addr
        self.end_addr = end_addr
        self.block_size = block_size
        self.table = bytearray((end_addr - base_addr) // block_size)
        self.in_use = 0
        self.last_allocated_block = 0
        self._memory = bytearray(end_addr - base_addr)

    def _find_first_block(self, n_blocks: int) -> int:
        length = len(self.table)
        remaining = n_blocks
        found: int | None = None
        start = (self.last_allocated_block + 1) % length
        for step in range(length):
            index = (start + step) % length
            if step and index == self.last_allocated_block:
                break
            if step and index == 0:
                # a run of blocks cannot wrap past the end of the table
                found, remaining = None, n_blocks
            if self.table[index] & _Block.TAKEN:
                found, remaining = None, n_blocks
                self.last_allocated_block = 0
                continue
            if found is None:
                found = index
            remaining -= 1
            self.last_allocated_block = index
            if not remaining:
                return found
        raise OutOfMemory(f"no run of {n_blocks} free blocks")

    def _reserve(self, first: int, n_blocks: int) -> None:
        for index in range(first, first + n_blocks):
            self.table[index] = _Block.TAKEN | _Block.HAS_NEXT
        self.table[first] |= _Block.IS_FIRST
        self.table[first + n_blocks - 1] &= ~_Block.HAS_NEXT & 0xFF

    def malloc(self, size: int) -> int:
        """Reserve enough blocks for ``size`` bytes and return their address."""
        n_blocks = size_to_nblocks(size, self.block_size)
        if n_blocks <= 0:
            raise InvalidArgument("zero-length allocations are not allowed")
        first = self._find_first_block(n_blocks)
        self._reserve(first, n_blocks)
        self.in_use += n_blocks
        return self.block_to_addr(first)

    def zalloc(self, size: int) -> int:
        """Like :meth:`malloc`, with the first ``size`` bytes zeroed."""
        addr = self.malloc(size)
        self.write(addr, bytes(size))
        return addr

    def free(self, addr: int) -> None:
        """Release the allocation starting at ``addr``.

        The first block is poisoned with 0xFF bytes. An address that is not
        the start of an allocation is otherwise ignored.
        """
        block = self.addr_to_block(addr)
        offset = block * self.block_size
        self._memory[offset : offset + self.block_size] = bytes([_POISON]) * self.block_size

        if not self.table[block] & _Block.IS_FIRST:
            return

        self.table[block] = 0
        self.in_use -= 1
        block += 1
        while block < len(self.table):
            entry = self.table[block]
            if entry == 0 or entry & _Block.IS_FIRST:
                break
            self.table[block] = 0
            self.in_use -= 1
            block += 1

    def _check_range(self, addr: int, size: int) -> int:
        offset = addr - self.base_addr
        if offset < 0 or size < 0 or offset + size > len(self._memory):
            raise InvalidArgument("address range outside the heap")
        return offset

    def read(self, addr: int, size: int) -> bytes:
        offset = self._check_range(addr, size)
        return bytes(self._memory[offset : offset + size])

    def write(self, addr: int, data: bytes) -> None:
        offset = self._check_range(addr, len(data))
        self._memory[offset : offset + len(data)] = data

    def count_used_blocks(self) -> int:
        return sum(1 for entry in self.table if entry & _Block.TAKEN)

    def addr_to_block(self, addr: int) -> int:
        if not self.base_addr <= addr < self.end_addr:
            raise InvalidArgument("address outside the heap")
        return (addr - self.base_addr) // self.block_size

    def block_to_addr(self, block: int) -> int:
        if not 0 <= block < len(self.table):
            raise InvalidArgument("block index outside the heap")
        return self.base_addr + block * self.block_size

    def used_bytes(self) -> int:
        return self.in_use * self.block_size

    def free_bytes(self) -> int:
        return (len(self.table) - self.in_use) * self.block_size


@dataclass
class _Allocation:
    blocks: int
    ptr: int
    filename: str
    function: str
    line: int


class MemoryChecker:
    """Records who allocated each heap block to catch leaks and double frees."""

    def __init__(self, heap: Heap) -> None:
        self.heap = heap
        self._allocations: dict[int, _Allocation] = {}

    def allocate(self, addr: int, size: int, filename: str, function: str, line: int) -> None:
        if not self.heap.base_addr <= addr < self.heap.end_addr:
            raise InvalidArgument("wrong pointer: too low or too high")
        block = self.heap.addr_to_block(addr)
        self._allocations[block] = _Allocation(
            blocks=size_to_nblocks(size, self.heap.block_size),
            ptr=addr,
            filename=filename[:_MEMCHECK_NAME_LEN],
            function=function[:_MEMCHECK_NAME_LEN],
            line=line,
        )

    def free(self, addr: int) -> None:
        block = self.heap.addr_to_block(addr)
        entry = self._allocations.get(block)
        if entry is None or entry.blocks == 0:
            raise KernelError("double free")
        del self._allocations[block]

    def report(self, skip: str = "") -> list[str]:
        """One line per live allocation, skipping those made by ``skip``."""
        return [
            f"alloc: {entry.filename}:{entry.function}:{itoa(entry.line)} addr: {itoa(entry.ptr)}"
            for _, entry in sorted(self._allocations.items())
            if entry.blocks and entry.function != skip
        ]