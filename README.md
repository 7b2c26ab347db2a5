# avocadoos

The pieces of a small 32-bit hobby kernel, written as an ordinary Python
library. The parts can be used one at a time: read files out of a FAT16
disk image, watch a block allocator at work, build page tables, or encode
GDT and IDT descriptors as the processor expects them.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## What is inside

| Module | Purpose |
| --- | --- |
| `avocadoos.errors` | `KernelError` and its subclasses (`IOFailure`, `NoMedium`, `WrongMediumType`, ...), plus `error_for_errno` |
| `avocadoos.strings` | the kernel's C-style string helpers: `strncmp`, `strcasecmp`, `itoa`, `to_upper`, ... |
| `avocadoos.ringbuffer` | `CircularBuffer`, a fixed-size ring that refuses pushes when full |
| `avocadoos.circular_list` | `CircularList`, a doubly linked circular list with index insert, pop and swap |
| `avocadoos.heap` | `Heap`, a next-fit block allocator with a one-byte-per-block table, `kernel_heap_layout`, and `MemoryChecker` for leak reports |
| `avocadoos.frames` | `GeneralPurposeRegisters` and `InterruptFrame` packing, `field_offsets` and `asm_constants()` |
| `avocadoos.terminal` | `Terminal`, an 80x25 VGA text buffer with `Colour`s, `splash` and `Terminal.panic` |
| `avocadoos.descriptors` | GDT segment and TSS encoding, IDT gates, `irq_mask_port_bit` and `InterruptDispatcher` |
| `avocadoos.paging` | `PageDirectory` with two-level x86 page tables and address translation |
| `avocadoos.disk` | `Disk` over an image, `DiskRegistry` and byte-addressed `DiskStream` |
| `avocadoos.fstypes` | `OpenMode`, `Whence`, `Stat` and `mode_from_string` |
| `avocadoos.fat16` | `Fat16Volume`: probe a disk, walk directories, open and read files |
| `avocadoos.path_parser` | `parse_path` for drive paths such as `0:/FOLDER1/ASD1` |
| `avocadoos.file_table` | `FileTable`, the table of open file numbers |
| `avocadoos.vfs` | `FileSystem` with `fopen`, `fread`, `fseek`, `fstat` and `fclose` |

## Reading a file from a FAT16 image

```python
from avocadoos.disk import Disk, DiskRegistry
from avocadoos.fat16 import Fat16Volume
from avocadoos.file_table import FileTable
from avocadoos.vfs import FileSystem

disk = Disk.from_path("image.bin")
fs = FileSystem(DiskRegistry([disk]), FileTable(100))
fs.register(Fat16Volume)
fs.probe(disk)

handle = fs.fopen("0:/MOTD.TXT", "r")
size = fs.fstat(handle.fileno).st_size
print(fs.fread(handle, 1, size).decode("ascii"))
fs.fclose(handle)
```

Paths start with a drive digit followed by `:/`. Names use the short
8.3 form stored on the volume, so `MOTD.TXT` rather than `motd.txt`.
Only the first character of the mode string counts (`r`, `w` or `a`).
Failures raise subclasses of `avocadoos.errors.KernelError`.

## Other parts

```python
from avocadoos.heap import Heap
from avocadoos.paging import PageDirectory, PageFlag

heap = Heap(0x100000, 0x110000, 4096)
addr = heap.zalloc(6000)          # takes two 4 KiB blocks
heap.free(addr)

directory = PageDirectory()
directory.map_page(0x400000, 0x200000, PageFlag.PRESENT | PageFlag.WRITABLE)
assert directory.translate(0x400123) == 0x200123
```

## Command-line demos

Two small programs show the data structures in action:

```
avocadoos-ringbuffer
avocadoos-list
```

`avocadoos-ringbuffer` fills a three-slot ring past its capacity and drains
it, reporting each push and pop, then prints the slot contents.
`avocadoos-list` builds a circular list, removes nodes from the head, tail
and by index, inserts by index, swaps nodes and prints the list after each
step.

## What it does not do

- The FAT16 driver only reads. Opening in `w` or `a` mode is accepted but
  nothing can be written, created or deleted.
- Nothing here boots or touches hardware. Disks are byte images in memory,
  page tables and the heap are simulated, and the terminal is a cell
  buffer rather than video memory.
- There are no processes, tasks or scheduler. `InterruptDispatcher`
  returns the interrupted frame unchanged on a timer tick.